from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from hostsfile.config import HostsfileConfig
from hostsfile.log import HostsfileLogger


@pytest.fixture(autouse=True)
def reset_os_environ() -> Iterator[None]:
    """Reset os.environ after each test to avoid side effects."""
    original_environ = os.environ.copy()
    yield
    # Modify the environment in place to preserve references
    os.environ.clear()
    os.environ.update(original_environ)


@pytest.fixture(autouse=True)
def default_conf(tmp_path_factory: pytest.TempPathFactory) -> Iterator[HostsfileConfig]:
    """Use the default config for tests, with the log file in a temporary directory."""
    try:
        conf = HostsfileConfig.get_default_config()
        conf.log_file = tmp_path_factory.mktemp("log") / "hostsfile.log"
        # Pretend we loaded the config from a file
        HostsfileConfig._instance = conf
        HostsfileConfig._init = True
        yield conf
    finally:
        HostsfileConfig._reset_instance()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Leave logging disabled after each test."""
    yield
    HostsfileLogger().stop_logging()


@pytest.fixture()
def hosts_path(tmp_path: Path) -> Path:
    """A small hosts file on disk."""
    path = tmp_path / "hosts"
    path.write_text(
        "# static entries\n"
        "127.0.0.1 localhost\n"
        "::1 localhost ip6-localhost\n"
        "\n"
        "10.0.0.1 bar baz\n"
    )
    return path
