"""Directory and file paths for the application."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import platformdirs

logger = logging.getLogger(__name__)

_pdirs = platformdirs.PlatformDirs(appname="hostsfile", appauthor=False)


# Default file names and paths
CONFIG_DIR = _pdirs.user_config_path
CONFIG_FILE_NAME = "hostsfile.conf"
CONFIG_FILE_DEFAULT = CONFIG_DIR / CONFIG_FILE_NAME
"""Default config file path."""

LOG_DIR = _pdirs.user_log_path
LOG_FILE_NAME = "hostsfile.log"
LOG_FILE_DEFAULT = LOG_DIR / LOG_FILE_NAME
"""Default log file path."""

# Config file locations, ordered by precedence
DEFAULT_CONFIG_PATH: tuple[Path, ...] = tuple(
    (
        CONFIG_FILE_DEFAULT,
        # Unresolved to avoid issues if home dir is not available
        Path("~") / ".config" / CONFIG_FILE_NAME,
        _pdirs.site_config_path / CONFIG_FILE_NAME,
        Path("/etc") / CONFIG_FILE_NAME,
    )
)


def default_hosts_file() -> Path:
    """Get the location of the hosts file on the current platform."""
    if sys.platform == "win32":
        system_root = os.environ.get("SystemRoot", r"C:\Windows")
        return Path(system_root) / "System32" / "drivers" / "etc" / "hosts"
    return Path("/etc/hosts")


HOSTS_FILE_DEFAULT = default_hosts_file()
"""Hosts file used when none is configured."""
