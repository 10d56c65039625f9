from __future__ import annotations

import io
import os
import stat
from pathlib import Path
from typing import BinaryIO

import pytest

from hostsfile.utilities.fs import (
    TEMP_FILE_PREFIX,
    data_piped_in,
    get_writable_file_or_tempfile,
    replace_atomically,
    temp_file_for,
    to_path,
)


def test_get_writable_file_or_tempfile_ok(tmp_path: Path) -> None:
    file_path = tmp_path / "testfile.txt"
    result_path = get_writable_file_or_tempfile(file_path)
    assert result_path == file_path
    assert result_path.is_file()


def test_get_writable_file_or_tempfile_keeps_content(tmp_path: Path) -> None:
    file_path = tmp_path / "testfile.txt"
    file_path.write_text("127.0.0.1 localhost\n")
    result_path = get_writable_file_or_tempfile(file_path)
    assert result_path == file_path
    assert file_path.read_text() == "127.0.0.1 localhost\n"


def test_get_writable_file_or_tempfile_dir_fail(tmp_path: Path) -> None:
    dir_path = tmp_path / "somedir"
    dir_path.mkdir()
    result_path = get_writable_file_or_tempfile(dir_path)
    assert result_path != dir_path
    assert result_path.is_file()


@pytest.mark.parametrize(
    "as_path",
    [
        pytest.param(True, id="as Path"),
        pytest.param(False, id="as str"),
    ],
)
def test_to_path_user_home_expansion(as_path: bool) -> None:
    os.environ["HOME"] = "/some/path/to/foo"
    inp = "~/hosts"
    result = to_path(Path(inp) if as_path else inp)
    assert result == Path("/some/path/to/foo/hosts")


def test_to_path_relative() -> None:
    assert to_path("etc/hosts") == (Path.cwd() / "etc/hosts").resolve()


def test_data_piped_in_pipe() -> None:
    r, w = os.pipe()
    try:
        with os.fdopen(r, "rb") as stream:
            assert data_piped_in(stream) is True
    finally:
        os.close(w)


def test_data_piped_in_regular_file(tmp_path: Path) -> None:
    path = tmp_path / "hosts"
    path.write_text("")
    with path.open("rb") as stream:
        # A redirected file is not a terminal either
        assert data_piped_in(stream) is True


def test_data_piped_in_no_fileno() -> None:
    assert data_piped_in(io.BytesIO(b"127.0.0.1 localhost\n")) is False


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_temp_file_for_copies_mode(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_text("")
    hosts.chmod(0o640)

    f, tmp = temp_file_for(hosts)
    with f:
        f.write(b"x")
    assert tmp.parent == hosts.parent
    assert tmp.name.startswith(TEMP_FILE_PREFIX)
    assert stat.S_IMODE(tmp.stat().st_mode) == 0o640
    assert tmp.stat().st_uid == hosts.stat().st_uid


def test_temp_file_for_missing_target(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        temp_file_for(tmp_path / "missing")


def test_replace_atomically(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_bytes(b"old\n")

    def write(f: BinaryIO) -> None:
        f.write(b"new\n")

    replace_atomically(hosts, write)
    assert hosts.read_bytes() == b"new\n"
    assert [p.name for p in tmp_path.iterdir()] == ["hosts"]


def test_replace_atomically_failure_leaves_target(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_bytes(b"old\n")

    def write(f: BinaryIO) -> None:
        f.write(b"partial")
        raise ValueError("bad data")

    with pytest.raises(ValueError, match="bad data"):
        replace_atomically(hosts, write)
    assert hosts.read_bytes() == b"old\n"
    assert [p.name for p in tmp_path.iterdir()] == ["hosts"]


@pytest.mark.skipif(not os.path.exists(os.devnull) or os.name == "nt", reason="POSIX devices")
def test_data_piped_in_char_device() -> None:
    with open(os.devnull, "rb") as stream:
        assert data_piped_in(stream) is False
