"""File system utilities."""

from __future__ import annotations

import functools
import logging
import os
import stat
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any, BinaryIO

from hostsfile.exceptions import InputFailure

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = ".hostsfile-temp."


def get_writable_file_or_tempfile(path: Path) -> Path:
    """Ensure a writable file path exists, creating it if necessary, or fall back to a temporary file.

    :param path: The desired file path.
    :returns: The original path if writable, otherwise a temporary file path.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists() and path.is_dir():
            raise IsADirectoryError(f"Path {path} is a directory, not a file")
        if path.exists():
            check_writable(path)
        else:
            path.touch(exist_ok=True)
    except OSError as e:
        import time  # noqa: PLC0415

        logger.error("Unable to create file at %s: %s", path, e)

        filename = path.name or f"hostsfile-temp-{int(time.time())}"
        tmpfile = get_temp_dir() / filename
        try:
            tmpfile.touch(exist_ok=True)
            check_writable(tmpfile)
        except Exception as tmp_err:
            raise OSError(f"Unable to create temporary file at {tmpfile}: {tmp_err}") from tmp_err
        logger.warning("Using temporary file at %s", tmpfile)
        return tmpfile
    return path


def check_writable(path: Path) -> None:
    """Check if the given path is writable.

    Opens the file in append mode, so existing content is left alone.
    """
    with path.open("a"):
        pass


@functools.cache
def get_temp_dir() -> Path:
    """Get a temporary directory for use by hostsfile.

    Always returns the same directory for the lifetime of the process.
    """
    suffix = f".{os.getuid()}" if hasattr(os, "getuid") else ""
    return Path(tempfile.mkdtemp(prefix="hostsfile.", suffix=suffix))


def to_path(value: Any) -> Path:
    """Convert a value to a Path object with expanded user and resolved symlinks."""
    try:
        p = Path(value)
        try:
            p = p.expanduser()
        except RuntimeError:  # no homedir
            pass
        return p.resolve()
    except Exception as e:
        raise InputFailure(f"Invalid path {value}: {e}") from e


def data_piped_in(stream: IO[Any] | None = None) -> bool:
    """Check whether data is piped in on stdin (or the given stream).

    Terminals and other character devices (such as /dev/null) do not count.

    :param stream: Stream to check, defaults to `sys.stdin`.
    :returns: True if the stream is a pipe or a regular file.
    """
    stream = sys.stdin if stream is None else stream
    if stream is None:
        return False
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (OSError, ValueError):
        # No file descriptor (closed, or replaced by a non-file object)
        return False
    return not stat.S_ISCHR(mode)


def temp_file_for(path: Path) -> tuple[BinaryIO, Path]:
    """Create a temporary file destined to replace `path`.

    The file is created in the same directory as `path`, so it can be
    renamed over it. It gets the permissions of `path` and, on POSIX
    systems, the same owner and group.

    :param path: The file that will be replaced.
    :returns: The temporary file opened for binary writing, and its path.
    """
    st = path.stat()
    fd, name = tempfile.mkstemp(dir=path.parent, prefix=TEMP_FILE_PREFIX)
    tmp_path = Path(name)
    try:
        os.chmod(tmp_path, stat.S_IMODE(st.st_mode))
        if hasattr(os, "chown"):
            os.chown(tmp_path, st.st_uid, st.st_gid)
    except OSError:
        os.close(fd)
        tmp_path.unlink(missing_ok=True)
        raise
    return os.fdopen(fd, "wb"), tmp_path


def replace_atomically(path: Path, write: Callable[[BinaryIO], None]) -> None:
    """Replace the contents of `path` with whatever `write` writes.

    The new content is written to a temporary file which is then renamed
    over `path`. If anything fails the temporary file is removed and `path`
    is left untouched.

    :param path: The file to replace.
    :param write: Callable receiving a binary stream to write the new content to.
    """
    f, tmp_path = temp_file_for(path)
    try:
        with f:
            write(f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.info("Replaced %s", path)
