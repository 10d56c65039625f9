"""Manage logging state for the application.

Implements the HostsfileLogger singleton, which can be used to start, stop,
and configure logging. Log records go to a single handler on the root
logger, writing either to a file or to stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NamedTuple, Self

from hostsfile.types import LogLevel

LOGGING_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"


class LoggingStatus(NamedTuple):
    """Information about the current logging state."""

    enabled: bool
    file: Path | None
    level: LogLevel

    def as_str(self) -> str:
        """Get a string representation of the logging status."""
        return f"{self.level} > {self.file or 'stderr'}" if self.enabled else "disabled"


class HostsfileLogger:
    """Singleton that manages logging state."""

    _instance = None
    _handler: logging.Handler | None = None
    _previous_level: int = logging.WARNING
    _file: Path | None = None
    _level: LogLevel = LogLevel.WARNING

    def __new__(cls) -> Self:
        """Create a new instance of the logger, or return the existing instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def status(self) -> LoggingStatus:
        """Get information about the current logging state."""
        return LoggingStatus(self._handler is not None, self._file, self._level)

    def start_logging(
        self,
        logfile: Path | None,
        level: LogLevel | str = LogLevel.WARNING,
        fmt: str = LOGGING_FORMAT,
    ) -> None:
        """Start logging to the specified file, or stderr if no file is given.

        Restarts logging if already enabled.
        """
        level = LogLevel(level)
        if self._handler is not None:
            self.stop_logging()

        try:
            if logfile is None:
                handler: logging.Handler = logging.StreamHandler(sys.stderr)
            else:
                handler = logging.FileHandler(logfile, encoding="utf-8")
        except Exception as e:
            print(f"Failed to set up logging: {e}", file=sys.stderr)
            return

        handler.setLevel(level.as_int())
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))

        root = logging.getLogger()
        self._previous_level = root.level
        root.setLevel(level.as_int())
        root.addHandler(handler)

        self._handler = handler
        self._file = logfile
        self._level = level

    def stop_logging(self) -> None:
        """Stop logging, flushing and closing the handler."""
        if self._handler is not None:
            root = logging.getLogger()
            root.removeHandler(self._handler)
            root.setLevel(self._previous_level)
            self._handler.close()
        self._handler = None
        self._file = None
