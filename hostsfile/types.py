"""Typing definitions for hostsfile."""

from __future__ import annotations

import ipaddress
import logging
from enum import StrEnum
from typing import Any, Literal, TypeAlias

IP_Version: TypeAlias = Literal[4, 6]
IP_AddressT = ipaddress.IPv4Address | ipaddress.IPv6Address


class LogLevel(StrEnum):
    """Enum for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def _missing_(cls, value: Any) -> LogLevel:
        """Case-insensitive lookup when normal lookup fails."""
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        from hostsfile.exceptions import InputFailure  # noqa: PLC0415

        raise InputFailure(f"Invalid log level: {value}")

    @classmethod
    def choices(cls) -> list[str]:
        """Return a list of all log levels as strings."""
        return [str(c) for c in list(cls)]

    def as_int(self) -> int:
        """Convert the log level to an integer."""
        _nameToLevel = {
            self.CRITICAL: logging.CRITICAL,
            self.ERROR: logging.ERROR,
            self.WARNING: logging.WARNING,
            self.INFO: logging.INFO,
            self.DEBUG: logging.DEBUG,
        }
        return _nameToLevel[self]
