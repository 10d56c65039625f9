"""Custom exceptions for hostsfile.

Exceptions are split into errors and warnings. Errors are not recoverable
by the user changing their input (a broken hosts file, a failed write),
warnings are. See `hostsfile.exception_handler` for how each kind is
logged and displayed.
"""

from __future__ import annotations


class HostsfileException(Exception):
    """Base exception class for hostsfile."""

    pass


class HostsfileError(HostsfileException):
    """Exception class for errors.

    Errors are not recoverable and stem from failures that
    the user cannot be expected to resolve by changing the command.
    """

    pass


class HostsfileWarning(HostsfileException):
    """Exception class for warnings.

    Warnings should be recoverable by changing the user input.
    """

    pass


class ParseError(HostsfileError):
    """Error class for a hosts file that cannot be decoded."""

    def __init__(self, reason: str, lineno: int | None = None, line: str | None = None):
        """Initialize a ParseError.

        :param reason: Short description of what is wrong, e.g. "invalid entry".
        :param lineno: 1-based number of the offending line, if known.
        :param line: The offending line (trimmed), if known.
        """
        self.reason = reason
        self.lineno = lineno
        self.line = line
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.lineno is None:
            return self.reason
        return f"{self.reason} on line {self.lineno}: {self.line}"


class ValidationError(HostsfileError):
    """Error class for invalid arguments to a model mutation."""

    pass


class FileError(HostsfileError):
    """Error class for file errors."""

    pass


class InputFailure(HostsfileWarning, ValueError):
    """Warning class for input failure."""

    pass


class HostnameNotFound(HostsfileWarning):
    """Warning class for a hostname that is not present in the hosts file."""

    pass
