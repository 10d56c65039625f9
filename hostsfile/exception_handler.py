"""Standalone exception handling functions for hostsfile.

Presentation logic lives here rather than on the exception classes, so the
command line can handle any exception (including plain `OSError`) the same
way.
"""

from __future__ import annotations

import logging
import sys

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.formatted_text.html import html_escape

logger = logging.getLogger(__name__)


def is_error(exc: Exception) -> bool:
    """Determine if an exception is an error (non-recoverable) vs a warning (recoverable).

    Errors are styled in red, warnings in italics. Exceptions that do not
    belong to hostsfile are treated as errors.

    :param exc: The exception to classify.
    :returns: True if the exception should be treated as an error.
    """
    from hostsfile.exceptions import HostsfileWarning  # noqa: PLC0415

    return not isinstance(exc, HostsfileWarning)


def format_exception(exc: Exception) -> str:
    """Format an exception for terminal display with HTML markup.

    :param exc: The exception to format.
    :returns: HTML-formatted string for display with prompt_toolkit.
    """
    msg = html_escape(str(exc))
    if is_error(exc):
        return f"<ansired>ERROR: {msg}</ansired>"
    return f"<i>{msg}</i>"


def log_exception(exc: Exception) -> None:
    """Log an exception.

    Errors are logged at ERROR level, warnings at WARNING level.

    :param exc: The exception to log.
    """
    from hostsfile.exceptions import HostsfileException  # noqa: PLC0415

    msg = str(exc)
    if not isinstance(exc, HostsfileException):
        logger.exception(msg, exc_info=exc)
    elif is_error(exc):
        logger.error(msg)
    else:
        logger.warning(msg)


def print_exception(exc: Exception) -> None:
    """Print an exception with appropriate formatting to stderr.

    :param exc: The exception to print.
    """
    print_formatted_text(HTML(format_exception(exc)), file=sys.stderr)


def handle_exception(exc: Exception) -> None:
    """Log and print an exception with appropriate formatting.

    This is the main entry point for exception handling.

    :param exc: The exception to handle.
    """
    log_exception(exc)
    print_exception(exc)
