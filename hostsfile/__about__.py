"""Metadata about the hostsfile package."""

from __future__ import annotations

__version__ = "1.1.0"


def get_version_extended() -> str:
    """Get the program name and version as shown by `hostsfile version`."""
    return f"hostsfile {__version__}"
