"""Read, modify and write hosts files."""

from __future__ import annotations

from hostsfile.__about__ import __version__
from hostsfile.models import Blank, Comment, Entry, Hostsfile, LineRecord, decode, encode

__all__ = [
    "Blank",
    "Comment",
    "Entry",
    "Hostsfile",
    "LineRecord",
    "__version__",
    "decode",
    "encode",
]
