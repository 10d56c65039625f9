"""In-memory model of a hosts file.

A hosts file is decoded into a `Hostsfile`: an ordered list of line records,
one per line of the file. Each record is a `Blank` line, a `Comment` or an
`Entry` binding a set of hostnames to an IP address. Records keep the order
of the file so that encoding the model writes comments and blank lines back
where they were.

Entries are mutated through `Hostsfile.set()` and `Hostsfile.remove()`.
A hostname may be bound to one IPv4 and one IPv6 address at the same time,
but never to two addresses of the same family.

Known lossy behavior: a trailing comment on an entry line
(`127.0.0.1 localhost # note`) is dropped when the line is decoded.
"""

from __future__ import annotations

import io
import ipaddress
import logging
from collections.abc import Iterable, Iterator
from itertools import takewhile
from typing import IO, Annotated, Literal

from pydantic import BaseModel, Field

from hostsfile.exceptions import ParseError, ValidationError
from hostsfile.types import IP_AddressT, IP_Version

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
COMMENT_CHAR = "#"


class Blank(BaseModel):
    """An empty line."""

    kind: Literal["blank"] = "blank"

    def to_line(self) -> str:
        """Return the line as written to the file, without line terminator."""
        return ""


class Comment(BaseModel):
    """A comment line, kept verbatim (minus surrounding whitespace)."""

    kind: Literal["comment"] = "comment"
    text: str

    def to_line(self) -> str:
        """Return the line as written to the file, without line terminator."""
        return self.text


class Entry(BaseModel):
    """An IP address and the hostnames bound to it."""

    kind: Literal["entry"] = "entry"
    address: IP_AddressT
    hostnames: set[str] = Field(min_length=1)

    @property
    def version(self) -> IP_Version:
        """The IP version (address family) of the entry."""
        return self.address.version

    def same_family(self, address: IP_AddressT) -> bool:
        """Check if `address` belongs to the same address family as this entry."""
        return self.version == address.version

    def to_line(self) -> str:
        """Return the line as written to the file, without line terminator.

        Hostnames are sorted so the output does not depend on set ordering.
        """
        return " ".join([str(self.address), *sorted(self.hostnames)])


LineRecord = Annotated[Blank | Comment | Entry, Field(discriminator="kind")]
"""A single line of a hosts file."""


class Hostsfile(BaseModel):
    """A hosts file. Each record matches a single line in the file."""

    records: list[LineRecord] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> Hostsfile:
        """Decode a hosts file from a string.

        :param text: The contents of a hosts file.
        :returns: The decoded hosts file.
        :raises ParseError: If a line cannot be decoded.
        """
        return decode(io.BytesIO(text.encode(ENCODING)))

    def to_text(self) -> str:
        """Encode the hosts file to a string."""
        return "".join(f"{record.to_line()}\n" for record in self.records)

    def entries(self) -> Iterator[Entry]:
        """Iterate over the entry records, in file order."""
        for record in self.records:
            if isinstance(record, Entry):
                yield record

    def lookup(self, hostname: str) -> list[IP_AddressT]:
        """Get the addresses bound to a hostname, in file order."""
        return [entry.address for entry in self.entries() if hostname in entry.hostnames]

    def set(self, address: IP_AddressT, hostname: str) -> None:
        """Bind a hostname to an address.

        If the hostname is already bound to another address of the same
        family, it is moved to `address`. Bindings to an address of the other
        family are left alone. Setting a binding that already exists does
        nothing.

        :param address: The address to bind the hostname to.
        :param hostname: The hostname.
        :raises ValidationError: If the hostname is empty or cannot be written
            to a hosts file.
        """
        if not hostname:
            raise ValidationError("empty hostname")
        if hostname.startswith(COMMENT_CHAR) or len(hostname.split()) != 1:
            raise ValidationError(f"invalid hostname: {hostname!r}")

        bound = False
        for entry in self.entries():
            if hostname not in entry.hostnames or not entry.same_family(address):
                continue
            if entry.address == address and not bound:
                bound = True
                continue
            logger.debug("Removing %s from %s", hostname, entry.address)
            entry.hostnames.discard(hostname)
        self._compact()

        if bound:
            logger.debug("%s is already bound to %s", hostname, address)
            return
        logger.debug("Adding %s with address %s", hostname, address)
        self.records.append(Entry(address=address, hostnames={hostname}))

    def remove(self, hostname: str) -> bool:
        """Remove all references to a hostname.

        :param hostname: The hostname to remove.
        :returns: True if the hostname was found in any entry.
        """
        found = False
        for entry in self.entries():
            if hostname in entry.hostnames:
                logger.debug("Removing %s from %s", hostname, entry.address)
                entry.hostnames.discard(hostname)
                found = True
        self._compact()
        if not found:
            logger.debug("Hostname %s not found", hostname)
        return found

    def _compact(self) -> None:
        """Drop entries that no longer have any hostnames."""
        self.records = [
            record
            for record in self.records
            if not (isinstance(record, Entry) and not record.hostnames)
        ]


def _decode_line(line: str, lineno: int) -> LineRecord:
    line = line.strip()
    if not line:
        return Blank()
    if line.startswith(COMMENT_CHAR):
        return Comment(text=line)

    fields = line.split()
    if len(fields) < 2:
        raise ParseError("invalid entry", lineno, line)
    try:
        address = ipaddress.ip_address(fields[0])
    except ValueError as e:
        raise ParseError("invalid address", lineno, line) from e

    # A field starting with '#' begins a trailing comment, which is discarded
    hostnames = set(takewhile(lambda name: not name.startswith(COMMENT_CHAR), fields[1:]))
    if not hostnames:
        raise ParseError("invalid entry", lineno, line)
    return Entry(address=address, hostnames=hostnames)


def decode(stream: IO[bytes] | Iterable[bytes]) -> Hostsfile:
    """Decode the raw text of a hosts file.

    Lines may end with `\\n` or `\\r\\n`. Decoding stops at the first
    malformed line; no partial model is returned.

    :param stream: Binary stream (or any iterable of byte lines) to read from.
    :returns: The decoded hosts file.
    :raises ParseError: If a line is not valid UTF-8, has fewer than two
        fields, or does not start with a valid IP address.
    """
    records: list[LineRecord] = []
    for lineno, raw in enumerate(stream, start=1):
        try:
            line = raw.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise ParseError("invalid encoding", lineno, repr(raw)) from e
        records.append(_decode_line(line, lineno))
    return Hostsfile(records=records)


def encode(hostsfile: Hostsfile, stream: IO[bytes]) -> None:
    """Write the text representation of a hosts file.

    Errors raised by the stream are propagated as is.

    :param hostsfile: The hosts file to encode.
    :param stream: Binary stream to write to.
    """
    for record in hostsfile.records:
        stream.write(f"{record.to_line()}\n".encode(ENCODING))
