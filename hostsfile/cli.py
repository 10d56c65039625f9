"""Commands of the hostsfile command line interface.

Each command reads a hosts file (or stdin when data is piped in), decodes it,
applies its changes and encodes the result either to stdout (dry run) or to
a temporary file that atomically replaces the hosts file.
"""

from __future__ import annotations

import argparse
import contextlib
import functools
import ipaddress
import logging
import os
import sys
from collections.abc import Callable, Sequence
from typing import IO

from rich.console import Console
from rich.markup import escape

from hostsfile.__about__ import get_version_extended
from hostsfile.config import HostsfileConfig
from hostsfile.exception_handler import handle_exception
from hostsfile.exceptions import FileError, HostnameNotFound, InputFailure
from hostsfile.models import Hostsfile, decode, encode
from hostsfile.types import IP_AddressT, LogLevel
from hostsfile.utilities.fs import data_piped_in, replace_atomically

logger = logging.getLogger(__name__)

console = Console(stderr=True, highlight=False, soft_wrap=True)

USAGE = """\
Hostsfile manages your /etc/hosts file.

The commands are:

  add     <hostname> [<hostname>...] <ip>
  remove  <hostname> [<hostname>...]
  version
  help    You're looking at it.
"""

ADD_USAGE = """\
Add a set of hostnames to your /etc/hosts file.

The last argument is the IP address to use for all hostnames.

Example:

  hostsfile add www.facebook.com www.twitter.com 127.0.0.1
  hostsfile add --dry-run www.facebook.com 127.0.0.1
"""

REMOVE_USAGE = """\
Remove a set of hostnames from your /etc/hosts file.

Example:

  hostsfile remove www.facebook.com www.twitter.com
  hostsfile remove --dry-run www.facebook.com
"""


def parse_address(value: str) -> IP_AddressT:
    """Parse an IP address given on the command line.

    Only literal addresses are accepted; names are never resolved.

    :param value: The address as typed by the user.
    :returns: The parsed address.
    :raises InputFailure: If the value is not an IPv4 or IPv6 address.
    """
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        raise InputFailure(f"Invalid IP address: {value}") from None


def do_add(source: IO[bytes], sink: IO[bytes], args: Sequence[str]) -> Hostsfile:
    """Bind hostnames to an address.

    :param source: Stream to read the hosts file from.
    :param sink: Stream to write the updated hosts file to.
    :param args: Hostnames followed by the IP address.
    :returns: The updated hosts file.
    """
    if len(args) < 2:
        raise InputFailure("Please provide a hostname and an IP address to add")
    address = parse_address(args[-1])
    hostsfile = decode(source)
    for hostname in args[:-1]:
        hostsfile.set(address, hostname)
    encode(hostsfile, sink)
    return hostsfile


def do_remove(source: IO[bytes], sink: IO[bytes], args: Sequence[str]) -> list[str]:
    """Remove hostnames.

    :param source: Stream to read the hosts file from.
    :param sink: Stream to write the updated hosts file to.
    :param args: Hostnames to remove.
    :returns: The hostnames that were not found.
    """
    if not args:
        raise InputFailure("Please provide a hostname to remove")
    hostsfile = decode(source)
    missing = [hostname for hostname in args if not hostsfile.remove(hostname)]
    encode(hostsfile, sink)
    return missing


def check_replaceable(config: HostsfileConfig) -> None:
    """Check that the configured hosts file exists and can be written to."""
    path = config.file
    if not path.is_file():
        raise FileError(f"Hosts file {path} does not exist")
    if not os.access(path, os.W_OK):
        raise FileError(f"Hosts file {path} is not writable")


def _open_source(config: HostsfileConfig) -> contextlib.AbstractContextManager[IO[bytes]]:
    if data_piped_in():
        logger.info("Reading hosts file from stdin")
        return contextlib.nullcontext(sys.stdin.buffer)
    logger.info("Reading hosts file from %s", config.file)
    return config.file.open("rb")


def run_transform(
    config: HostsfileConfig,
    transform: Callable[[IO[bytes], IO[bytes]], None],
) -> None:
    """Run a decode-modify-encode transform against the configured hosts file.

    :param config: The active configuration.
    :param transform: Callable reading the hosts file from its first argument
        and writing the result to its second.
    """
    if not config.dry_run:
        check_replaceable(config)

    try:
        with _open_source(config) as source:
            if config.dry_run:
                transform(source, sys.stdout.buffer)
                sys.stdout.flush()
                return
            replace_atomically(config.file, functools.partial(transform, source))
    except OSError as e:
        raise FileError(f"Unable to update {config.file}: {e}") from e

    if config.verbose:
        console.print(f"Wrote [bold]{escape(str(config.file))}[/]")


def add_command(args: argparse.Namespace) -> int:
    """Add hostnames to the hosts file."""
    config = HostsfileConfig()
    hostnames = args.args[:-1]
    results: list[Hostsfile] = []

    def transform(source: IO[bytes], sink: IO[bytes]) -> None:
        results.append(do_add(source, sink, args.args))

    run_transform(config, transform)
    if config.verbose and results:
        for hostname in hostnames:
            addresses = ", ".join(str(address) for address in results[-1].lookup(hostname))
            console.print(f"Set [bold]{escape(hostname)}[/] to {addresses}")
    return 0


def remove_command(args: argparse.Namespace) -> int:
    """Remove hostnames from the hosts file."""
    config = HostsfileConfig()
    missing: list[str] = []

    def transform(source: IO[bytes], sink: IO[bytes]) -> None:
        missing.extend(do_remove(source, sink, args.args))

    run_transform(config, transform)
    for hostname in missing:
        handle_exception(HostnameNotFound(f"Hostname {hostname} not found"))
    if config.verbose:
        for hostname in args.args:
            if hostname not in missing:
                console.print(f"Removed [bold]{escape(hostname)}[/]")
    return 0


def version_command(args: argparse.Namespace) -> int:  # noqa: ARG001
    """Print the version."""
    console.print(get_version_extended())
    return 0


def _add_common_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    """Add options that may be given both before and after the subcommand.

    Subparsers must not set defaults, or they would overwrite options given
    before the subcommand.
    """
    default = argparse.SUPPRESS if suppress else None
    parser.add_argument(
        "--file",
        default=default,
        help="File to read/write",
        metavar="FILE",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=default,
        help="Print the updated host file to stdout instead of writing it",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=default,
        help="Print a summary of the changes.",
    )
    parser.add_argument(
        "-v",
        "--log-level",
        dest="log_level",
        default=default,
        choices=LogLevel.choices(),
        help="Log level for logging.",
    )
    parser.add_argument(
        "-l",
        "--logfile",
        dest="log_file",
        default=default,
        help="write log to %(metavar)s",
        metavar="LOGFILE",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hostsfile",
        description=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_options(parser, suppress=False)

    subparsers = parser.add_subparsers(title="commands", metavar="command")
    helpers: dict[str, argparse.ArgumentParser] = {}

    add = subparsers.add_parser(
        "add",
        help="Add hostnames to the hosts file.",
        description=ADD_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_options(add, suppress=True)
    add.add_argument("args", nargs="*", metavar="arg", help="hostnames followed by the IP address")
    add.set_defaults(func=add_command)
    helpers["add"] = add

    remove = subparsers.add_parser(
        "remove",
        help="Remove hostnames from the hosts file.",
        description=REMOVE_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_options(remove, suppress=True)
    remove.add_argument("args", nargs="*", metavar="hostname")
    remove.set_defaults(func=remove_command)
    helpers["remove"] = remove

    version = subparsers.add_parser("version", help="Show version and exit.")
    version.set_defaults(func=version_command)

    help_ = subparsers.add_parser("help", help="Show help for a command.")
    help_.add_argument("topic", nargs="?", choices=sorted(helpers))

    def help_command(args: argparse.Namespace) -> int:
        helpers.get(args.topic or "", parser).print_help()
        return 0

    help_.set_defaults(func=help_command)
    return parser
