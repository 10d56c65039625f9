"""Main entry point for hostsfile."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from hostsfile.cli import build_parser
from hostsfile.config import HostsfileConfig
from hostsfile.exception_handler import handle_exception
from hostsfile.exceptions import HostsfileException
from hostsfile.log import HostsfileLogger

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the hostsfile command.

    Always exits via SystemExit: 0 on success, 1 if the command failed
    or the configuration is invalid, 2 on usage errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_usage()
        raise SystemExit(2)

    # An invalid config must never fall back to the default hosts file
    try:
        config = HostsfileConfig.load()
        config.parse_cli_args(args)
    except HostsfileException as e:
        handle_exception(e)
        raise SystemExit(1) from None

    hostsfile_logger = HostsfileLogger()
    hostsfile_logger.start_logging(config.log_file, config.log_level)
    logger.debug("args: %s", args)
    logger.debug("logging: %s", hostsfile_logger.status.as_str())

    try:
        code = args.func(args)
    except HostsfileException as e:
        handle_exception(e)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
