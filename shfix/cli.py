"""CLI entry point: argparse, subcommand routing."""

from __future__ import annotations

import logging
import sys

from shfix.app.cli_support.parser import create_parser
from shfix.tools.registry import selector_names


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def main(argv: list[str] | None = None) -> None:
    parser = create_parser(selectors=selector_names())
    args = parser.parse_args(argv)
    _configure_logging(args.debug)

    from shfix.app.commands.registry import COMMAND_HANDLERS

    try:
        COMMAND_HANDLERS[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
