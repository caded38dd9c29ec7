#!/usr/bin/env python3
"""
TrustKeep CLI - delegate access to the resources you own.

Commands:
  trustkeep --as NAME add <name>...     Trust principals (asks to confirm)
  trustkeep --as NAME remove <name>...  Stop trusting principals
  trustkeep --as NAME list [owner]      Show trusted principals
  trustkeep [--as NAME] shell           Run commands interactively
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.exceptions import TrustKeepException
from ..core.logging import configure_logging
from .commands import COMMAND_MODULES
from .output import output_error

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="trustkeep",
        description="Delegate access to the resources you own",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trustkeep --as alice add bob carol      Propose trusting bob and carol
  trustkeep --as alice add bob --yes      Trust bob without the prompt
  trustkeep --as alice remove bob         Stop trusting bob
  trustkeep --as alice list               Show who alice trusts
  trustkeep --as admin list alice         Show who alice trusts (needs trust.list.others)
  trustkeep shell                         Interactive mode ('as <name>' to switch actor)
        """,
    )
    parser.add_argument("--as", dest="actor", metavar="NAME", help="Acting principal")
    parser.add_argument("--data-dir", help="Data directory (default: ~/.trustkeep)")
    parser.add_argument("--directory", help="Principal directory JSON file")
    parser.add_argument("--locale", help="Message locale (e.g. en, de)")
    parser.add_argument("--cache-size", type=int, help="Maximum resident owners per cache")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    if args.cache_size is not None and args.cache_size < 1:
        parser.error("--cache-size must be positive")

    try:
        configure_logging(level=args.log_level)
        return args.func(args)
    except TrustKeepException as e:
        logger.debug(f"Command failed: {e.to_dict()}")
        output_error(e.message)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
