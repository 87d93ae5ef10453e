#!/usr/bin/env python3
"""
Entry point for eqplus.

This module provides the main() function that configures logging,
parses arguments, and runs the requested command.
"""

from __future__ import annotations

import logging
import sys

from eqplus.apo.errors import EqPlusError
from eqplus.cli import build_parser, run
from eqplus.config import APP_NAME

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the application.

    Args:
        argv: Arguments without the program name, defaults to sys.argv

    Returns:
        int: Process exit status
    """
    args = build_parser().parse_args(argv)

    if args.version:
        from eqplus import __version__

        print(f"{APP_NAME} v{__version__}")
        return 0

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        return run(args)
    except EqPlusError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
