#!/usr/bin/env python3
"""
Command-line entry point for procmem.

Usage:
    procmem show <pid> [-v] [-t] [-a] [--json | --template PATH]
"""

import sys
import argparse
import logging
from typing import List, Optional

from . import __version__
from .commands.show import add_show_parser, run_show

LOG_FORMAT = '%(levelname)s: %(message)s'


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='procmem',
        description='Display per-process memory usage grouped by mapped object',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity on stderr (default: %(default)s)',
    )

    subparsers = parser.add_subparsers(dest='command')
    show_parser = add_show_parser(subparsers)
    show_parser.set_defaults(func=run_show)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    if not getattr(args, 'func', None):
        parser.print_help(sys.stderr)
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
