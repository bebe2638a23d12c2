"""Show subcommand - prints the memory map breakdown of one process."""

import json
import argparse
import logging

from jinja2 import TemplateError as Jinja2TemplateError

from ..core.generator import ReportGenerator, load_report_lines
from ..exceptions import SourceUnavailableError
from ..models import ReportOptions
from ..smaps.source import DEFAULT_PROC_ROOT
from ..utils.formatter import format_table

logger = logging.getLogger(__name__)


def _positive_pid(value: str) -> int:
    """argparse type for process identifiers"""
    try:
        pid = int(value, 10)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f'Invalid PID "{value}".') from e
    if pid <= 0:
        raise argparse.ArgumentTypeError(f'Invalid PID "{value}".')
    return pid


def add_show_parser(subparsers) -> argparse.ArgumentParser:
    """
    Add 'show' subcommand parser.

    Args:
        subparsers: Subparsers object from argparse

    Returns:
        The show parser
    """
    parser = subparsers.add_parser(
        'show',
        help='Display memory usage of a process grouped by mapped object',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  # Per-object breakdown, regions of one object summed
  procmem show 1234

  # Every region in address order
  procmem show 1234 --addresses

  # Only objects with private dirty memory
  procmem show 1234 --terse

  # Analyze a saved smaps dump
  procmem show --file smaps.txt --json
        """
    )

    parser.add_argument(
        'pid',
        nargs='?',
        type=_positive_pid,
        help='Process identifier')

    source_group = parser.add_argument_group('source options')
    source_group.add_argument(
        '--file',
        dest='smaps_file',
        metavar='PATH',
        help='Read a saved smaps report instead of /proc/<pid>/smaps'
    )
    source_group.add_argument(
        '--proc-root',
        default=DEFAULT_PROC_ROOT,
        metavar='DIR',
        help='procfs mount point (default: %(default)s)'
    )

    mode_group = parser.add_argument_group('display options')
    mode_group.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show each region separately instead of summing per object'
    )
    mode_group.add_argument(
        '-t', '--terse',
        action='store_true',
        help='Only show objects with private dirty memory (totals still include all)'
    )
    mode_group.add_argument(
        '-a', '--addresses',
        action='store_true',
        help='Show start/end addresses and sort by address'
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        '--json',
        action='store_true',
        help='Output report as JSON',
    )
    output_group.add_argument(
        '--template',
        type=str,
        metavar='PATH',
        help='Path to custom Jinja2 template (default: built-in table)',
    )

    return parser


def options_from_args(args: argparse.Namespace) -> ReportOptions:
    """Build the display mode from parsed arguments."""
    return ReportOptions(
        verbose=getattr(args, 'verbose', False),
        terse=getattr(args, 'terse', False),
        addresses=getattr(args, 'addresses', False),
    )


def run_show(args: argparse.Namespace) -> int:
    """
    Execute the show subcommand.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    smaps_file = getattr(args, 'smaps_file', None)
    if args.pid is None and not smaps_file:
        logger.error("Either a pid or --file is required")
        return 1

    options = options_from_args(args)

    try:
        lines = load_report_lines(
            pid=args.pid,
            smaps_file=smaps_file,
            proc_root=getattr(args, 'proc_root', DEFAULT_PROC_ROOT),
        )
    except SourceUnavailableError as e:
        logger.error("%s", e)
        return 1

    generator = ReportGenerator(lines, options)

    if getattr(args, 'json', False):
        print(json.dumps(generator.generate_report(), indent=2))
        return 0

    rows, totals = generator.generate_rows()
    try:
        output = format_table(rows, totals, options, getattr(args, 'template', None))
    except (FileNotFoundError, Jinja2TemplateError) as e:
        logger.error("Template error: %s", e)
        return 1

    print(output)
    return 0
