"""Render drained mapping records as a column table.

The default template reproduces the classic procmem layout: optional
address columns, seven kB counters, an optional region count per object,
the object name, and a TOTAL line.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined

from ..models import MappingRecord, MemoryTotals, ReportOptions

TEMPLATE_PACKAGE_PATH = "utils/templates"
DEFAULT_TEMPLATE_NAME = "default_table.j2"

COUNTER_COLUMNS = 7
NAME_DIVIDER_WIDTH = 36


def build_divider(options: ReportOptions) -> str:
    """Build the dashed divider matching the enabled columns."""
    parts = []
    if options.addresses:
        parts.append('-' * 12)
        parts.append('-' * 12)
    parts.append('-' * (COUNTER_COLUMNS * 9 - 1))
    if options.show_counts:
        parts.append('-' * 5)
    parts.append('-' * NAME_DIVIDER_WIDTH)
    return ' '.join(parts)


def build_table_context(rows: List[MappingRecord], totals: MemoryTotals,
                        options: ReportOptions) -> Dict[str, Any]:
    """
    Build template context for the memory map table.

    Args:
        rows: Records to display, already filtered for terse mode
        totals: Totals over every record, including hidden ones
        options: Display mode

    Returns:
        Dictionary with template variables:
        - rows, totals: data to render
        - addresses: True to show start/end columns
        - show_counts: True to show the per-object region count
        - divider: dashed separator line
    """
    return {
        'rows': rows,
        'totals': totals,
        'addresses': options.addresses,
        'show_counts': options.show_counts,
        'divider': build_divider(options),
    }


def _table_environment(loader: BaseLoader) -> Environment:
    """Jinja2 environment shared by the built-in and custom table templates."""
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_default_table(context: dict) -> str:
    """Render the table template shipped inside the procmem package."""
    env = _table_environment(PackageLoader('procmem', TEMPLATE_PACKAGE_PATH))
    return env.get_template(DEFAULT_TEMPLATE_NAME).render(**context)


def render_template_file(template_path: str, context: dict) -> str:
    """Render a user-supplied template file.

    Raises:
        FileNotFoundError: If template file doesn't exist
        jinja2.TemplateError: If template has syntax errors or uses
            variables missing from the context
    """
    template_file = Path(template_path)
    if not template_file.is_file():
        raise FileNotFoundError(f"Template file not found: {template_path}")

    env = _table_environment(FileSystemLoader(str(template_file.parent)))
    return env.get_template(template_file.name).render(**context)


def format_table(rows: List[MappingRecord], totals: MemoryTotals,
                 options: ReportOptions, template_path: Optional[str] = None) -> str:
    """Render rows and totals with a custom template, or the built-in table."""
    context = build_table_context(rows, totals, options)
    if template_path:
        return render_template_file(template_path, context)
    return render_default_table(context)
