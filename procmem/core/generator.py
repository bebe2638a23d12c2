#!/usr/bin/env python3
"""
Memory map report generation and coordination.

This module provides the ReportGenerator class that ties the smaps parser
and the aggregation engine together for one process report.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models import MappingRecord, MemoryTotals, ReportOptions
from ..smaps.parser import SmapsParser
from ..smaps.source import DEFAULT_PROC_ROOT, read_smaps_file, read_smaps_lines
from .aggregator import MappingList, load_maps

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generates the per-object memory breakdown of one smaps report"""

    def __init__(self, lines: Iterable[str], options: Optional[ReportOptions] = None):
        """Initialize the report generator.

        Args:
            lines: smaps report lines
            options: Display mode (defaults to coalesced, name-ordered output)
        """
        self.lines = list(lines)
        self.options = options or ReportOptions()
        self.parser = SmapsParser()

    def load(self) -> MappingList:
        """Parse and aggregate the report according to the display mode"""
        # Fresh parser per run; self.parser holds the counts of the last run
        self.parser = SmapsParser()
        return load_maps(
            self.lines,
            sort_by_address=self.options.sort_by_address,
            coalesce_by_name=self.options.coalesce_by_name,
            parser=self.parser,
        )

    def generate_rows(self) -> Tuple[List[MappingRecord], MemoryTotals]:
        """Drain the aggregated records into display rows.

        Terse mode hides records without private dirty memory, but every
        record still counts towards the totals.

        Returns:
            Tuple of (rows, totals)
        """
        maps = self.load()
        rows = []
        for record in maps.drain():
            if self.options.terse and not record.private_dirty:
                continue
            rows.append(record)
        return rows, maps.totals

    def generate_report(self) -> Dict[str, Any]:
        """Generate a JSON-serializable report.

        Returns:
            Dictionary with the display options, the mapping records,
            the totals and the number of skipped lines
        """
        rows, totals = self.generate_rows()
        logger.info("Generated report with %d records, %d regions",
                    len(rows), totals.count)
        return {
            'options': self.options.to_dict(),
            'mappings': [record.to_dict() for record in rows],
            'totals': totals.to_dict(),
            'warnings': self.parser.warnings,
        }


def load_report_lines(pid: Optional[int] = None, smaps_file: Optional[str] = None,
                      proc_root: str = DEFAULT_PROC_ROOT) -> List[str]:
    """
    Acquire smaps lines from a saved dump file or from a running process.

    Raises:
        ValueError: If neither pid nor smaps_file is given
        SourceUnavailableError: If the report cannot be read
    """
    if smaps_file:
        return read_smaps_file(smaps_file)
    if pid is None:
        raise ValueError("Either a pid or an smaps file is required")
    return read_smaps_lines(pid, proc_root)


def generate_report(pid: Optional[int] = None, smaps_file: Optional[str] = None,
                    options: Optional[ReportOptions] = None,
                    proc_root: str = DEFAULT_PROC_ROOT) -> Dict[str, Any]:
    """
    Convenience function to generate a report for one process.

    Raises:
        SourceUnavailableError: If the report cannot be read; nothing is
            generated in that case
    """
    lines = load_report_lines(pid, smaps_file, proc_root)
    return ReportGenerator(lines, options).generate_report()
