#!/usr/bin/env python3
"""
procmem - per-process memory map breakdown.

Parses /proc/<pid>/smaps and reports memory usage grouped by mapped
object (shared libraries, heap, anonymous regions, ...).
"""

from .models import MappingRecord, MemoryTotals, ReportOptions
from .exceptions import ProcMemError, SourceUnavailableError, MalformedLineError

__version__ = '1.0.0'

__all__ = [
    'MappingRecord',
    'MemoryTotals',
    'ReportOptions',
    'ProcMemError',
    'SourceUnavailableError',
    'MalformedLineError',
]
