#!/usr/bin/env python3
"""
Data models for per-process memory map analysis.

This module contains the dataclasses shared by the smaps parser, the
aggregation engine and the report generator.
"""

import mmap
from dataclasses import dataclass, field, fields
from typing import Dict, Any, Tuple

# Counters summed when two records for the same object are coalesced
SUMMED_COUNTERS = (
    'size',
    'rss',
    'pss',
    'shared_clean',
    'shared_dirty',
    'private_clean',
    'private_dirty',
)

ANON_NAME = '[anon]'


@dataclass
class MappingRecord:  # pylint: disable=too-many-instance-attributes
    """One memory mapping, or a group of mappings coalesced by object name.

    Counters are in kB as reported by the kernel.
    """

    start: int
    end: int
    perms: str
    offset: int = 0
    name: str = ANON_NAME
    size: int = 0
    rss: int = 0
    pss: int = 0
    shared_clean: int = 0
    shared_dirty: int = 0
    private_clean: int = 0
    private_dirty: int = 0
    kernel_page_size: int = 0
    is_bss: int = 0
    count: int = 1
    vm_flags: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_hugepage(self) -> bool:
        """True if the mapping is backed by pages larger than the base page"""
        return self.kernel_page_size * 1024 > mmap.PAGESIZE

    @property
    def display_name(self) -> str:
        """Object name as shown in reports"""
        return f"{self.name} [bss]" if self.is_bss else self.name

    def merge(self, other: 'MappingRecord') -> None:
        """Fold the counters of another record for the same object into this one.

        Address range, permissions and offset of this record are kept.
        """
        for counter in SUMMED_COUNTERS:
            setattr(self, counter, getattr(self, counter) + getattr(other, counter))
        self.is_bss += other.is_bss
        self.count += other.count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output"""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['vm_flags'] = list(self.vm_flags)
        data['is_bss'] = bool(self.is_bss)
        data['is_hugepage'] = self.is_hugepage
        return data


@dataclass
class MemoryTotals:  # pylint: disable=too-many-instance-attributes
    """Running totals across every drained record"""

    size: int = 0
    rss: int = 0
    pss: int = 0
    shared_clean: int = 0
    shared_dirty: int = 0
    private_clean: int = 0
    private_dirty: int = 0
    count: int = 0
    hugepage_records: int = 0  # a coalesced group counts once

    def add(self, record: MappingRecord) -> None:
        """Account one record"""
        for counter in SUMMED_COUNTERS:
            setattr(self, counter, getattr(self, counter) + getattr(record, counter))
        self.count += record.count
        if record.is_hugepage:
            self.hugepage_records += 1

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary format for JSON output"""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ReportOptions:
    """Display mode for one report.

    The mode decides how records are ordered and whether regions of the
    same object are coalesced: address ordering shows every raw region,
    name ordering sums all regions of one object unless verbose output
    was requested.
    """

    verbose: bool = False
    terse: bool = False
    addresses: bool = False

    @property
    def sort_by_address(self) -> bool:
        """Order records by (start, end) instead of by name"""
        return self.addresses

    @property
    def coalesce_by_name(self) -> bool:
        """Merge records sharing an object name"""
        return not self.verbose and not self.addresses

    @property
    def show_counts(self) -> bool:
        """Whether the per-group region count column is meaningful"""
        return self.coalesce_by_name

    def to_dict(self) -> Dict[str, bool]:
        """Convert to dictionary format for JSON output"""
        return {
            'verbose': self.verbose,
            'terse': self.terse,
            'addresses': self.addresses,
        }
