#!/usr/bin/env python3
"""
Aggregation of mapping records into an ordered, optionally coalesced list.

Records are kept sorted either by address range or by object name as they
are inserted. With coalescing, a record whose name is already present is
folded into the existing entry instead of being linked in.
"""

import logging
from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from ..models import MappingRecord, MemoryTotals
from ..smaps.parser import SmapsParser

logger = logging.getLogger(__name__)


def order_before(a: MappingRecord, b: MappingRecord, sort_by_address: bool) -> bool:
    """Check whether record a sorts before record b.

    Args:
        a: Record being inserted
        b: Record already in the list
        sort_by_address: Compare (start, end) instead of object names
    """
    if sort_by_address:
        return a.start < b.start or (a.start == b.start and a.end < b.end)
    return a.name < b.name


class MappingList:
    """Ordered sequence of mapping records, drained once for reporting"""

    def __init__(self, sort_by_address: bool = False, coalesce_by_name: bool = True):
        self.sort_by_address = sort_by_address
        self.coalesce_by_name = coalesce_by_name
        self.totals = MemoryTotals()
        self._records: Deque[MappingRecord] = deque()

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def insert(self, record: Optional[MappingRecord]) -> None:
        """Insert a completed record.

        The scan stops at the first record with the same name (coalescing
        only) or at the first record the new one sorts before. A merged
        entry keeps its position; the list is not re-sorted afterwards.
        """
        if record is None:
            return

        for index, current in enumerate(self._records):
            if self.coalesce_by_name and record.name == current.name:
                current.merge(record)
                return
            if order_before(record, current, self.sort_by_address):
                self._records.insert(index, record)
                return

        self._records.append(record)

    def extend(self, records: Iterable[MappingRecord]) -> None:
        """Insert records one by one"""
        for record in records:
            self.insert(record)

    def drain(self) -> Iterator[MappingRecord]:
        """Remove and yield records from head to tail.

        Every record is added to totals exactly once before it is yielded,
        so totals are complete once the iterator is exhausted.
        """
        while self._records:
            record = self._records.popleft()
            self.totals.add(record)
            yield record


def load_maps(lines: Iterable[str], sort_by_address: bool = False,
              coalesce_by_name: bool = True,
              parser: Optional[SmapsParser] = None) -> MappingList:
    """
    Build a MappingList from smaps lines.

    Args:
        lines: smaps report lines
        sort_by_address: Order by address range instead of by name
        coalesce_by_name: Merge records sharing an object name
        parser: Parser to use, so callers can read its warning count

    Returns:
        MappingList ready to be drained
    """
    parser = parser or SmapsParser()
    maps = MappingList(sort_by_address, coalesce_by_name)
    maps.extend(parser.parse_lines(lines))
    logger.debug("Parsed %d regions into %d records (%d warnings)",
                 parser.headers, len(maps), parser.warnings)
    return maps
