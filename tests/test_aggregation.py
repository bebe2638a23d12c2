#!/usr/bin/env python3

"""
test_aggregation.py - Unit tests for record coalescing, ordering and totals
"""

import itertools
import unittest

from procmem.core.aggregator import MappingList, load_maps, order_before
from procmem.models import MappingRecord, MemoryTotals, SUMMED_COUNTERS

from conftest import make_region, make_report, LIBC_TEXT, LIBC_DATA, ANON


def record(start, end, name, **counters):
    """Create a record with the given counters."""
    return MappingRecord(start=start, end=end, perms='rw-p', name=name, **counters)


class TestMerge(unittest.TestCase):
    """Test merging of records for the same object"""

    def test_merge_sums_counters(self):
        """Test every counter and the region count are summed"""
        a = record(0x1000, 0x2000, '/lib/libc.so', size=4, rss=4, pss=2,
                   shared_clean=1, shared_dirty=1, private_clean=1, private_dirty=1)
        b = record(0x5000, 0x9000, '/lib/libc.so', size=16, rss=8, pss=8,
                   shared_clean=2, shared_dirty=2, private_clean=2, private_dirty=2,
                   is_bss=1)
        a.merge(b)

        self.assertEqual(a.size, 20)
        self.assertEqual(a.rss, 12)
        self.assertEqual(a.pss, 10)
        self.assertEqual(a.shared_clean, 3)
        self.assertEqual(a.private_dirty, 3)
        self.assertEqual(a.count, 2)
        self.assertTrue(a.is_bss)
        # Identity of the merged group stays with the absorbing record
        self.assertEqual((a.start, a.end), (0x1000, 0x2000))

    def test_merge_order_independent(self):
        """Test merging three records in any order gives the same result"""
        def members():
            return [
                record(0x1000, 0x2000, 'lib', size=1, rss=2, pss=3, private_dirty=4),
                record(0x3000, 0x4000, 'lib', size=10, rss=20, pss=30, shared_clean=5),
                record(0x5000, 0x6000, 'lib', size=100, rss=200, pss=300, is_bss=1),
            ]

        results = set()
        for order in itertools.permutations(range(3)):
            group = members()
            target = group[order[0]]
            for index in order[1:]:
                target.merge(group[index])
            results.add(tuple(getattr(target, c) for c in SUMMED_COUNTERS)
                        + (target.count, target.is_bss))

        self.assertEqual(len(results), 1)
        summed = results.pop()
        self.assertEqual(summed[:3], (111, 222, 333))
        self.assertEqual(summed[-2:], (3, 1))


class TestOrdering(unittest.TestCase):
    """Test the two total orders"""

    def test_order_by_address(self):
        """Test (start, end) lexicographic order"""
        a = record(0x1000, 0x2000, 'z')
        b = record(0x1000, 0x3000, 'a')
        c = record(0x2000, 0x3000, 'a')
        self.assertTrue(order_before(a, b, True))
        self.assertTrue(order_before(b, c, True))
        self.assertFalse(order_before(b, a, True))
        self.assertFalse(order_before(a, a, True))

    def test_order_by_name(self):
        """Test lexicographic name order"""
        a = record(0x9000, 0xa000, '/lib/a.so')
        b = record(0x1000, 0x2000, '[anon]')
        self.assertTrue(order_before(a, b, False))
        self.assertFalse(order_before(b, a, False))

    def test_address_sorted_insertion(self):
        """Test address-sorted output is non-decreasing"""
        maps = MappingList(sort_by_address=True, coalesce_by_name=False)
        ranges = [(0x5000, 0x6000), (0x1000, 0x3000), (0x3000, 0x4000),
                  (0x1000, 0x2000), (0x4000, 0x5000)]
        for start, end in ranges:
            maps.insert(record(start, end, 'x'))

        drained = [(r.start, r.end) for r in maps.drain()]
        self.assertEqual(drained, sorted(drained))
        self.assertEqual(len(drained), 5)

    def test_name_sorted_coalescing(self):
        """Test name order with coalescing keeps one record per name"""
        maps = MappingList(sort_by_address=False, coalesce_by_name=True)
        for name in ('c', 'a', 'b', 'a', 'c', 'a'):
            maps.insert(record(0x1000, 0x2000, name, size=1))

        drained = list(maps.drain())
        self.assertEqual([r.name for r in drained], ['a', 'b', 'c'])
        self.assertEqual([r.count for r in drained], [3, 1, 2])
        self.assertEqual([r.size for r in drained], [3, 1, 2])

    def test_first_match_wins_without_resort(self):
        """Test merged records keep the position of their first member"""
        maps = MappingList(sort_by_address=True, coalesce_by_name=True)
        maps.insert(record(0x5000, 0x6000, 'lib'))
        maps.insert(record(0x1000, 0x2000, 'other'))
        # Sorts before 'other', so it is linked in ahead of the existing 'lib'
        maps.insert(record(0x0500, 0x0600, 'lib'))
        # Head record now has the same name and absorbs this one
        maps.insert(record(0x0100, 0x0200, 'lib'))

        drained = list(maps.drain())
        self.assertEqual([(r.name, r.count) for r in drained],
                         [('lib', 2), ('other', 1), ('lib', 1)])
        self.assertEqual(drained[0].start, 0x0500)

    def test_insert_none_ignored(self):
        """Test inserting nothing is a no-op"""
        maps = MappingList()
        maps.insert(None)
        self.assertEqual(len(maps), 0)
        self.assertFalse(maps)


class TestDrain(unittest.TestCase):
    """Test draining and totals accumulation"""

    def test_drain_empties_list_and_accumulates(self):
        """Test totals equal the sum of drained records"""
        maps = MappingList(coalesce_by_name=False)
        maps.insert(record(0x1000, 0x2000, 'a', size=4, rss=3, pss=2, private_dirty=1))
        maps.insert(record(0x2000, 0x3000, 'b', size=8, rss=6, pss=4, shared_dirty=2))

        drained = list(maps.drain())

        self.assertEqual(len(maps), 0)
        for counter in SUMMED_COUNTERS:
            self.assertEqual(getattr(maps.totals, counter),
                             sum(getattr(r, counter) for r in drained))
        self.assertEqual(maps.totals.count, 2)
        self.assertEqual(list(maps.drain()), [])
        self.assertEqual(maps.totals.count, 2)

    def test_totals_count_regions_of_coalesced_records(self):
        """Test totals count the original regions, not the groups"""
        maps = MappingList(coalesce_by_name=True)
        for _ in range(3):
            maps.insert(record(0x1000, 0x2000, 'a', size=1))
        list(maps.drain())
        self.assertEqual(maps.totals.count, 3)
        self.assertEqual(maps.totals.size, 3)

    def test_hugepage_records(self):
        """Test records backed by huge pages are counted"""
        totals = MemoryTotals()
        totals.add(record(0x1000, 0x2000, 'a', kernel_page_size=2048))
        totals.add(record(0x2000, 0x3000, 'b', kernel_page_size=4))
        self.assertEqual(totals.hugepage_records, 1)

    def test_hugepage_group_counts_once(self):
        """Test a coalesced group of huge page regions is one hugepage record"""
        maps = MappingList(coalesce_by_name=True)
        for start in (0x200000, 0x400000, 0x600000):
            maps.insert(record(start, start + 0x200000, '/dev/hugepages/buf',
                               kernel_page_size=2048))
        list(maps.drain())
        self.assertEqual(maps.totals.hugepage_records, 1)
        self.assertEqual(maps.totals.count, 3)


class TestLoadMaps(unittest.TestCase):
    """Test building the list from smaps lines"""

    def test_end_to_end_coalesced(self):
        """Test libc regions are summed and anon stays separate"""
        lines = make_report(
            make_region(LIBC_TEXT, size=100, rss=40),
            make_region(LIBC_DATA, size=50, rss=10),
            make_region(ANON, size=20, rss=20),
        )
        maps = load_maps(lines, sort_by_address=False, coalesce_by_name=True)
        drained = list(maps.drain())

        self.assertEqual(len(drained), 2)
        by_name = {r.name: r for r in drained}
        self.assertEqual((by_name['/lib/libc.so'].size, by_name['/lib/libc.so'].rss), (150, 50))
        self.assertEqual(by_name['/lib/libc.so'].count, 2)
        self.assertEqual((by_name['[anon]'].size, by_name['[anon]'].rss), (20, 20))
        self.assertEqual(maps.totals.size, 170)
        self.assertEqual(maps.totals.rss, 70)

    def test_no_coalescing_keeps_every_region(self):
        """Test record count equals header count without coalescing"""
        lines = make_report(
            make_region(LIBC_TEXT, size=100),
            make_region(LIBC_DATA, size=50),
            make_region(ANON, size=20),
        )
        maps = load_maps(lines, sort_by_address=True, coalesce_by_name=False)
        drained = list(maps.drain())

        self.assertEqual(len(drained), 3)
        self.assertEqual([r.size for r in drained], [100, 50, 20])
        self.assertTrue(all(r.count == 1 for r in drained))


if __name__ == '__main__':
    unittest.main()
