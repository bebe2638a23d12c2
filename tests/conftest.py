"""Shared pytest fixtures and sample smaps reports for procmem tests."""

import pytest


COUNTER_FIELDS = (
    ('Size', 'size'),
    ('KernelPageSize', 'kernel_page_size'),
    ('MMUPageSize', 'mmu_page_size'),
    ('Rss', 'rss'),
    ('Pss', 'pss'),
    ('Shared_Clean', 'shared_clean'),
    ('Shared_Dirty', 'shared_dirty'),
    ('Private_Clean', 'private_clean'),
    ('Private_Dirty', 'private_dirty'),
    ('Referenced', 'referenced'),
    ('Anonymous', 'anonymous'),
    ('Swap', 'swap'),
)


def make_region(header, **counters):
    """
    Build the smaps lines for one mapping.

    Args:
        header: Mapping header line
        **counters: Counter values in kB keyed by lowercase field name
            (size, rss, pss, shared_clean, ...); missing counters are 0

    Returns:
        List of lines, each terminated by a newline
    """
    counters.setdefault('kernel_page_size', 4)
    counters.setdefault('mmu_page_size', 4)
    lines = [header + '\n']
    for field_name, key in COUNTER_FIELDS:
        lines.append(f"{field_name + ':':<16}{counters.get(key, 0):>8} kB\n")
    lines.append("THPeligible:    0\n")
    lines.append("VmFlags: rd ex mr mw me sd \n")
    return lines


def make_report(*regions):
    """Concatenate the lines of several regions into one report."""
    lines = []
    for region in regions:
        lines.extend(region)
    return lines


LIBC_TEXT = "7f0000000000-7f0000019000 r-xp 00000000 08:01 131090                     /lib/libc.so"
LIBC_DATA = "7f0000200000-7f0000202000 rw-p 00019000 08:01 131090                     /lib/libc.so"
ANON = "7f0000300000-7f0000305000 rw-p 00000000 00:00 0 "


@pytest.fixture
def libc_report():
    """Two libc regions plus one anonymous region."""
    return make_report(
        make_region(LIBC_TEXT, size=100, rss=40, pss=40, shared_clean=40),
        make_region(LIBC_DATA, size=50, rss=10, pss=10, private_dirty=10),
        make_region(ANON, size=20, rss=20, pss=20, private_dirty=20),
    )


@pytest.fixture
def smaps_file(tmp_path, libc_report):
    """The libc report written to a file."""
    path = tmp_path / 'smaps'
    path.write_text(''.join(libc_report), encoding='utf-8')
    return path
