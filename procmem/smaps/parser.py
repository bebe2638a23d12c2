#!/usr/bin/env python3

"""
parser.py - Line classifier and record builder for /proc/<pid>/smaps

The smaps report lists one header line per virtual memory mapping,
followed by a block of "Field: value kB" counter lines:

    7f80a7605000-7f80a7606000 r--p 0001e000 ca:01 1701113    /lib/x86_64-linux-gnu/libselinux.so.1
    Size:                  4 kB
    Rss:                   4 kB
    ...

The module is split into:
- parse_header: Recognizes mapping header lines and builds MappingRecord objects
- parse_field: Applies one counter line to the record in progress
- SmapsParser: Line-at-a-time state machine emitting completed records
"""

import re
import logging
from typing import Iterable, Iterator, Optional

from ..exceptions import MalformedLineError
from ..models import MappingRecord, ANON_NAME

logger = logging.getLogger(__name__)

# Longest object name kept; longer names are cut silently
MAX_NAME_LENGTH = 127

HEADER_PATTERN = re.compile(
    r"^(?P<start>[0-9a-fA-F]+)-(?P<end>[0-9a-fA-F]+)\s+"
    r"(?P<perms>[-rwxsp]{4})\s+"
    r"(?P<offset>[0-9a-fA-F]+)\s+"
    r"[0-9a-fA-F]+:[0-9a-fA-F]+\s+"  # device major:minor
    r"\d+"  # inode
    r"(?:\s+(?P<name>\S.*)|\s*)$"
)

FIELD_PATTERN = re.compile(
    r"^(?P<field>[A-Za-z][A-Za-z0-9_]*):\s+(?P<value>\d+)(?:\s+kB)?\s*$"
)

VMFLAGS_PATTERN = re.compile(r"^VmFlags:(?P<flags>(?:\s+[a-z0-9]{2})*)\s*$")

LIBRARY_PATTERN = re.compile(r"^/.*\.so(?:\.\d+)*$")

# smaps field name -> MappingRecord attribute
FIELD_ATTRIBUTES = {
    'Size': 'size',
    'Rss': 'rss',
    'Pss': 'pss',
    'Shared_Clean': 'shared_clean',
    'Shared_Dirty': 'shared_dirty',
    'Private_Clean': 'private_clean',
    'Private_Dirty': 'private_dirty',
    'KernelPageSize': 'kernel_page_size',
}


def is_library(name: str) -> bool:
    """Check whether an object name looks like a shared library path.

    Versioned sonames such as libc.so.6 count as libraries.
    """
    return len(name) >= 4 and LIBRARY_PATTERN.match(name) is not None


def parse_header(line: str, prev: Optional[MappingRecord] = None) -> Optional[MappingRecord]:
    """Parse a mapping header line into a new record.

    Args:
        line: Header line without its trailing newline
        prev: Record built from the previous header, used to attribute
            nameless regions that directly follow a shared library

    Returns:
        New MappingRecord, or None if the line is not a header
    """
    match = HEADER_PATTERN.match(line)
    if not match:
        return None

    start = int(match.group('start'), 16)
    name = match.group('name')
    is_bss = 0

    if name:
        if len(name) > MAX_NAME_LENGTH:
            logger.debug("Truncating object name to %d characters: %s",
                         MAX_NAME_LENGTH, name)
            name = name[:MAX_NAME_LENGTH]
    elif prev is not None and prev.end == start and is_library(prev.name):
        name = prev.name
        is_bss = 1
    else:
        name = ANON_NAME

    return MappingRecord(
        start=start,
        end=int(match.group('end'), 16),
        perms=match.group('perms'),
        offset=int(match.group('offset'), 16),
        name=name,
        is_bss=is_bss,
    )


def parse_header_strict(line: str, prev: Optional[MappingRecord] = None) -> MappingRecord:
    """Like parse_header, but raise MalformedLineError instead of returning None"""
    record = parse_header(line, prev)
    if record is None:
        raise MalformedLineError(line)
    return record


def parse_field(record: MappingRecord, line: str) -> bool:
    """Apply a counter line to the record in progress.

    Unknown field names are accepted and ignored so that newer kernels
    with additional smaps fields still parse.

    Returns:
        True if the line is a field line, False otherwise
    """
    match = FIELD_PATTERN.match(line)
    if match:
        attribute = FIELD_ATTRIBUTES.get(match.group('field'))
        if attribute:
            setattr(record, attribute, int(match.group('value')))
        return True

    match = VMFLAGS_PATTERN.match(line)
    if match:
        record.vm_flags = tuple(match.group('flags').split())
        return True

    return False


class SmapsParser:
    """Turns smaps lines into completed MappingRecord objects.

    Counter lines are tried before header lines: a malformed header must
    never be taken for a counter of the previous mapping, and a line that
    is neither leaves the record in progress untouched.
    """

    def __init__(self):
        self.headers = 0
        self.warnings = 0

    def parse_lines(self, lines: Iterable[str]) -> Iterator[MappingRecord]:
        """Yield each record once the next header (or end of input) closes it"""
        current = None

        for raw_line in lines:
            line = raw_line.rstrip('\r\n')
            if not line.strip():
                continue

            if current is not None and parse_field(current, line):
                continue

            record = parse_header(line, current)
            if record is not None:
                self.headers += 1
                if current is not None:
                    yield current
                current = record
                continue

            self.warnings += 1
            logger.warning("could not parse map info line: %s", line)

        if current is not None:
            yield current
