"""
smaps report handling.

This package reads /proc/<pid>/smaps reports and turns their lines into
MappingRecord objects.
"""

from .parser import SmapsParser, parse_header, parse_field, is_library
from .source import read_smaps_lines, read_smaps_file

__all__ = [
    'SmapsParser',
    'parse_header',
    'parse_field',
    'is_library',
    'read_smaps_lines',
    'read_smaps_file',
]
