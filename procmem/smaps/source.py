"""Acquisition of smaps reports from procfs or from saved dump files."""

import logging
from pathlib import Path
from typing import List, Union

from ..exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = '/proc'


def smaps_path(pid: int, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> Path:
    """
    Build the path of the smaps report for a process.

    Raises:
        SourceUnavailableError: If pid is not a positive integer
    """
    if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
        path = f"{proc_root}/{pid}/smaps"
        raise SourceUnavailableError(path, f"invalid pid {pid!r}")
    return Path(proc_root) / str(pid) / 'smaps'


def read_smaps_file(path: Union[str, Path]) -> List[str]:
    """
    Read every line of an smaps report.

    The whole report is read up front so that a process exiting halfway
    through cannot leave a partial result behind.

    Returns:
        List of lines, trailing newlines included

    Raises:
        SourceUnavailableError: If the file cannot be opened or read
    """
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            lines = f.readlines()
    except OSError as e:
        raise SourceUnavailableError(
            str(path), e.strerror or str(e), e.errno) from e

    logger.debug("Read %d lines from %s", len(lines), path)
    return lines


def read_smaps_lines(pid: int, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> List[str]:
    """
    Read the smaps report of a running process.

    Args:
        pid: Process identifier
        proc_root: procfs mount point

    Raises:
        SourceUnavailableError: If the process is gone, access is denied,
            or the pid is malformed
    """
    return read_smaps_file(smaps_path(pid, proc_root))
