"""Exception hierarchy for procmem."""

from typing import Optional


class ProcMemError(Exception):
    """Base exception for procmem errors"""


class SourceUnavailableError(ProcMemError):
    """Raised when the per-process smaps report cannot be opened.

    The process may have exited, the caller may lack the privilege to read
    it, or the pid may not name a process at all. None of these are
    transient, so callers should report the failure instead of retrying.
    """

    def __init__(self, path: str, reason: str, errno: Optional[int] = None):
        self.path = path
        self.reason = reason
        self.errno = errno
        super().__init__(f"can not open {path}: {reason}")


class MalformedLineError(ProcMemError):
    """Raised when a line matches neither the header nor the field grammar"""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"could not parse map info line: {line}")
