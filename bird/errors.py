"""
Exceptions raised inside the daemon query pipeline.

Only the executor raises; the dispatcher turns these into
QueryResult states so no query operation ever propagates them.
"""

from typing import Optional


class BirdError(Exception):
    """Base class for daemon client failures."""
    pass


class BirdUnreachableError(BirdError):
    """birdc could not be run, timed out or exited non-zero."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode
