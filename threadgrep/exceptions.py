"""
Exception hierarchy for threadgrep
"""

from pathlib import Path


class ThreadgrepError(Exception):
    """Base class for all threadgrep errors"""


class SearchPatternError(ThreadgrepError):
    """The search expression could not be compiled"""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid search pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class WalkRootError(ThreadgrepError):
    """A root path handed to the walker cannot be inspected"""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"cannot access {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class PoolClosedError(ThreadgrepError):
    """Work was submitted to a pool that has already been waited on"""
