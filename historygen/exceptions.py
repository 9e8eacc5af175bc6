"""
Error kinds raised by historygen.

Only I/O-facing operations fail: loading settings or the message pool,
and talking to the git repository.
"""

from typing import List, Optional


class HistoryGenError(Exception):
    """Base class for all historygen errors."""


class ConfigurationError(HistoryGenError):
    """A settings field is malformed or out of range."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class MessagePoolError(HistoryGenError):
    """The commit message file is empty or otherwise unusable."""


class MessagePoolUnavailable(MessagePoolError):
    """The commit message file does not exist or cannot be read."""


class VersionControlError(HistoryGenError):
    """A stage, commit or push operation failed."""

    def __init__(
        self, message: str, statistics: Optional[object] = None, created: int = 0
    ):
        super().__init__(message)
        # Filled in by the orchestrator when a run is aborted.
        self.statistics = statistics
        # Commits already written for the failing day.
        self.created = created
