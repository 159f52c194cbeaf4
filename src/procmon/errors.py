"""
Runtime error taxonomy for the measurement pipeline.

Configuration problems are reported with
:class:`procmon.validation.ConfigurationError`; everything that can go
wrong once sampling is running lives here.
"""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models.keys import MetricKey


class ProcmonError(Exception):
    """Base class for runtime errors raised by procmon."""


class SnapshotUnavailable(ProcmonError):
    """
    A group of counters could not be read for this tick.

    Non-fatal: the source logs it once and reports the affected keys as
    None, so their statistics keep the previous value with
    ``updated_value=False``.
    """

    def __init__(self, what: str, cause: Optional[Exception] = None):
        message = f"Unable to read {what}"
        if cause is not None:
            message = f"{message}: {type(cause).__name__}: {cause}"
        super().__init__(message)
        self.what = what
        self.cause = cause


class KeyNotFound(ProcmonError, KeyError):
    """
    A statistic expected while rendering or deriving is absent.

    Signals a cold-start race or a contract violation. Only the current
    cycle's output is skipped.
    """

    def __init__(self, key: "MetricKey"):
        super().__init__(f"Unable to find statistic for key {key}")
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class ArchiveWriteFailure(ProcmonError):
    """Writing history to the archive directory failed."""

    def __init__(self, path: Optional[Path], cause: Exception):
        super().__init__(f"Error writing archive {path}: {cause}")
        self.path = path
        self.cause = cause


class ArchiveReadFailure(ProcmonError):
    """An archive file or directory is missing or unreadable."""

    def __init__(self, path: Path, cause: Optional[Exception] = None):
        message = f"Unable to read archive {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause


class ArchiveCorruption(ArchiveReadFailure):
    """A record in an archive file could not be decoded."""

    def __init__(self, path: Path, line_number: int, cause: Optional[Exception] = None):
        super().__init__(path, cause)
        self.line_number = line_number
        self.args = (f"Corrupt record at {path}:{line_number}: {cause}",)
