"""
Append-only, crash-safe archive writer.

The DiskArchiver copies history samples that are newer than what it has
already written, groups them into records and appends them to
time-partitioned JSON Lines files. Writes are flushed and fsynced before
the per-category high-water marks advance, so a crash can at worst
repeat records (which the reader deduplicates) but never lose acknowledged
ones.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ArchiveWriteFailure
from ..history.service import HistoryService
from ..models.config import ArchiveConfig
from ..models.samples import HistoryCategory
from ..validation import ErrorSeverity, handle_error
from .records import ArchiveRecord, group_records, partition_path

logger = logging.getLogger(__name__)


class DiskArchiver:
    """
    Periodically persists history to an archive directory.

    Attributes:
        history: The shared history service, read only.
        config: Archive settings (directory, cadence, partition width).
    """

    def __init__(self, history: HistoryService, config: ArchiveConfig):
        self.history = history
        self.config = config
        self.directory = Path(config.directory)
        # Scheduled and emergency writes share one path.
        self._write_lock = threading.Lock()
        self._marks: Dict[HistoryCategory, Optional[float]] = {category: None for category in HistoryCategory}
        self._ticks = 0
        self.records_written = 0
        self.failed_writes = 0

    @property
    def marks(self) -> Dict[HistoryCategory, Optional[float]]:
        """Timestamp of the newest archived sample per category."""
        return dict(self._marks)

    def record_tick(self) -> int:
        """
        Count one sampler tick and write when the cadence is reached.

        Returns:
            Number of records written on this tick.
        """
        self._ticks += 1
        if self._ticks % self.config.every_samples != 0:
            return 0
        return self.write()

    def _pending(self) -> Dict[HistoryCategory, List[ArchiveRecord]]:
        pending = {}
        for category in HistoryCategory:
            # copy under the buffer's read lock, released before any I/O
            samples, gap = self.history.since_with_gap(category, self._marks[category])
            if gap:
                evicted = self.history.buffer(category).evicted
                logger.warning(
                    f"{category} samples left history before they were archived "
                    f"({evicted} evicted so far); raise monitor.sampling.history_capacity "
                    f"or lower monitor.archive.every_samples"
                )
            if samples:
                pending[category] = group_records(category, samples)
        return pending

    def write(self, emergency: bool = False) -> int:
        """
        Write every sample not archived yet.

        Args:
            emergency: Shutdown write. Failures raise instead of being
                retried on the next cadence.

        Returns:
            Number of records written.

        Raises:
            ArchiveWriteFailure: If an emergency write fails.
        """
        with self._write_lock:
            pending = self._pending()
            records = [record for category_records in pending.values() for record in category_records]
            if not records:
                logger.debug("Nothing new to archive")
                return 0

            try:
                self._append(records)
            except OSError as e:
                self.failed_writes += 1
                failure = ArchiveWriteFailure(getattr(e, "filename", None) or self.directory, e)
                if emergency:
                    handle_error(failure, "emergency archive write", severity=ErrorSeverity.CRITICAL,
                                 reraise=False, logger=logger)
                    raise failure from e
                handle_error(failure, "scheduled archive write", severity=ErrorSeverity.ERROR,
                             reraise=False, logger=logger)
                return 0

            for category, category_records in pending.items():
                self._marks[category] = category_records[-1].timestamp
            self.records_written += len(records)
            kind = "Emergency" if emergency else "Scheduled"
            logger.info(f"{kind} archive write: {len(records)} records to {self.directory}")
            return len(records)

    def _append(self, records: List[ArchiveRecord]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

        by_file: Dict[Path, List[str]] = {}
        for record in sorted(records, key=lambda item: item.timestamp):
            path = partition_path(self.directory, record.timestamp, self.config.partition_minutes)
            by_file.setdefault(path, []).append(record.to_json())

        for path, lines in by_file.items():
            # a crash mid-write can leave the last line unterminated
            lead = ""
            if _has_torn_tail(path):
                logger.warning(f"Unterminated record at end of {path}, starting a new line")
                lead = "\n"
            with open(path, "a", encoding="utf-8") as f:
                f.write(lead + "\n".join(lines) + "\n")
                f.flush()
                os.fsync(f.fileno())
            logger.debug(f"Appended {len(lines)} records to {path}")


def _has_torn_tail(path: Path) -> bool:
    """True when ``path`` is non-empty and does not end with a newline."""
    try:
        with open(path, "rb") as f:
            f.seek(0, os.SEEK_END)
            if f.tell() == 0:
                return False
            f.seek(-1, os.SEEK_END)
            return f.read(1) != b"\n"
    except FileNotFoundError:
        return False
