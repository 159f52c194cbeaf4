"""
Offline replay of archived history.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

import polars as pl

from ..errors import ArchiveCorruption, ArchiveReadFailure
from ..models.samples import SAMPLE_TYPES, HistoricalSample, HistoryCategory
from .records import PARTITION_PREFIX, PARTITION_SUFFIX, ArchiveRecord, parse_partition_start

logger = logging.getLogger(__name__)

TEXT_COLUMNS = ("cpu_name", "device_name")


def samples_frame(category: HistoryCategory, samples: List[HistoricalSample]) -> pl.DataFrame:
    """
    Samples of one category as a polars DataFrame.

    Columns follow the sample dataclass fields; no samples yield an empty
    frame with the same columns.
    """
    sample_type = SAMPLE_TYPES[HistoryCategory(category)]
    data = {}
    schema = {}
    for item in dataclasses.fields(sample_type):
        if item.name in TEXT_COLUMNS:
            schema[item.name] = pl.Utf8
            data[item.name] = [str(getattr(sample, item.name)) for sample in samples]
        else:
            schema[item.name] = pl.Float64
            data[item.name] = [float(getattr(sample, item.name)) for sample in samples]
    return pl.DataFrame(data, schema=schema)


@dataclass
class ReplayResult:
    """
    Samples replayed from archive files.

    Unlike the live history buffers, a replay result is unbounded; it holds
    everything the requested window or files contained.
    """

    samples: Dict[HistoryCategory, List[HistoricalSample]] = field(default_factory=dict)
    files_read: List[Path] = field(default_factory=list)
    failures: List[ArchiveReadFailure] = field(default_factory=list)
    corrupt_records: List[ArchiveCorruption] = field(default_factory=list)
    _seen: Set[Tuple[HistoryCategory, float]] = field(default_factory=set, repr=False)

    def add(self, record: ArchiveRecord) -> bool:
        """Add a record unless the same (category, timestamp) was seen already."""
        identity = (record.category, record.timestamp)
        if identity in self._seen:
            return False
        self._seen.add(identity)
        self.samples.setdefault(record.category, []).extend(record.samples)
        return True

    def sort(self) -> None:
        for samples in self.samples.values():
            samples.sort(key=lambda sample: sample.timestamp)

    def get(self, category: HistoryCategory) -> List[HistoricalSample]:
        return self.samples.get(HistoryCategory(category), [])

    @property
    def record_count(self) -> int:
        return len(self._seen)

    def to_frame(self, category: HistoryCategory) -> pl.DataFrame:
        """Replayed samples of one category as a polars DataFrame."""
        return samples_frame(category, self.get(category))


class ArchiveReader:
    """
    Reads partition files written by the DiskArchiver.

    Attributes:
        directory: The archive directory.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def partition_files(self) -> List[Tuple[float, Path]]:
        """
        Partition files of the directory, sorted by start time.

        Raises:
            ArchiveReadFailure: If the directory is missing or unreadable.
        """
        if not self.directory.is_dir():
            raise ArchiveReadFailure(self.directory, FileNotFoundError("archive directory does not exist"))
        try:
            candidates = list(self.directory.glob(f"{PARTITION_PREFIX}*{PARTITION_SUFFIX}"))
        except OSError as e:
            raise ArchiveReadFailure(self.directory, e) from e

        partitions = []
        for path in candidates:
            start = parse_partition_start(path)
            if start is None:
                logger.debug(f"Ignoring unrecognized file in archive directory: {path}")
                continue
            partitions.append((start, path))
        partitions.sort()
        return partitions

    def read_window(self, start: float, end: float) -> ReplayResult:
        """
        Replay every record with ``start <= timestamp <= end``.

        Only partition files that can contain such records are opened.
        """
        result = ReplayResult()
        if start > end:
            return result

        partitions = self.partition_files()
        for index, (partition_begin, path) in enumerate(partitions):
            next_begin = partitions[index + 1][0] if index + 1 < len(partitions) else None
            if partition_begin > end or (next_begin is not None and next_begin <= start):
                continue
            self._read_file(path, result, start, end)
        result.sort()
        logger.info(
            f"Replayed {result.record_count} records from {len(result.files_read)} files "
            f"for window {start:.0f}..{end:.0f}"
        )
        return result

    def read_files(self, paths: Iterable[Path]) -> ReplayResult:
        """
        Replay explicit archive files.

        Unreadable files are collected in ``result.failures`` instead of
        aborting the whole replay.
        """
        result = ReplayResult()
        for path in paths:
            self._read_file(Path(path), result)
        result.sort()
        return result

    def _read_file(self, path: Path, result: ReplayResult,
                   start: Optional[float] = None, end: Optional[float] = None) -> None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        record = ArchiveRecord.from_json(line)
                    except ValueError as e:
                        # a torn final line after a crash ends up here too
                        corruption = ArchiveCorruption(path, line_number, e)
                        logger.warning(str(corruption))
                        result.corrupt_records.append(corruption)
                        continue
                    if start is not None and record.timestamp < start:
                        continue
                    if end is not None and record.timestamp > end:
                        continue
                    result.add(record)
        except (OSError, UnicodeDecodeError) as e:
            failure = ArchiveReadFailure(path, e)
            logger.error(str(failure))
            result.failures.append(failure)
            return
        result.files_read.append(path)
