"""
Archive record format and partition file naming.

An archive directory holds JSON Lines files named after the UTC start of
the partition they cover, e.g. ``procmon_20240501T1420Z.jsonl``. Every
line is one record: all samples of one history category taken at one
timestamp.
"""

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models.samples import HistoricalSample, HistoryCategory, sample_from_dict

PARTITION_PREFIX = "procmon_"
PARTITION_SUFFIX = ".jsonl"
PARTITION_TIME_FORMAT = "%Y%m%dT%H%MZ"


@dataclass(frozen=True)
class ArchiveRecord:
    """All samples of one category at one timestamp."""

    timestamp: float
    category: HistoryCategory
    samples: Tuple[HistoricalSample, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "category": self.category.value,
            "samples": [sample.to_dict() for sample in self.samples],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, line: str) -> "ArchiveRecord":
        """
        Decode one archive line.

        Raises:
            ValueError: If the line is not a valid record (bad JSON,
                unknown category, missing or mistyped fields).
        """
        try:
            data = json.loads(line)
            category = HistoryCategory(data["category"])
            timestamp = float(data["timestamp"])
            samples = tuple(sample_from_dict(category, item) for item in data["samples"])
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"invalid archive record: {e}") from e
        if not math.isfinite(timestamp):
            raise ValueError(f"invalid archive timestamp: {timestamp}")
        return cls(timestamp=timestamp, category=category, samples=samples)


def group_records(category: HistoryCategory, samples: Iterable[HistoricalSample]) -> List[ArchiveRecord]:
    """Group samples of one category by timestamp, keeping chronological order."""
    grouped: Dict[float, List[HistoricalSample]] = {}
    for sample in samples:
        grouped.setdefault(sample.timestamp, []).append(sample)
    return [
        ArchiveRecord(timestamp=timestamp, category=category, samples=tuple(items))
        for timestamp, items in sorted(grouped.items())
    ]


def partition_start(timestamp: float, partition_minutes: int) -> datetime:
    """UTC start of the partition containing ``timestamp``."""
    width = partition_minutes * 60
    return datetime.fromtimestamp(timestamp - timestamp % width, tz=timezone.utc)


def partition_path(directory: Path, timestamp: float, partition_minutes: int) -> Path:
    start = partition_start(timestamp, partition_minutes)
    return Path(directory) / f"{PARTITION_PREFIX}{start.strftime(PARTITION_TIME_FORMAT)}{PARTITION_SUFFIX}"


def parse_partition_start(path: Path) -> Optional[float]:
    """Epoch start of a partition file, or None if the name does not match."""
    name = Path(path).name
    if not (name.startswith(PARTITION_PREFIX) and name.endswith(PARTITION_SUFFIX)):
        return None
    stamp = name[len(PARTITION_PREFIX):-len(PARTITION_SUFFIX)]
    try:
        start = datetime.strptime(stamp, PARTITION_TIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return start.timestamp()
