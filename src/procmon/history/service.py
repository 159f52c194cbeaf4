"""
Owner of the per-category history buffers.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.samples import HistoricalSample, HistoryCategory
from .buffer import HistoryBuffer

logger = logging.getLogger(__name__)


class HistoryService:
    """
    One HistoryBuffer per history category.

    Created once at startup and shared between the sampler, which appends,
    and the renderers and archiver, which only read.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.buffers: Dict[HistoryCategory, HistoryBuffer] = {
            category: HistoryBuffer(capacity, name=category.value) for category in HistoryCategory
        }
        logger.debug(f"History service created with capacity {capacity} per category")

    def buffer(self, category: HistoryCategory) -> HistoryBuffer:
        return self.buffers[HistoryCategory(category)]

    def append(self, category: HistoryCategory, samples: Iterable[HistoricalSample]) -> None:
        self.buffer(category).extend(samples)

    def append_all(self, derived: Mapping[HistoryCategory, List[HistoricalSample]]) -> None:
        for category, samples in derived.items():
            self.append(category, samples)

    def window(self, category: HistoryCategory, start: float, end: float) -> List[HistoricalSample]:
        return self.buffer(category).window(start, end)

    def since(self, category: HistoryCategory, timestamp: Optional[float]) -> List[HistoricalSample]:
        return self.buffer(category).since(timestamp)

    def since_with_gap(self, category: HistoryCategory,
                       timestamp: Optional[float]) -> Tuple[List[HistoricalSample], bool]:
        return self.buffer(category).since_with_gap(timestamp)

    def latest(self, category: HistoryCategory) -> Optional[HistoricalSample]:
        return self.buffer(category).latest()

    def snapshot(self) -> Dict[HistoryCategory, List[HistoricalSample]]:
        """Copy of every buffer, one read lock at a time."""
        return {category: buffer.iterate() for category, buffer in self.buffers.items()}

    def load(self, samples: Mapping[HistoryCategory, List[HistoricalSample]]) -> None:
        """
        Load replayed samples into the buffers.

        Samples are sorted by timestamp first; when more samples are loaded
        than a buffer holds, only the newest are kept.
        """
        for category, category_samples in samples.items():
            ordered = sorted(category_samples, key=lambda sample: sample.timestamp)
            self.append(category, ordered)
            logger.info(f"Loaded {len(ordered)} {category} samples into history")

    def __len__(self) -> int:
        return sum(len(buffer) for buffer in self.buffers.values())
