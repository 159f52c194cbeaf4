"""
Bounded, chronologically ordered sample buffer.
"""

import logging
from collections import deque
from typing import Deque, Generic, Iterable, List, Optional, Tuple, TypeVar

from ..models.samples import HistoricalSample
from ..validation import validate_positive_integer
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=HistoricalSample)


class HistoryBuffer(Generic[T]):
    """
    Fixed-capacity FIFO of samples.

    Samples are kept in append order and the oldest sample is evicted once
    the capacity is exceeded. The number of evicted samples and the
    timestamp of the newest one are kept so a reader that must see every
    sample can tell when it fell behind. All reads copy the requested
    samples while holding the shared lock and return the copy, so callers
    never hold a lock while they render or write to disk.
    """

    def __init__(self, capacity: int, name: str = "history"):
        self.capacity = validate_positive_integer(capacity, field_name="history capacity")
        self.name = name
        self._samples: Deque[T] = deque(maxlen=self.capacity)
        self._lock = ReadWriteLock()
        self.evicted = 0
        self.last_evicted: Optional[float] = None

    def append(self, sample: T) -> None:
        self.extend([sample])

    def extend(self, samples: Iterable[T]) -> None:
        """Append several samples under a single write lock."""
        samples = list(samples)
        if not samples:
            return
        with self._lock.write_locked():
            overflow = len(self._samples) + len(samples) - self.capacity
            if overflow > 0:
                self._note_eviction(overflow, samples)
            self._samples.extend(samples)

    def _note_eviction(self, overflow: int, incoming: List[T]) -> None:
        # newest of the samples pushed out by this extend
        retained = len(self._samples)
        if overflow <= retained:
            newest = self._samples[overflow - 1]
        else:
            newest = incoming[overflow - retained - 1]
        self.evicted += overflow
        self.last_evicted = newest.timestamp

    def window(self, start: float, end: float) -> List[T]:
        """Samples with ``start <= timestamp <= end``, oldest first."""
        if start > end:
            return []
        with self._lock.read_locked():
            return [sample for sample in self._samples if start <= sample.timestamp <= end]

    def since(self, timestamp: Optional[float]) -> List[T]:
        """Samples strictly newer than ``timestamp``; everything when None."""
        with self._lock.read_locked():
            if timestamp is None:
                return list(self._samples)
            return [sample for sample in self._samples if sample.timestamp > timestamp]

    def since_with_gap(self, timestamp: Optional[float]) -> Tuple[List[T], bool]:
        """
        Like :meth:`since`, plus whether a sample newer than ``timestamp``
        was evicted before this call could return it.
        """
        with self._lock.read_locked():
            gap = self.last_evicted is not None and (timestamp is None or self.last_evicted > timestamp)
            if timestamp is None:
                return list(self._samples), gap
            return [sample for sample in self._samples if sample.timestamp > timestamp], gap

    def latest(self) -> Optional[T]:
        with self._lock.read_locked():
            return self._samples[-1] if self._samples else None

    def iterate(self) -> List[T]:
        """Copy of all retained samples, oldest first."""
        with self._lock.read_locked():
            return list(self._samples)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._samples.clear()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._samples)

    def __repr__(self) -> str:
        return f"HistoryBuffer(name={self.name!r}, capacity={self.capacity}, size={len(self)})"
