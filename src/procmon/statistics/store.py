"""
Keyed delta and rate statistics.

The StatisticsStore turns successive raw counter readings into
:class:`~procmon.models.statistic.Statistic` records. It is written by a
single owner (the sampler) and read through immutable, whole-tick
:class:`StoreView` objects so readers never observe a half-applied tick.
"""

import logging
import threading
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ..errors import KeyNotFound
from ..models.keys import Category, MetricKey
from ..models.snapshot import CounterSnapshot
from ..models.statistic import Statistic

logger = logging.getLogger(__name__)

# Observations closer together than this produce no rate.
MIN_ELAPSED_SECONDS = 0.001


class StoreView(Mapping):
    """
    Read-only view of the store as published at the end of one tick.
    """

    def __init__(self, statistics: Dict[MetricKey, Statistic], timestamp: Optional[float] = None):
        self._statistics = MappingProxyType(statistics)
        self.timestamp = timestamp

    def __getitem__(self, key: MetricKey) -> Statistic:
        return self._statistics[key]

    def __iter__(self) -> Iterator[MetricKey]:
        return iter(self._statistics)

    def __len__(self) -> int:
        return len(self._statistics)

    def require(self, key: MetricKey) -> Statistic:
        """Return the statistic for ``key`` or raise KeyNotFound."""
        statistic = self._statistics.get(key)
        if statistic is None:
            raise KeyNotFound(key)
        return statistic

    def value_or(self, key: MetricKey, default: float = 0.0) -> float:
        """Per-second value of ``key``, or ``default`` when absent."""
        statistic = self._statistics.get(key)
        return default if statistic is None else statistic.per_second_value

    def last_or(self, key: MetricKey, default: float = 0.0) -> float:
        """Last raw value of ``key``, or ``default`` when absent."""
        statistic = self._statistics.get(key)
        return default if statistic is None else statistic.last_value

    def instances(self, category: Category) -> List[str]:
        """Sorted subcategories present for a category."""
        return sorted({key.subcategory for key in self._statistics if key.category == category})


class StatisticsStore:
    """
    Mutable statistics keyed by MetricKey.

    Only the sampler calls :meth:`update` and :meth:`publish`. Readers use
    :meth:`snapshot`, which returns the last published view.
    """

    def __init__(self):
        self._statistics: Dict[MetricKey, Statistic] = {}
        self._published = StoreView({})
        self._publish_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._statistics)

    def get(self, key: MetricKey) -> Optional[Statistic]:
        """Current statistic of ``key``; None when never observed."""
        return self._statistics.get(key)

    def update(self, key: MetricKey, timestamp: float, raw_value: Optional[float],
               cumulative: bool = True) -> Optional[Statistic]:
        """
        Apply one observation to the statistic of ``key``.

        Args:
            key: The counter stream.
            timestamp: Epoch seconds of the observation.
            raw_value: The raw counter value, or None when the counter could
                not be read on this tick.
            cumulative: False for gauges, which may decrease freely.

        Returns:
            The new statistic, or None for a never-seen key without a value.
        """
        previous = self._statistics.get(key)

        if raw_value is None:
            if previous is None:
                return None
            if previous.updated_value:
                previous = Statistic(previous.last_timestamp, previous.last_value,
                                     previous.delta_value, previous.per_second_value, False)
                self._statistics[key] = previous
            return previous

        raw_value = float(raw_value)
        if previous is None:
            statistic = Statistic(last_timestamp=timestamp, last_value=raw_value)
        else:
            elapsed = timestamp - previous.last_timestamp
            delta = raw_value - previous.last_value
            if elapsed < MIN_ELAPSED_SECONDS:
                # keep the old baseline so the next rate spans the full interval
                statistic = Statistic(previous.last_timestamp, previous.last_value,
                                      previous.delta_value, previous.per_second_value, False)
            elif cumulative and delta < 0:
                logger.debug(f"Counter {key} decreased from {previous.last_value} to {raw_value}, rebaselining")
                statistic = Statistic(last_timestamp=timestamp, last_value=raw_value)
            else:
                statistic = Statistic(
                    last_timestamp=timestamp,
                    last_value=raw_value,
                    delta_value=delta,
                    per_second_value=delta / elapsed,
                    updated_value=True,
                )
        self._statistics[key] = statistic
        return statistic

    def apply(self, snapshot: CounterSnapshot, is_cumulative=lambda key: True) -> int:
        """
        Apply every reading of a snapshot.

        Returns:
            Number of statistics that produced a rate on this tick.
        """
        updated = 0
        for key, value in snapshot.readings.items():
            statistic = self.update(key, snapshot.timestamp, value, cumulative=is_cumulative(key))
            if statistic is not None and statistic.updated_value:
                updated += 1
        return updated

    def publish(self, timestamp: Optional[float] = None) -> StoreView:
        """Make the current state visible to readers as one immutable view."""
        view = StoreView(dict(self._statistics), timestamp)
        with self._publish_lock:
            self._published = view
        return view

    def snapshot(self) -> StoreView:
        """The last published view."""
        with self._publish_lock:
            return self._published
