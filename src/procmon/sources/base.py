"""
Defines the abstract interface for counter snapshot sources.

A source reads every tracked raw counter once per call and returns them
as a single timestamped CounterSnapshot. Implementations must never
raise for a single missing counter; they report it as ``None`` instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Set

from ..models.keys import MetricKey
from ..models.snapshot import CounterSnapshot

logger = logging.getLogger(__name__)


class AbstractCounterSource(ABC):
    """
    Abstract base class for counter snapshot sources.

    Subclasses implement ``_collect`` to fill a snapshot. The base class
    remembers every key it has produced so far and reports keys that
    disappear (a hot-unplugged disk, a removed interface) as ``None`` on
    later ticks.
    """

    def __init__(self):
        self._known_keys: Set[MetricKey] = set()
        logger.info(f"Initializing {self.__class__.__name__}")

    @abstractmethod
    def _collect(self, snapshot: CounterSnapshot) -> None:
        """Fill ``snapshot`` with the counters readable right now."""
        pass

    @abstractmethod
    def _now(self) -> float:
        """Epoch seconds used to stamp the snapshot."""
        pass

    def read_snapshot(self) -> CounterSnapshot:
        """
        Read one snapshot of all tracked counters.

        Returns:
            A CounterSnapshot whose readings contain every key seen so far;
            keys that could not be read on this tick map to None.
        """
        snapshot = CounterSnapshot(timestamp=self._now())
        self._collect(snapshot)

        for key in self._known_keys.difference(snapshot.readings):
            snapshot.readings[key] = None
        self._known_keys.update(snapshot.readings)
        return snapshot
