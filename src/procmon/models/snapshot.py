"""
One tick's worth of raw counter readings.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .keys import MetricKey


@dataclass
class CounterSnapshot:
    """
    Raw counters read at a single instant.

    A reading of ``None`` means the counter is tracked but could not be
    read on this tick (unsupported kernel, file vanished, device gone).
    """

    # Epoch seconds at which the snapshot was taken.
    timestamp: float
    readings: Dict[MetricKey, Optional[float]] = field(default_factory=dict)

    def set(self, key: MetricKey, value: Optional[float]) -> None:
        self.readings[key] = None if value is None else float(value)

    def __len__(self) -> int:
        return len(self.readings)
