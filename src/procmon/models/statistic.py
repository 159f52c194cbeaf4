"""
Per-key delta and rate statistic.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Statistic:
    """
    Rate state for a single counter stream.

    Attributes:
        last_timestamp: Epoch seconds of the last accepted observation.
        last_value: Raw value of the last accepted observation.
        delta_value: Difference between the last two accepted observations.
        per_second_value: delta_value divided by the elapsed seconds.
        updated_value: True only when this tick produced a valid rate.
    """

    last_timestamp: float
    last_value: float
    delta_value: float = 0.0
    per_second_value: float = 0.0
    updated_value: bool = False
