"""
Delta and rate statistics over raw counters.
"""

from .store import MIN_ELAPSED_SECONDS, StatisticsStore, StoreView

__all__ = ["MIN_ELAPSED_SECONDS", "StatisticsStore", "StoreView"]
