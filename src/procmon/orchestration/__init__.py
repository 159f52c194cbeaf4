"""
Sampling loop orchestration and shutdown handling.
"""

from .sampler import EXIT_ARCHIVE_FAILURE, Sampler
from .shared_state import RuntimeState, SamplerState
from .signal_handler import SignalHandler
from .ticker import IntervalTicker

__all__ = [
    "EXIT_ARCHIVE_FAILURE",
    "Sampler",
    "RuntimeState",
    "SamplerState",
    "SignalHandler",
    "IntervalTicker",
]
