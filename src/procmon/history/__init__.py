"""
Bounded in-memory history of derived samples.
"""

from .buffer import HistoryBuffer
from .derive import DERIVERS, derive_all
from .locks import ReadWriteLock
from .service import HistoryService

__all__ = ["HistoryBuffer", "DERIVERS", "derive_all", "ReadWriteLock", "HistoryService"]
