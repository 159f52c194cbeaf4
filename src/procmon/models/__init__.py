"""
Data models for the procmon package.
"""

from .config import AppConfig, ArchiveConfig, ChartConfig, SamplerConfig
from .keys import ALL, SINGLE, Category, MetricKey
from .samples import (
    SAMPLE_TYPES,
    TOTAL,
    CpuSample,
    DiskSample,
    HistoricalSample,
    HistoryCategory,
    LoadSample,
    MemorySample,
    NetworkSample,
    PressureSample,
    VmstatSample,
    sample_from_dict,
)
from .snapshot import CounterSnapshot
from .statistic import Statistic

__all__ = [
    "AppConfig",
    "ArchiveConfig",
    "ChartConfig",
    "SamplerConfig",
    "ALL",
    "SINGLE",
    "Category",
    "MetricKey",
    "SAMPLE_TYPES",
    "TOTAL",
    "CpuSample",
    "DiskSample",
    "HistoricalSample",
    "HistoryCategory",
    "LoadSample",
    "MemorySample",
    "NetworkSample",
    "PressureSample",
    "VmstatSample",
    "sample_from_dict",
    "CounterSnapshot",
    "Statistic",
]
