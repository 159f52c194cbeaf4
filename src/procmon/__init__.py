"""
procmon: Linux performance counter collector.

This package samples kernel counters, turns them into per-second rates and
prints sar/mpstat style reports, with optional on-disk history and replay.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- sources: Raw counter snapshots (psutil and procfs)
- statistics: Delta and rate computation
- history: Bounded per-category history buffers
- storage: Archive writer, reader and Parquet export
- orchestration: The sampling loop and shutdown handling
- renderers: Text reports and HTML charts
- cli: Command-line interface

Usage:
    From command line:
        python -m procmon [options]

    Programmatically:
        from procmon import Sampler, PsutilCounterSource, get_config
        sampler = Sampler(get_config(), PsutilCounterSource())
        sampler.run()
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .history import HistoryBuffer, HistoryService
from .orchestration import Sampler
from .sources import PsutilCounterSource
from .statistics import StatisticsStore
from .storage import ArchiveReader, DiskArchiver

__version__ = "0.1.0"

__all__ = [
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "HistoryBuffer",
    "HistoryService",
    "Sampler",
    "PsutilCounterSource",
    "StatisticsStore",
    "ArchiveReader",
    "DiskArchiver",
]
