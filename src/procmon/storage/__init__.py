"""
Durable archive of history samples and offline replay.
"""

from .archiver import DiskArchiver
from .export import ParquetExporter
from .reader import ArchiveReader, ReplayResult, samples_frame
from .records import ArchiveRecord, group_records, parse_partition_start, partition_path

__all__ = [
    "DiskArchiver",
    "ParquetExporter",
    "ArchiveReader",
    "ReplayResult",
    "samples_frame",
    "ArchiveRecord",
    "group_records",
    "parse_partition_start",
    "partition_path",
]
