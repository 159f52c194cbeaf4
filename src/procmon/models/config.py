"""
Configuration data models.

This module contains the dataclasses that hold the validated application
configuration. Instances are produced by ``procmon.config.validators`` and
are treated as read-only by the rest of the package.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_OUTPUT = "sar-u"


@dataclass
class SamplerConfig:
    """
    Settings of the sampling loop.

    Attributes:
        interval_seconds: Seconds between ticks.
        history_capacity: Number of samples kept per history category.
        max_cycles: Stop after this many completed cycles; None runs until
            a shutdown signal.
        output: Name of the text renderer used in non-daemon mode.
        header_interval: Reprint the renderer header every N cycles.
        daemon: Suppress text output entirely.
    """

    interval_seconds: float = 1.0
    history_capacity: int = 10800
    max_cycles: Optional[int] = None
    output: str = DEFAULT_OUTPUT
    header_interval: int = 30
    daemon: bool = False


@dataclass
class ArchiveConfig:
    """
    Settings of the on-disk archive.

    Attributes:
        enabled: Write history to disk.
        directory: Directory holding the partition files.
        every_samples: Write cadence, in sampler ticks.
        partition_minutes: Width of one partition file, in minutes.
    """

    enabled: bool = False
    directory: Path = Path(".")
    every_samples: int = 60
    partition_minutes: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "directory": str(self.directory),
            "every_samples": self.every_samples,
            "partition_minutes": self.partition_minutes,
        }


@dataclass
class ChartConfig:
    """Size and location of generated HTML charts."""

    enabled: bool = False
    width: int = 1800
    height: int = 1200
    output_dir: Path = Path("charts")


@dataclass
class AppConfig:
    """
    The root configuration object for the entire application.
    """

    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    charts: ChartConfig = field(default_factory=ChartConfig)

    @property
    def history_needed(self) -> bool:
        """History is only kept when something consumes it."""
        return self.archive.enabled or self.charts.enabled
