"""
Interactive HTML charts of history samples.

This module builds Plotly figures from live history windows or replayed
archives. Every history category has a builder that turns a Polars frame
of its samples into a figure; ChartWriter saves the figures as HTML using
the configured width and height.
"""

# Standard library imports
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

# Third-party library imports
import polars as pl
import plotly.graph_objects as go

# Local application imports
from ..models.config import ChartConfig
from ..models.samples import TOTAL, CpuSample, HistoricalSample, HistoryCategory
from ..storage.reader import samples_frame

logger = logging.getLogger(__name__)

MEBIBYTE = 1024.0 * 1024.0

FigureBuilder = Callable[[pl.DataFrame], go.Figure]


def _times(frame: pl.DataFrame) -> List[datetime]:
    return [datetime.fromtimestamp(value) for value in frame["timestamp"].to_list()]


def _lines(frame: pl.DataFrame, columns: Mapping[str, str], title: str, yaxis: str,
           scale: float = 1.0) -> go.Figure:
    fig = go.Figure()
    x = _times(frame)
    for column, label in columns.items():
        fig.add_trace(
            go.Scatter(x=x, y=(frame[column] / scale).to_list(), mode="lines", name=label)
        )
    fig.update_layout(title=title, xaxis_title="Time", yaxis_title=yaxis, legend_title_text="Metric")
    return fig


def cpu_figure(frame: pl.DataFrame) -> go.Figure:
    """Stacked CPU seconds per second by bucket, for the "all" row."""
    frame = frame.filter(pl.col("cpu_name") == "all").sort("timestamp")
    fig = go.Figure()
    x = _times(frame)
    for bucket in CpuSample.BUCKETS:
        if bucket == "idle":
            continue
        fig.add_trace(
            go.Scatter(x=x, y=frame[bucket].to_list(), mode="lines", name=bucket, stackgroup="cpu")
        )
    fig.add_trace(
        go.Scatter(x=x, y=frame["scheduler_waiting"].to_list(), mode="lines", name="scheduler wait",
                   line={"color": "black", "dash": "dash"})
    )
    fig.update_layout(
        title="CPU usage (CPU seconds per second)",
        xaxis_title="Time",
        yaxis_title="CPU seconds per second",
        legend_title_text="Bucket",
    )
    return fig


def per_cpu_figure(frame: pl.DataFrame) -> go.Figure:
    """Busy percentage of every CPU."""
    busy = [bucket for bucket in CpuSample.BUCKETS if bucket != "idle"]
    frame = frame.with_columns(
        (pl.sum_horizontal(busy) / (pl.sum_horizontal(busy) + pl.col("idle")) * 100.0)
        .fill_nan(0.0)
        .alias("busy_percent")
    ).sort("timestamp")
    fig = go.Figure()
    for (cpu_name,), group in frame.group_by(["cpu_name"], maintain_order=True):
        fig.add_trace(
            go.Scatter(x=_times(group), y=group["busy_percent"].to_list(), mode="lines", name=cpu_name)
        )
    fig.update_layout(title="Per-CPU busy", xaxis_title="Time", yaxis_title="% busy", legend_title_text="CPU")
    return fig


def load_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.sort("timestamp"),
        {"load_1": "load 1m", "load_5": "load 5m", "load_15": "load 15m", "current_runnable": "runnable"},
        "Load average",
        "Load",
    )


def memory_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.sort("timestamp"),
        {"memused": "used", "memavailable": "available", "cached": "cached", "buffers": "buffers",
         "memfree": "free"},
        "Memory",
        "MiB",
        scale=MEBIBYTE,
    )


def disk_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.filter(pl.col("device_name") == TOTAL).sort("timestamp"),
        {"read_bytes": "read", "write_bytes": "write"},
        "Disk throughput (all devices)",
        "MiB/s",
        scale=MEBIBYTE,
    )


def network_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.filter(pl.col("device_name") == TOTAL).sort("timestamp"),
        {"receive_bytes": "receive", "transmit_bytes": "transmit"},
        "Network throughput (all interfaces)",
        "MiB/s",
        scale=MEBIBYTE,
    )


def pressure_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.sort("timestamp"),
        {"cpu_some_avg10": "cpu some", "io_some_avg10": "io some", "io_full_avg10": "io full",
         "memory_some_avg10": "memory some", "memory_full_avg10": "memory full"},
        "Pressure stall (avg10)",
        "%",
    )


def vmstat_figure(frame: pl.DataFrame) -> go.Figure:
    return _lines(
        frame.sort("timestamp"),
        {"pgpgin": "paged in (KiB)", "pgpgout": "paged out (KiB)", "pswpin": "swapped in (pages)",
         "pswpout": "swapped out (pages)", "pgmajfault": "major faults"},
        "Paging",
        "per second",
    )


FIGURE_BUILDERS: Dict[HistoryCategory, FigureBuilder] = {
    HistoryCategory.CPU: cpu_figure,
    HistoryCategory.PER_CPU: per_cpu_figure,
    HistoryCategory.LOAD: load_figure,
    HistoryCategory.MEMORY: memory_figure,
    HistoryCategory.DISK: disk_figure,
    HistoryCategory.NETWORK: network_figure,
    HistoryCategory.PRESSURE: pressure_figure,
    HistoryCategory.VMSTAT: vmstat_figure,
}


class ChartWriter:
    """
    Writes one HTML chart per history category.

    Attributes:
        config: Chart size and output directory.
    """

    def __init__(self, config: ChartConfig):
        self.config = config

    def build(self, category: HistoryCategory, samples: List[HistoricalSample]) -> Optional[go.Figure]:
        """Figure for ``samples``, or None when there is nothing to plot."""
        frame = samples_frame(category, samples)
        if frame.is_empty():
            logger.debug(f"No {category} samples to plot. Skipping.")
            return None
        fig = FIGURE_BUILDERS[HistoryCategory(category)](frame)
        fig.update_layout(width=self.config.width, height=self.config.height)
        return fig

    def write_all(self, samples: Mapping[HistoryCategory, List[HistoricalSample]],
                  prefix: str = "procmon") -> List[Path]:
        """
        Build and save every category that has samples.

        Returns:
            Paths of the written HTML files.
        """
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for category, category_samples in samples.items():
            fig = self.build(category, category_samples)
            if fig is None:
                continue
            path = output_dir / f"{prefix}_{HistoryCategory(category).value}.html"
            try:
                fig.write_html(path)
            except OSError as e:
                logger.error(f"Failed to save plot {path} using Plotly: {e}", exc_info=True)
                continue
            logger.info(f"Interactive plot saved to: {path}")
            written.append(path)
        return written
