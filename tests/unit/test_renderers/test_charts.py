"""
Unit tests for the Plotly chart builders.
"""

import pytest

from procmon.models.config import ChartConfig
from procmon.models.samples import CpuSample, DiskSample, HistoryCategory, LoadSample, VmstatSample
from procmon.renderers.charts import FIGURE_BUILDERS, ChartWriter

BASE = 1714573500.0


@pytest.mark.unit
class TestChartWriter:
    """Test cases for figure building and HTML output."""

    def test_build_applies_size(self, temp_dir):
        writer = ChartWriter(ChartConfig(enabled=True, width=900, height=600, output_dir=temp_dir))
        samples = [CpuSample(timestamp=BASE + step, user=0.5, system=0.25, idle=1.25) for step in range(3)]

        fig = writer.build(HistoryCategory.CPU, samples)

        assert fig.layout.width == 900
        assert fig.layout.height == 600
        assert "user" in [trace.name for trace in fig.data]

    def test_every_category_has_a_builder(self):
        assert set(FIGURE_BUILDERS) == set(HistoryCategory)

    def test_empty_category_is_skipped(self, temp_dir):
        writer = ChartWriter(ChartConfig(enabled=True, output_dir=temp_dir))

        assert writer.build(HistoryCategory.LOAD, []) is None

    def test_per_cpu_one_trace_per_cpu(self, temp_dir):
        writer = ChartWriter(ChartConfig(enabled=True, output_dir=temp_dir))
        samples = [
            CpuSample(timestamp=BASE, cpu_name=name, user=0.5, idle=0.5)
            for name in ("cpu0", "cpu1")
        ]

        fig = writer.build(HistoryCategory.PER_CPU, samples)

        assert sorted(trace.name for trace in fig.data) == ["cpu0", "cpu1"]
        assert list(fig.data[0].y) == [50.0]

    def test_vmstat_paging_figure(self, temp_dir):
        writer = ChartWriter(ChartConfig(enabled=True, output_dir=temp_dir))
        samples = [VmstatSample(timestamp=BASE + step, pgpgin=10.0 * step) for step in range(2)]

        fig = writer.build(HistoryCategory.VMSTAT, samples)

        assert "paged in (KiB)" in [trace.name for trace in fig.data]
        assert list(fig.data[0].y) == [0.0, 10.0]

    def test_write_all(self, temp_dir):
        writer = ChartWriter(ChartConfig(enabled=True, output_dir=temp_dir / "charts"))
        samples = {
            HistoryCategory.LOAD: [LoadSample(timestamp=BASE, load_1=1.0), LoadSample(timestamp=BASE + 1)],
            HistoryCategory.DISK: [DiskSample(timestamp=BASE, device_name="TOTAL", read_bytes=1024.0)],
            HistoryCategory.NETWORK: [],
        }

        written = writer.write_all(samples)

        assert sorted(path.name for path in written) == ["procmon_disk.html", "procmon_load.html"]
        assert all(path.exists() for path in written)
