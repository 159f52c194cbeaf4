"""
End-to-end tests for the complete sampling workflow.

Drives the Sampler with scripted counters through statistics, history,
text output, the shutdown archive write and replay from disk.
"""

import io

import pytest

from procmon.models.config import AppConfig, ArchiveConfig, ChartConfig, SamplerConfig
from procmon.models.keys import SINGLE, Category, MetricKey
from procmon.models.samples import HistoryCategory
from procmon.orchestration import EXIT_ARCHIVE_FAILURE, Sampler, SamplerState
from procmon.storage import ArchiveReader

BASE = 1714573500.0
USER_TIMES = [100.0, 150.0, 230.0, 260.0]


def _config(archive_dir=None, capacity=3, cycles=len(USER_TIMES), output="sar-u"):
    sampler = SamplerConfig(interval_seconds=0.001, history_capacity=capacity, max_cycles=cycles, output=output)
    archive = ArchiveConfig(enabled=archive_dir is not None, every_samples=100,
                            directory=archive_dir if archive_dir is not None else ArchiveConfig().directory)
    return AppConfig(sampler=sampler, archive=archive)


def _cpu_script(test_utils):
    return [
        (BASE + step, test_utils.cpu_readings(user=user, idle=1000.0 * step))
        for step, user in enumerate(USER_TIMES)
    ]


@pytest.mark.e2e
class TestSamplingWorkflow:
    """End-to-end tests for the sampling workflow."""

    def test_rates_history_and_archive(self, test_utils, temp_dir):
        """Sample, keep history, archive at shutdown and replay it."""
        archive_dir = temp_dir / "archive"
        output = io.StringIO()
        sampler = Sampler(_config(archive_dir), test_utils.scripted_source(_cpu_script(test_utils)), output=output)

        exit_code = sampler.run()

        assert exit_code == 0
        assert sampler.phase == SamplerState.STOPPED
        assert sampler.state.cycles_completed == 4

        # no rate on the first tick, then one report line per cycle
        report = [line for line in output.getvalue().splitlines() if "%user" not in line]
        assert len(report) == 3

        history = sampler.history.buffer(HistoryCategory.CPU).iterate()
        assert [sample.timestamp for sample in history] == [BASE + 1, BASE + 2, BASE + 3]
        assert [sample.user for sample in history] == pytest.approx([50.0, 80.0, 30.0])

        replay = ArchiveReader(archive_dir).read_window(BASE - 60, BASE + 60)
        replayed = replay.get(HistoryCategory.CPU)
        assert [sample.user for sample in replayed] == pytest.approx([50.0, 80.0, 30.0])
        assert replay.failures == []
        assert replay.corrupt_records == []

    def test_history_capacity_evicts_oldest(self, test_utils):
        script = _cpu_script(test_utils)
        script.append((BASE + 4, test_utils.cpu_readings(user=300.0, idle=4000.0)))
        config = _config(capacity=2, cycles=len(script))
        # history is only kept for archives or charts
        config.charts = ChartConfig(enabled=True)
        sampler = Sampler(config, test_utils.scripted_source(script), output=io.StringIO())

        sampler.run()

        history = sampler.history.buffer(HistoryCategory.CPU).iterate()
        assert [sample.timestamp for sample in history] == [BASE + 3, BASE + 4]

    def test_shutdown_archive_failure_exit_code(self, test_utils, temp_dir):
        blocker = temp_dir / "not-a-directory"
        blocker.write_text("")
        sampler = Sampler(_config(blocker / "archive"), test_utils.scripted_source(_cpu_script(test_utils)),
                          output=io.StringIO())

        exit_code = sampler.run()

        assert exit_code == EXIT_ARCHIVE_FAILURE
        assert sampler.state.emergency_write_failed is True
        assert sampler.phase == SamplerState.STOPPED

    def test_missing_metric_does_not_stop_sampling(self, test_utils, temp_dir):
        """A counter vanishing for one tick only pauses that counter."""
        script = []
        for step, user in enumerate(USER_TIMES + [300.0]):
            readings = test_utils.cpu_readings(user=user, idle=1000.0 * step)
            if step != 2:
                readings.update(test_utils.load_readings(load_1=1.0 + step))
            script.append((BASE + step, readings))
        sampler = Sampler(_config(temp_dir / "archive", capacity=10, cycles=len(script), output="sar-q-LOAD"),
                          test_utils.scripted_source(script), output=io.StringIO())

        assert sampler.run() == 0

        load = sampler.history.buffer(HistoryCategory.LOAD).iterate()
        cpu = sampler.history.buffer(HistoryCategory.CPU).iterate()
        assert [sample.timestamp for sample in load] == [BASE + 1, BASE + 3, BASE + 4]
        assert [sample.load_1 for sample in load] == [2.0, 4.0, 5.0]
        assert len(cpu) == 4
        assert sampler.store.get(MetricKey(Category.LOAD, SINGLE, "load_1")).last_value == 5.0
