"""
Unit tests for the Sampler state machine.
"""

import io
import signal
import threading
import time

import pytest

from procmon.errors import KeyNotFound
from procmon.models.config import AppConfig, ArchiveConfig, SamplerConfig
from procmon.models.keys import ALL, Category, MetricKey
from procmon.models.samples import HistoryCategory
from procmon.orchestration import EXIT_ARCHIVE_FAILURE, RuntimeState, Sampler, SamplerState, SignalHandler
from procmon.sources.base import AbstractCounterSource
from procmon.storage import ArchiveReader

BASE = 1714573500.0


def _script(test_utils, steps=4):
    return [
        (BASE + step, test_utils.cpu_readings(user=10.0 * step ** 2, idle=100.0 * step))
        for step in range(steps)
    ]


def _config(temp_dir=None, **sampler):
    settings = {"interval_seconds": 0.001, "history_capacity": 10}
    settings.update(sampler)
    archive = ArchiveConfig(enabled=temp_dir is not None, directory=temp_dir or ArchiveConfig().directory,
                            every_samples=100)
    return AppConfig(sampler=SamplerConfig(**settings), archive=archive)


@pytest.mark.unit
class TestSamplerCycle:
    """Test cases for a single cycle."""

    def test_cycle_publishes_view(self, test_utils):
        source = test_utils.scripted_source(_script(test_utils))
        sampler = Sampler(_config(daemon=True), source)

        sampler.run_cycle()
        view = sampler.run_cycle()

        assert view.timestamp == BASE + 1
        assert view[MetricKey(Category.CPU, ALL, "user")].per_second_value == pytest.approx(10.0)
        assert sampler.store.snapshot() is view
        assert sampler.phase == SamplerState.IDLE
        assert sampler.state.cycles_completed == 2

    def test_history_only_kept_when_needed(self, test_utils, temp_dir):
        source = test_utils.scripted_source(_script(test_utils))
        without = Sampler(_config(daemon=True), source)
        for _ in range(3):
            without.run_cycle()

        with_archive = Sampler(_config(temp_dir, daemon=True), test_utils.scripted_source(_script(test_utils)))
        for _ in range(3):
            with_archive.run_cycle()

        assert len(without.history) == 0
        assert len(with_archive.history.buffer(HistoryCategory.CPU)) == 2

    def test_render_with_header_interval(self, test_utils):
        output = io.StringIO()
        source = test_utils.scripted_source(_script(test_utils, steps=6))
        sampler = Sampler(_config(header_interval=2), source, output=output)

        for _ in range(6):
            sampler.run_cycle()

        lines = output.getvalue().splitlines()
        headers = [line for line in lines if "%user" in line]
        # the first cycle has no rate yet, five reports follow
        assert len(lines) == 5 + 3
        assert len(headers) == 3

    def test_daemon_prints_nothing(self, test_utils):
        output = io.StringIO()
        sampler = Sampler(_config(daemon=True), test_utils.scripted_source(_script(test_utils)), output=output)

        for _ in range(3):
            sampler.run_cycle()

        assert output.getvalue() == ""

    def test_missing_statistic_skips_output_only(self, test_utils):
        """KeyNotFound while rendering drops this cycle's report, not the cycle."""
        output = io.StringIO()
        sampler = Sampler(_config(), test_utils.scripted_source(_script(test_utils)), output=output)

        def broken(view, print_header):
            raise KeyNotFound(MetricKey(Category.CPU, ALL, "user"))

        sampler.renderer = broken
        sampler.run_cycle()

        assert output.getvalue() == ""
        assert sampler.state.skipped_renders == 1
        assert sampler.state.cycles_completed == 1


@pytest.mark.unit
class TestSamplerRun:
    """Test cases for the run loop and shutdown."""

    def test_stops_after_max_cycles(self, test_utils):
        source = test_utils.scripted_source(_script(test_utils))
        sampler = Sampler(_config(max_cycles=3, daemon=True), source)

        assert sampler.run() == 0
        assert sampler.state.cycles_completed == 3
        assert sampler.phase == SamplerState.STOPPED

    def test_shutdown_requested_before_start(self, test_utils):
        sampler = Sampler(_config(daemon=True), test_utils.scripted_source(_script(test_utils)))
        sampler.stop()

        assert sampler.run() == 0
        assert sampler.state.cycles_completed == 0

    def test_emergency_write_on_exit(self, test_utils, temp_dir):
        """Samples not yet archived by the cadence are written at shutdown."""
        sampler = Sampler(_config(temp_dir, max_cycles=4, daemon=True),
                          test_utils.scripted_source(_script(test_utils)))

        assert sampler.run() == 0

        result = ArchiveReader(temp_dir).read_window(BASE, BASE + 10)
        assert [sample.timestamp for sample in result.get(HistoryCategory.CPU)] == [BASE + 1, BASE + 2, BASE + 3]

    def test_emergency_write_failure_sets_exit_code(self, test_utils, temp_dir):
        blocker = temp_dir / "archive"
        blocker.write_text("")
        sampler = Sampler(_config(blocker, max_cycles=3, daemon=True),
                          test_utils.scripted_source(_script(test_utils)))

        assert sampler.run() == EXIT_ARCHIVE_FAILURE
        assert sampler.state.emergency_write_failed is True

    def test_exception_still_archives(self, test_utils, temp_dir):
        """A crash in the loop still attempts the shutdown write."""
        source = test_utils.scripted_source(_script(test_utils))
        sampler = Sampler(_config(temp_dir, daemon=True), source)
        original = sampler.run_cycle
        calls = []

        def failing_cycle():
            calls.append(1)
            if len(calls) == 3:
                raise RuntimeError("source exploded")
            return original()

        sampler.run_cycle = failing_cycle

        with pytest.raises(RuntimeError):
            sampler.run()

        assert sampler.phase == SamplerState.STOPPED
        assert ArchiveReader(temp_dir).read_window(BASE, BASE + 10).record_count == 1


class _AdvancingSource(AbstractCounterSource):
    """CPU counters that advance by one second of wall time per read, forever."""

    def __init__(self, test_utils):
        super().__init__()
        self.test_utils = test_utils
        self.calls = 0

    def _now(self) -> float:
        return BASE + self.calls

    def _collect(self, snapshot):
        for key, value in self.test_utils.cpu_readings(user=10.0 * self.calls, idle=90.0 * self.calls).items():
            snapshot.set(key, value)
        self.calls += 1


@pytest.mark.unit
class TestSignalledShutdown:
    """A signal arriving while the loop runs in another thread."""

    def test_archive_holds_every_sample(self, test_utils, temp_dir):
        state = RuntimeState()
        sampler = Sampler(_config(temp_dir, daemon=True, history_capacity=100000), _AdvancingSource(test_utils),
                          state=state)
        handler = SignalHandler(state)
        handler.register()
        exit_codes = []
        thread = threading.Thread(target=lambda: exit_codes.append(sampler.run()))

        try:
            thread.start()
            deadline = time.monotonic() + 10
            while state.cycles_completed < 5 and time.monotonic() < deadline:
                time.sleep(0.001)
            SignalHandler._global_signal_handler(signal.SIGTERM, None)
            thread.join(timeout=10)
        finally:
            handler.unregister()
            sampler.stop()

        assert not thread.is_alive()
        assert exit_codes == [0]
        assert sampler.phase == SamplerState.STOPPED
        history = sampler.history.buffer(HistoryCategory.CPU).iterate()
        assert len(history) == state.cycles_completed - 1
        archived = ArchiveReader(temp_dir).read_window(BASE, BASE + state.cycles_completed).get(HistoryCategory.CPU)
        assert archived == history
