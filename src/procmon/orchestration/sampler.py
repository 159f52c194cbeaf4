"""
The sampling loop.

The Sampler drives one cycle per tick:

    TICK -> FETCH -> UPDATE_STORE -> APPEND_HISTORY -> RENDER_ARCHIVE -> IDLE

and owns shutdown. It is the only writer of the statistics store and the
history buffers. On exit it performs a final, synchronous archive write
when archiving is enabled.
"""

import logging
import sys
import time
from typing import Callable, Optional, TextIO

from ..errors import ArchiveWriteFailure, KeyNotFound
from ..history.derive import derive_all
from ..history.service import HistoryService
from ..models.config import AppConfig
from ..renderers.text import RENDERERS
from ..sources.base import AbstractCounterSource
from ..sources.fields import is_cumulative
from ..statistics.store import StatisticsStore, StoreView
from ..storage.archiver import DiskArchiver
from .shared_state import RuntimeState, SamplerState
from .ticker import IntervalTicker

logger = logging.getLogger(__name__)

# Exit status when the shutdown archive write fails.
EXIT_ARCHIVE_FAILURE = 2


class Sampler:
    """
    Orchestrates fetching, statistics, history, rendering and archiving.

    Attributes:
        config: The application configuration.
        source: Where raw counters come from.
        store: Statistics store, written only by this sampler.
        history: Shared history service; appended to only when archiving or
            charts need it.
        archiver: DiskArchiver when archiving is enabled, else None.
        state: Runtime state shared with the signal handler.
    """

    def __init__(
        self,
        config: AppConfig,
        source: AbstractCounterSource,
        store: Optional[StatisticsStore] = None,
        history: Optional[HistoryService] = None,
        archiver: Optional[DiskArchiver] = None,
        output: TextIO = sys.stdout,
        state: Optional[RuntimeState] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.source = source
        self.store = store or StatisticsStore()
        self.history = history or HistoryService(config.sampler.history_capacity)
        if archiver is None and config.archive.enabled:
            archiver = DiskArchiver(self.history, config.archive)
        self.archiver = archiver
        self.output = output
        self.state = state or RuntimeState()
        self.renderer = RENDERERS[config.sampler.output]
        self.ticker = IntervalTicker(
            config.sampler.interval_seconds,
            wait=self.state.shutdown_requested.wait,
            clock=clock,
        )
        self._rendered_cycles = 0

    @property
    def phase(self) -> SamplerState:
        return self.state.phase

    def stop(self) -> None:
        """Request shutdown; the loop exits before its next tick."""
        self.state.shutdown_requested.set()

    def run(self) -> int:
        """
        Run until max_cycles is reached or shutdown is requested.

        Returns:
            0 on a clean exit, EXIT_ARCHIVE_FAILURE if the shutdown archive
            write failed.
        """
        self.state.started_at = time.time()
        max_cycles = self.config.sampler.max_cycles
        logger.info(
            f"Sampler started: interval {self.config.sampler.interval_seconds}s, "
            f"output {'none (daemon)' if self.config.sampler.daemon else self.config.sampler.output}, "
            f"archive {'enabled' if self.archiver else 'disabled'}"
        )
        try:
            while not self.state.shutdown_requested.is_set():
                self.state.phase = SamplerState.TICK
                if not self.ticker.wait_next():
                    break
                self.run_cycle()
                if max_cycles is not None and self.state.cycles_completed >= max_cycles:
                    logger.info(f"Reached {max_cycles} cycles, stopping")
                    break
        finally:
            archived = self._shutdown()
        return 0 if archived else EXIT_ARCHIVE_FAILURE

    def run_cycle(self) -> StoreView:
        """Execute one complete cycle and return the published view."""
        self.state.phase = SamplerState.FETCH
        snapshot = self.source.read_snapshot()

        self.state.phase = SamplerState.UPDATE_STORE
        self.store.apply(snapshot, is_cumulative)
        view = self.store.publish(snapshot.timestamp)

        self.state.phase = SamplerState.APPEND_HISTORY
        if self.config.history_needed:
            self.history.append_all(derive_all(view, snapshot.timestamp))

        self.state.phase = SamplerState.RENDER_ARCHIVE
        if not self.config.sampler.daemon:
            self._render(view)
        if self.archiver is not None:
            self.archiver.record_tick()

        self.state.phase = SamplerState.IDLE
        self.state.cycles_completed += 1
        self.state.skipped_ticks = self.ticker.skipped
        return view

    def _render(self, view: StoreView) -> None:
        print_header = self._rendered_cycles % self.config.sampler.header_interval == 0
        try:
            lines = self.renderer(view, print_header)
        except KeyNotFound as e:
            self.state.skipped_renders += 1
            logger.debug(f"Skipping output for this cycle: {e}")
            return
        if not lines:
            return
        self.output.write("\n".join(lines) + "\n")
        self.output.flush()
        self._rendered_cycles += 1

    def _shutdown(self) -> bool:
        """Final archive write. Returns False if it failed."""
        archived = True
        if self.archiver is not None:
            try:
                self.archiver.write(emergency=True)
            except ArchiveWriteFailure as e:
                logger.critical(f"Shutdown archive write failed, recent history is lost: {e}")
                self.state.emergency_write_failed = True
                archived = False
        self.state.phase = SamplerState.STOPPED
        self.state.stopped_at = time.time()
        logger.info(
            f"Sampler stopped after {self.state.cycles_completed} cycles "
            f"({self.state.skipped_ticks} ticks skipped)"
        )
        return archived
