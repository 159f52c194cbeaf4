"""
Chart-ready history samples.

Every sample carries an epoch timestamp plus values that were already
derived from the statistics store (rates, percentages, gauges). Samples
are frozen once created and serialize to flat dictionaries for the
archive.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Type


class HistoryCategory(str, Enum):
    """Semantic category of a history buffer."""

    CPU = "cpu"
    PER_CPU = "per_cpu"
    DISK = "disk"
    NETWORK = "network"
    MEMORY = "memory"
    LOAD = "load"
    PRESSURE = "pressure"
    VMSTAT = "vmstat"

    def __str__(self) -> str:
        return self.value


# Name of the synthetic aggregate row for per-device categories.
TOTAL = "TOTAL"


@dataclass(frozen=True)
class HistoricalSample:
    """Base class for all history samples."""

    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoricalSample":
        """Build a sample from its serialized form, ignoring unknown keys."""
        names = {field.name for field in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})


@dataclass(frozen=True)
class CpuSample(HistoricalSample):
    """
    CPU time spent per second, by bucket.

    Values are CPU seconds per wall-clock second, so a fully busy 4-CPU
    system reports user+system+... == 4.0 for the "all" row. Scheduler
    values come from schedstat and are also seconds per second.
    """

    cpu_name: str = "all"
    user: float = 0.0
    nice: float = 0.0
    system: float = 0.0
    idle: float = 0.0
    iowait: float = 0.0
    irq: float = 0.0
    softirq: float = 0.0
    steal: float = 0.0
    guest: float = 0.0
    guest_nice: float = 0.0
    scheduler_running: float = 0.0
    scheduler_waiting: float = 0.0

    BUCKETS = (
        "user", "nice", "system", "iowait", "steal",
        "irq", "softirq", "guest", "guest_nice", "idle",
    )

    @property
    def total(self) -> float:
        return sum(getattr(self, bucket) for bucket in self.BUCKETS)

    def percentages(self) -> Dict[str, float]:
        """Share of each bucket in the total, in percent."""
        total = self.total
        if total <= 0:
            return {bucket: 0.0 for bucket in self.BUCKETS}
        return {bucket: getattr(self, bucket) / total * 100.0 for bucket in self.BUCKETS}


@dataclass(frozen=True)
class LoadSample(HistoricalSample):
    load_1: float = 0.0
    load_5: float = 0.0
    load_15: float = 0.0
    current_runnable: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class DiskSample(HistoricalSample):
    """Per-device block I/O rates (per second)."""

    device_name: str = ""
    reads_completed: float = 0.0
    reads_merged: float = 0.0
    read_bytes: float = 0.0
    read_time_ms: float = 0.0
    writes_completed: float = 0.0
    writes_merged: float = 0.0
    write_bytes: float = 0.0
    write_time_ms: float = 0.0
    busy_time_ms: float = 0.0
    weighted_time_ms: float = 0.0
    discards_completed: float = 0.0
    discards_merged: float = 0.0
    discard_sectors: float = 0.0
    discard_time_ms: float = 0.0


@dataclass(frozen=True)
class NetworkSample(HistoricalSample):
    """Per-interface network rates (per second)."""

    device_name: str = ""
    receive_bytes: float = 0.0
    receive_packets: float = 0.0
    receive_errors: float = 0.0
    receive_drop: float = 0.0
    transmit_bytes: float = 0.0
    transmit_packets: float = 0.0
    transmit_errors: float = 0.0
    transmit_drop: float = 0.0
    receive_fifo: float = 0.0
    receive_frame: float = 0.0
    transmit_fifo: float = 0.0
    transmit_collisions: float = 0.0
    transmit_carrier: float = 0.0


@dataclass(frozen=True)
class MemorySample(HistoricalSample):
    """
    Memory gauges in bytes, plus swap traffic in bytes per second.

    The hugepages_* fields are page counts; hugepage_size is in bytes.
    """

    memtotal: float = 0.0
    memfree: float = 0.0
    memavailable: float = 0.0
    memused: float = 0.0
    buffers: float = 0.0
    cached: float = 0.0
    shared: float = 0.0
    slab: float = 0.0
    active: float = 0.0
    inactive: float = 0.0
    swaptotal: float = 0.0
    swapfree: float = 0.0
    swap_in: float = 0.0
    swap_out: float = 0.0
    committed_as: float = 0.0
    commit_limit: float = 0.0
    dirty: float = 0.0
    anon_pages: float = 0.0
    kernel_stack: float = 0.0
    page_tables: float = 0.0
    vmalloc_used: float = 0.0
    swap_cached: float = 0.0
    hugepages_total: float = 0.0
    hugepages_free: float = 0.0
    hugepages_reserved: float = 0.0
    hugepages_surplus: float = 0.0
    hugepage_size: float = 0.0


@dataclass(frozen=True)
class PressureSample(HistoricalSample):
    """
    Pressure stall information.

    The avg fields are the kernel's own percentages; the *_total fields
    are stalled seconds per second derived from the cumulative
    microsecond counters.
    """

    cpu_some_avg10: float = 0.0
    cpu_some_avg60: float = 0.0
    cpu_some_avg300: float = 0.0
    cpu_some_total: float = 0.0
    cpu_full_avg10: float = 0.0
    cpu_full_avg60: float = 0.0
    cpu_full_avg300: float = 0.0
    cpu_full_total: float = 0.0
    io_some_avg10: float = 0.0
    io_some_avg60: float = 0.0
    io_some_avg300: float = 0.0
    io_some_total: float = 0.0
    io_full_avg10: float = 0.0
    io_full_avg60: float = 0.0
    io_full_avg300: float = 0.0
    io_full_total: float = 0.0
    memory_some_avg10: float = 0.0
    memory_some_avg60: float = 0.0
    memory_some_avg300: float = 0.0
    memory_some_total: float = 0.0
    memory_full_avg10: float = 0.0
    memory_full_avg60: float = 0.0
    memory_full_avg300: float = 0.0
    memory_full_total: float = 0.0


@dataclass(frozen=True)
class VmstatSample(HistoricalSample):
    """
    Paging and process activity.

    Counters from /proc/vmstat and /proc/stat are per second;
    nr_free_pages, procs_running and procs_blocked are gauges.
    """

    nr_free_pages: float = 0.0
    pgpgin: float = 0.0
    pgpgout: float = 0.0
    pswpin: float = 0.0
    pswpout: float = 0.0
    pgfault: float = 0.0
    pgmajfault: float = 0.0
    pgfree: float = 0.0
    pgscan_kswapd: float = 0.0
    pgscan_direct: float = 0.0
    pgsteal_anon: float = 0.0
    pgsteal_file: float = 0.0
    pgpromote_success: float = 0.0
    pgdemote_kswapd: float = 0.0
    pgdemote_direct: float = 0.0
    pgdemote_khugepaged: float = 0.0
    context_switches: float = 0.0
    interrupts: float = 0.0
    processes: float = 0.0
    procs_running: float = 0.0
    procs_blocked: float = 0.0


SAMPLE_TYPES: Dict[HistoryCategory, Type[HistoricalSample]] = {
    HistoryCategory.CPU: CpuSample,
    HistoryCategory.PER_CPU: CpuSample,
    HistoryCategory.DISK: DiskSample,
    HistoryCategory.NETWORK: NetworkSample,
    HistoryCategory.MEMORY: MemorySample,
    HistoryCategory.LOAD: LoadSample,
    HistoryCategory.PRESSURE: PressureSample,
    HistoryCategory.VMSTAT: VmstatSample,
}


def sample_from_dict(category: HistoryCategory, data: Dict[str, Any]) -> HistoricalSample:
    """Deserialize a sample of the given history category."""
    return SAMPLE_TYPES[category].from_dict(data)
