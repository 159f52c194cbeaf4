"""
Declarative table of every tracked counter.

Each entry names the metric category, the field name used in
``MetricKey.name``, whether the counter is cumulative (monotonically
increasing, turned into a rate) or a gauge (used as-is), and where the
raw value comes from. Sources fill the table uniformly instead of
carrying per-field code.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models.keys import Category, MetricKey


@dataclass(frozen=True)
class FieldSpec:
    """
    One tracked counter.

    Attributes:
        category: Metric category of the counter.
        name: Field name stored in the MetricKey.
        cumulative: True for ever-increasing counters, False for gauges.
        origin: Which reading the value is taken from (e.g.
            "virtual_memory", "proc_meminfo"); None when the category has
            a single origin.
        source: Attribute, key or column name in that reading; defaults
            to name.
    """

    category: Category
    name: str
    cumulative: bool = True
    origin: Optional[str] = None
    source: Optional[str] = None

    @property
    def attribute(self) -> str:
        return self.source or self.name


_CPU_TIMES = (
    "user", "nice", "system", "idle", "iowait",
    "irq", "softirq", "steal", "guest", "guest_nice",
)

_PRESSURE_RESOURCES = ("cpu", "io", "memory")
_PRESSURE_KINDS = ("some", "full")
_PRESSURE_AVERAGES = ("avg10", "avg60", "avg300")

# /proc/vmstat counters, page or KiB counts depending on the field
_VMSTAT_COUNTERS = (
    "pgpgin", "pgpgout", "pswpin", "pswpout", "pgfault", "pgmajfault", "pgfree",
    "pgscan_kswapd", "pgscan_direct", "pgsteal_anon", "pgsteal_file",
    "pgpromote_success", "pgdemote_kswapd", "pgdemote_direct", "pgdemote_khugepaged",
)


def _pressure_fields() -> List[FieldSpec]:
    fields = []
    for resource in _PRESSURE_RESOURCES:
        for kind in _PRESSURE_KINDS:
            for average in _PRESSURE_AVERAGES:
                fields.append(FieldSpec(Category.PRESSURE, f"{resource}_{kind}_{average}", cumulative=False))
            # stall time in microseconds
            fields.append(FieldSpec(Category.PRESSURE, f"{resource}_{kind}_total"))
    return fields


FIELDS: Tuple[FieldSpec, ...] = tuple(
    [FieldSpec(Category.CPU, name, origin="cpu_times") for name in _CPU_TIMES]
    + [
        FieldSpec(Category.CPU, "context_switches", True, "proc_stat", "ctxt"),
        FieldSpec(Category.CPU, "interrupts", True, "proc_stat", "intr"),
        FieldSpec(Category.CPU, "processes", True, "proc_stat"),
        FieldSpec(Category.CPU, "procs_running", False, "proc_stat"),
        FieldSpec(Category.CPU, "procs_blocked", False, "proc_stat"),
        # nanoseconds, summed over all cpus for the "all" row
        FieldSpec(Category.SCHEDULER, "running"),
        FieldSpec(Category.SCHEDULER, "waiting"),
        FieldSpec(Category.SCHEDULER, "timeslices"),
        FieldSpec(Category.DISK, "reads_completed", True, "disk_io_counters", "read_count"),
        FieldSpec(Category.DISK, "reads_merged", True, "disk_io_counters", "read_merged_count"),
        FieldSpec(Category.DISK, "read_bytes", True, "disk_io_counters"),
        FieldSpec(Category.DISK, "read_time_ms", True, "disk_io_counters", "read_time"),
        FieldSpec(Category.DISK, "writes_completed", True, "disk_io_counters", "write_count"),
        FieldSpec(Category.DISK, "writes_merged", True, "disk_io_counters", "write_merged_count"),
        FieldSpec(Category.DISK, "write_bytes", True, "disk_io_counters"),
        FieldSpec(Category.DISK, "write_time_ms", True, "disk_io_counters", "write_time"),
        FieldSpec(Category.DISK, "busy_time_ms", True, "disk_io_counters", "busy_time"),
        # column index in /proc/diskstats after the device name
        FieldSpec(Category.DISK, "weighted_time_ms", True, "proc_diskstats", "10"),
        FieldSpec(Category.DISK, "discards_completed", True, "proc_diskstats", "11"),
        FieldSpec(Category.DISK, "discards_merged", True, "proc_diskstats", "12"),
        FieldSpec(Category.DISK, "discard_sectors", True, "proc_diskstats", "13"),
        FieldSpec(Category.DISK, "discard_time_ms", True, "proc_diskstats", "14"),
        # file below /sys/block/<device>, with the column for multi-value files
        FieldSpec(Category.DISK, "inflight_reads", False, "sysfs_block", "inflight:0"),
        FieldSpec(Category.DISK, "inflight_writes", False, "sysfs_block", "inflight:1"),
        FieldSpec(Category.DISK, "queue_nr_requests", False, "sysfs_block", "queue/nr_requests"),
        FieldSpec(Category.DISK, "queue_max_sectors_kb", False, "sysfs_block", "queue/max_sectors_kb"),
        FieldSpec(Category.DISK, "queue_max_hw_sectors_kb", False, "sysfs_block", "queue/max_hw_sectors_kb"),
        FieldSpec(Category.NETWORK, "receive_bytes", True, "net_io_counters", "bytes_recv"),
        FieldSpec(Category.NETWORK, "receive_packets", True, "net_io_counters", "packets_recv"),
        FieldSpec(Category.NETWORK, "receive_errors", True, "net_io_counters", "errin"),
        FieldSpec(Category.NETWORK, "receive_drop", True, "net_io_counters", "dropin"),
        FieldSpec(Category.NETWORK, "transmit_bytes", True, "net_io_counters", "bytes_sent"),
        FieldSpec(Category.NETWORK, "transmit_packets", True, "net_io_counters", "packets_sent"),
        FieldSpec(Category.NETWORK, "transmit_errors", True, "net_io_counters", "errout"),
        FieldSpec(Category.NETWORK, "transmit_drop", True, "net_io_counters", "dropout"),
        # column index in /proc/net/dev after the interface name
        FieldSpec(Category.NETWORK, "receive_fifo", True, "proc_net_dev", "4"),
        FieldSpec(Category.NETWORK, "receive_frame", True, "proc_net_dev", "5"),
        FieldSpec(Category.NETWORK, "transmit_fifo", True, "proc_net_dev", "12"),
        FieldSpec(Category.NETWORK, "transmit_collisions", True, "proc_net_dev", "13"),
        FieldSpec(Category.NETWORK, "transmit_carrier", True, "proc_net_dev", "14"),
        FieldSpec(Category.MEMORY, "memtotal", False, "virtual_memory", "total"),
        FieldSpec(Category.MEMORY, "memfree", False, "virtual_memory", "free"),
        FieldSpec(Category.MEMORY, "memavailable", False, "virtual_memory", "available"),
        FieldSpec(Category.MEMORY, "memused", False, "virtual_memory", "used"),
        FieldSpec(Category.MEMORY, "buffers", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "cached", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "shared", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "slab", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "active", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "inactive", False, "virtual_memory"),
        FieldSpec(Category.MEMORY, "swaptotal", False, "swap_memory", "total"),
        FieldSpec(Category.MEMORY, "swapfree", False, "swap_memory", "free"),
        FieldSpec(Category.MEMORY, "swap_in", True, "swap_memory", "sin"),
        FieldSpec(Category.MEMORY, "swap_out", True, "swap_memory", "sout"),
        FieldSpec(Category.MEMORY, "committed_as", False, "proc_meminfo", "Committed_AS"),
        FieldSpec(Category.MEMORY, "commit_limit", False, "proc_meminfo", "CommitLimit"),
        FieldSpec(Category.MEMORY, "dirty", False, "proc_meminfo", "Dirty"),
        FieldSpec(Category.MEMORY, "anon_pages", False, "proc_meminfo", "AnonPages"),
        FieldSpec(Category.MEMORY, "kernel_stack", False, "proc_meminfo", "KernelStack"),
        FieldSpec(Category.MEMORY, "page_tables", False, "proc_meminfo", "PageTables"),
        FieldSpec(Category.MEMORY, "vmalloc_used", False, "proc_meminfo", "VmallocUsed"),
        FieldSpec(Category.MEMORY, "swap_cached", False, "proc_meminfo", "SwapCached"),
        FieldSpec(Category.MEMORY, "hugepages_total", False, "proc_meminfo", "HugePages_Total"),
        FieldSpec(Category.MEMORY, "hugepages_free", False, "proc_meminfo", "HugePages_Free"),
        FieldSpec(Category.MEMORY, "hugepages_reserved", False, "proc_meminfo", "HugePages_Rsvd"),
        FieldSpec(Category.MEMORY, "hugepages_surplus", False, "proc_meminfo", "HugePages_Surp"),
        FieldSpec(Category.MEMORY, "hugepage_size", False, "proc_meminfo", "Hugepagesize"),
        FieldSpec(Category.LOAD, "load_1", False, "getloadavg"),
        FieldSpec(Category.LOAD, "load_5", False, "getloadavg"),
        FieldSpec(Category.LOAD, "load_15", False, "getloadavg"),
        FieldSpec(Category.LOAD, "current_runnable", False, "proc_loadavg"),
        FieldSpec(Category.LOAD, "total", False, "proc_loadavg"),
        FieldSpec(Category.VMSTAT, "nr_free_pages", cumulative=False),
    ]
    + [FieldSpec(Category.VMSTAT, name) for name in _VMSTAT_COUNTERS]
    + _pressure_fields()
)

_CUMULATIVE: Dict[Tuple[Category, str], bool] = {
    (spec.category, spec.name): spec.cumulative for spec in FIELDS
}


def fields_for(category: Category, origin: Optional[str] = None) -> List[FieldSpec]:
    """Return the table entries of a category, optionally of one origin only."""
    return [
        spec for spec in FIELDS
        if spec.category == category and (origin is None or spec.origin == origin)
    ]


def is_cumulative(key: MetricKey) -> bool:
    """Whether a key is a monotonically increasing counter. Unknown keys are."""
    return _CUMULATIVE.get((key.category, key.name), True)
