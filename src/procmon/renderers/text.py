"""
sar and mpstat style text renderers.

Every renderer takes the published store view of the current tick and a
flag telling it whether to emit its column header, and returns the lines
to print. Renderers only read the view. A renderer returns no lines while
its anchor statistic has not produced a rate yet, and lets KeyNotFound
propagate when a statistic it depends on is absent.
"""

import time
from typing import Callable, Dict, List, Optional, Sequence

from ..history.derive import EXCLUDED_DISK_PREFIXES
from ..models.keys import ALL, SINGLE, Category, MetricKey
from ..statistics.store import StoreView

Renderer = Callable[[StoreView, bool], List[str]]

KIBIBYTE = 1024.0
MEBIBYTE = KIBIBYTE * KIBIBYTE
SECTOR_BYTES = 512

CPU_USER_COLUMNS = ("%user", "%nice", "%system", "%iowait", "%steal", "%idle")
CPU_ALL_COLUMNS = ("%usr", "%nice", "%sys", "%iowait", "%steal", "%irq", "%soft", "%guest", "%gnice", "%idle")
CPU_FIELDS = ("user", "nice", "system", "iowait", "steal", "irq", "softirq", "guest", "guest_nice", "idle")


def _clock(view: StoreView) -> str:
    if view.timestamp is None:
        return "--:--:--"
    return time.strftime("%H:%M:%S", time.localtime(view.timestamp))


def _line(clock: str, label: str, values: Sequence) -> str:
    cells = "".join(f"{value:>10.2f}" if isinstance(value, float) else f"{value:>10}" for value in values)
    return f"{clock:<8} {label:>10}{cells}"


def _table(view: StoreView, print_header: bool, label: str, columns: Sequence[str],
           rows: List[tuple]) -> List[str]:
    if not rows:
        return []
    clock = _clock(view)
    lines = []
    if print_header:
        lines.append(_line(clock, label, columns))
    for row_label, values in rows:
        lines.append(_line(clock, row_label, values))
    return lines


def _updated(view: StoreView, key: MetricKey) -> bool:
    return view.require(key).updated_value


def _cpu_rates(view: StoreView, cpu_name: str) -> Dict[str, float]:
    return {name: view.require(MetricKey(Category.CPU, cpu_name, name)).per_second_value for name in CPU_FIELDS}


def _cpu_percent(view: StoreView, cpu_name: str) -> Dict[str, float]:
    rates = _cpu_rates(view, cpu_name)
    total = sum(rates.values())
    if total <= 0:
        return {name: 0.0 for name in rates}
    return {name: value / total * 100.0 for name, value in rates.items()}


def _cpu_names(view: StoreView) -> List[str]:
    # "all" and the /proc/stat singletons are not cpus
    names = [name for name in view.instances(Category.CPU) if name.startswith("cpu")]
    return sorted(names, key=lambda name: int(name[3:]) if name[3:].isdigit() else -1)


def sar_u(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.CPU, ALL, "user")):
        return []
    percent = _cpu_percent(view, ALL)
    values = [percent["user"], percent["nice"], percent["system"] + percent["irq"] + percent["softirq"],
              percent["iowait"], percent["steal"], percent["idle"]]
    return _table(view, print_header, "CPU", CPU_USER_COLUMNS, [("all", values)])


def _cpu_all_rows(view: StoreView, cpu_names: List[str]) -> List[tuple]:
    rows = []
    for cpu_name in cpu_names:
        if not _updated(view, MetricKey(Category.CPU, cpu_name, "user")):
            continue
        percent = _cpu_percent(view, cpu_name)
        label = "all" if cpu_name == ALL else cpu_name[3:]
        rows.append((label, [percent[name] for name in CPU_FIELDS]))
    return rows


def sar_u_all(view: StoreView, print_header: bool) -> List[str]:
    return _table(view, print_header, "CPU", CPU_ALL_COLUMNS, _cpu_all_rows(view, [ALL]))


def mpstat_p_all(view: StoreView, print_header: bool) -> List[str]:
    return _table(view, print_header, "CPU", CPU_ALL_COLUMNS, _cpu_all_rows(view, [ALL] + _cpu_names(view)))


def per_cpu_all(view: StoreView, print_header: bool) -> List[str]:
    return _table(view, print_header, "CPU", CPU_ALL_COLUMNS, _cpu_all_rows(view, _cpu_names(view)))


def cpu_all(view: StoreView, print_header: bool) -> List[str]:
    """CPU buckets as CPU seconds per second plus scheduler run and wait time."""
    if not _updated(view, MetricKey(Category.CPU, ALL, "user")):
        return []
    rates = _cpu_rates(view, ALL)
    running = view.value_or(MetricKey(Category.SCHEDULER, ALL, "running")) / 1e9
    waiting = view.value_or(MetricKey(Category.SCHEDULER, ALL, "waiting")) / 1e9
    columns = ("usr", "nice", "sys", "iowait", "steal", "irq", "soft", "guest", "gnice", "idle",
               "sched_r", "sched_w")
    values = [rates[name] for name in CPU_FIELDS] + [running, waiting]
    return _table(view, print_header, "CPU", columns, [("all", values)])


def sar_q_load(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.LOAD, SINGLE, "load_1")):
        return []
    values = [
        int(view.require(MetricKey(Category.LOAD, SINGLE, "current_runnable")).last_value),
        int(view.require(MetricKey(Category.LOAD, SINGLE, "total")).last_value),
        view.require(MetricKey(Category.LOAD, SINGLE, "load_1")).last_value,
        view.require(MetricKey(Category.LOAD, SINGLE, "load_5")).last_value,
        view.require(MetricKey(Category.LOAD, SINGLE, "load_15")).last_value,
    ]
    return _table(view, print_header, "", ("runq-sz", "plist-sz", "ldavg-1", "ldavg-5", "ldavg-15"),
                  [("", values)])


def _pressure(resource: str, short: str, kinds: Sequence[str]) -> Renderer:
    def render(view: StoreView, print_header: bool) -> List[str]:
        if not _updated(view, MetricKey(Category.PRESSURE, SINGLE, f"{resource}_some_avg10")):
            return []
        columns = []
        values = []
        for kind in kinds:
            prefix = f"%{kind[0]}{short}"
            for average in ("avg10", "avg60", "avg300"):
                columns.append(f"{prefix}-{average[3:]}")
                values.append(view.require(MetricKey(Category.PRESSURE, SINGLE, f"{resource}_{kind}_{average}")).last_value)
            columns.append(prefix)
            # microseconds stalled per second, as a percentage
            total = view.require(MetricKey(Category.PRESSURE, SINGLE, f"{resource}_{kind}_total"))
            values.append(total.per_second_value / 1e6 * 100.0)
        return _table(view, print_header, "", columns, [("", values)])

    render.__name__ = f"sar_q_{short}"
    return render


sar_q_cpu = _pressure("cpu", "cpu", ("some",))
sar_q_io = _pressure("io", "io", ("some", "full"))
sar_q_mem = _pressure("memory", "mem", ("some", "full"))


def _device_rows(view: StoreView, category: Category, anchor: str,
                 build: Callable[[str], list]) -> List[tuple]:
    rows = []
    for device in view.instances(category):
        if _updated(view, MetricKey(category, device, anchor)):
            rows.append((device, build(device)))
    return rows


def sar_d(view: StoreView, print_header: bool) -> List[str]:
    def build(device: str) -> list:
        def rate(name: str) -> float:
            return view.require(MetricKey(Category.DISK, device, name)).per_second_value

        requests = rate("reads_completed") + rate("writes_completed")
        read_kb = rate("read_bytes") / KIBIBYTE
        write_kb = rate("write_bytes") / KIBIBYTE
        wait_ms = rate("read_time_ms") + rate("write_time_ms")
        return [
            requests,
            read_kb,
            write_kb,
            (read_kb + write_kb) / requests if requests else 0.0,
            wait_ms / 1000.0,
            wait_ms / requests if requests else 0.0,
            rate("busy_time_ms") / 10.0,
        ]

    rows = _device_rows(view, Category.DISK, "reads_completed", build)
    return _table(view, print_header, "DEV", ("tps", "rkB/s", "wkB/s", "areq-sz", "aqu-sz", "await", "%util"), rows)


def sar_n_dev(view: StoreView, print_header: bool) -> List[str]:
    def build(interface: str) -> list:
        def rate(name: str) -> float:
            return view.require(MetricKey(Category.NETWORK, interface, name)).per_second_value

        return [
            rate("receive_packets"),
            rate("transmit_packets"),
            rate("receive_bytes") / KIBIBYTE,
            rate("transmit_bytes") / KIBIBYTE,
        ]

    rows = _device_rows(view, Category.NETWORK, "receive_bytes", build)
    return _table(view, print_header, "IFACE", ("rxpck/s", "txpck/s", "rxkB/s", "txkB/s"), rows)


def _gauge(view: StoreView, category: Category, name: str) -> float:
    return view.last_or(MetricKey(category, SINGLE, name))


def _percent(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole else 0.0


def _memory_rows(view: StoreView, extended: bool) -> List[tuple]:
    def kb(name: str) -> float:
        return _gauge(view, Category.MEMORY, name) / KIBIBYTE

    total = kb("memtotal")
    used = kb("memused")
    values = [
        kb("memfree"),
        kb("memavailable"),
        used,
        _percent(used, total),
        kb("buffers"),
        kb("cached"),
        kb("committed_as"),
        _percent(kb("committed_as"), kb("commit_limit")),
        kb("active"),
        kb("inactive"),
        kb("dirty"),
    ]
    if extended:
        values += [kb("anon_pages"), kb("slab"), kb("kernel_stack"), kb("page_tables"), kb("vmalloc_used")]
    return [("", values)]


MEMORY_COLUMNS = ("kbmemfree", "kbavail", "kbmemused", "%memused", "kbbuffers", "kbcached",
                  "kbcommit", "%commit", "kbactive", "kbinact", "kbdirty")


def sar_r(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.MEMORY, SINGLE, "memtotal")):
        return []
    return _table(view, print_header, "", MEMORY_COLUMNS, _memory_rows(view, extended=False))


def sar_r_all(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.MEMORY, SINGLE, "memtotal")):
        return []
    columns = MEMORY_COLUMNS + ("kbanonpg", "kbslab", "kbkstack", "kbpgtbl", "kbvmused")
    return _table(view, print_header, "", columns, _memory_rows(view, extended=True))


def sar_h(view: StoreView, print_header: bool) -> List[str]:
    """Huge page usage; the kernel reports page counts, shown here in kB."""
    if not _updated(view, MetricKey(Category.MEMORY, SINGLE, "memtotal")):
        return []
    page_kb = _gauge(view, Category.MEMORY, "hugepage_size") / KIBIBYTE
    total = _gauge(view, Category.MEMORY, "hugepages_total") * page_kb
    free = _gauge(view, Category.MEMORY, "hugepages_free") * page_kb
    values = [
        free,
        total - free,
        _percent(total - free, total),
        _gauge(view, Category.MEMORY, "hugepages_reserved") * page_kb,
        _gauge(view, Category.MEMORY, "hugepages_surplus") * page_kb,
    ]
    return _table(view, print_header, "", ("kbhugfree", "kbhugused", "%hugused", "kbhugrsvd", "kbhugsurp"),
                  [("", values)])


def sar_s(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.MEMORY, SINGLE, "swaptotal")):
        return []
    total = _gauge(view, Category.MEMORY, "swaptotal") / KIBIBYTE
    free = _gauge(view, Category.MEMORY, "swapfree") / KIBIBYTE
    cached = _gauge(view, Category.MEMORY, "swap_cached") / KIBIBYTE
    used = max(total - free, 0.0)
    values = [free, used, _percent(used, total), cached, _percent(cached, used)]
    return _table(view, print_header, "", ("kbswpfree", "kbswpused", "%swpused", "kbswpcad", "%swpcad"),
                  [("", values)])


def _vm_rate(view: StoreView, *names: str) -> float:
    # counters missing on older kernels count as 0
    return sum(view.value_or(MetricKey(Category.VMSTAT, SINGLE, name)) for name in names)


def sar_b_paging(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.VMSTAT, SINGLE, "pgpgin")):
        return []
    values = [
        _vm_rate(view, "pgpgin"),
        _vm_rate(view, "pgpgout"),
        _vm_rate(view, "pgfault"),
        _vm_rate(view, "pgmajfault"),
        _vm_rate(view, "pgfree"),
        _vm_rate(view, "pgscan_kswapd"),
        _vm_rate(view, "pgscan_direct"),
        _vm_rate(view, "pgsteal_anon", "pgsteal_file"),
        _vm_rate(view, "pgpromote_success"),
        _vm_rate(view, "pgdemote_kswapd", "pgdemote_direct", "pgdemote_khugepaged"),
    ]
    columns = ("pgpgin/s", "pgpgout/s", "fault/s", "majflt/s", "pgfree/s", "pgscank/s", "pgscand/s",
               "pgsteal/s", "pgprom/s", "pgdem/s")
    return _table(view, print_header, "", columns, [("", values)])


def sar_w_swapping(view: StoreView, print_header: bool) -> List[str]:
    if not _updated(view, MetricKey(Category.VMSTAT, SINGLE, "pswpin")):
        return []
    return _table(view, print_header, "", ("pswpin/s", "pswpout/s"),
                  [("", [_vm_rate(view, "pswpin"), _vm_rate(view, "pswpout")])])


def sar_w_tasks(view: StoreView, print_header: bool) -> List[str]:
    switches = view.require(MetricKey(Category.CPU, SINGLE, "context_switches"))
    if not switches.updated_value:
        return []
    processes = view.require(MetricKey(Category.CPU, SINGLE, "processes")).per_second_value
    return _table(view, print_header, "", ("proc/s", "cswch/s"),
                  [("", [processes, switches.per_second_value])])


def vmstat(view: StoreView, print_header: bool) -> List[str]:
    """procps vmstat layout: memory in MiB, io in KiB/s, cpu in percent."""
    if not _updated(view, MetricKey(Category.VMSTAT, SINGLE, "pgpgin")):
        return []
    percent = _cpu_percent(view, ALL)

    def mib(name: str) -> float:
        return _gauge(view, Category.MEMORY, name) / (KIBIBYTE * KIBIBYTE)

    def stat_rate(name: str) -> float:
        return view.value_or(MetricKey(Category.CPU, SINGLE, name))

    values = [
        # not counting ourselves
        max(_gauge(view, Category.CPU, "procs_running") - 1, 0),
        _gauge(view, Category.CPU, "procs_blocked"),
        max(mib("swaptotal") - mib("swapfree"), 0.0),
        mib("memfree"),
        mib("buffers"),
        mib("cached"),
        _vm_rate(view, "pswpin"),
        _vm_rate(view, "pswpout"),
        _vm_rate(view, "pgpgin"),
        _vm_rate(view, "pgpgout"),
        stat_rate("interrupts"),
        stat_rate("context_switches"),
        percent["user"] + percent["nice"],
        percent["system"] + percent["irq"] + percent["softirq"],
        percent["idle"],
        percent["iowait"],
        percent["steal"],
        percent["guest"] + percent["guest_nice"],
    ]
    columns = ("r", "b", "swpd", "free", "buff", "cache", "si", "so", "bi", "bo", "in", "cs",
               "us", "sy", "id", "wa", "st", "gu")
    return _table(view, print_header, "", columns, [("", [int(round(value)) for value in values])])


def schedstat(view: StoreView, print_header: bool) -> List[str]:
    """Scheduler run and wait time per cpu, with the average time slice."""
    names = [ALL] + [name for name in view.instances(Category.SCHEDULER) if name.startswith("cpu")]
    rows = []
    for cpu_name in sorted(names, key=lambda name: int(name[3:]) if name[3:].isdigit() else -1):
        running = view.require(MetricKey(Category.SCHEDULER, cpu_name, "running"))
        if not running.updated_value:
            continue
        run_seconds = running.per_second_value / 1e9
        slices = view.value_or(MetricKey(Category.SCHEDULER, cpu_name, "timeslices"))
        wait_seconds = view.require(MetricKey(Category.SCHEDULER, cpu_name, "waiting")).per_second_value / 1e9
        average_slice = run_seconds / slices if slices else 0.0
        label = "all" if cpu_name == ALL else cpu_name[3:]
        rows.append((label, [wait_seconds, run_seconds, f"{average_slice:.6f}"]))
    return _table(view, print_header, "CPU", ("sched_w/s", "sched_r/s", "avg_slice"), rows)


def _disk_io(view: StoreView, device: str) -> Dict[str, float]:
    """Per-device rates plus the ratios the iostat family prints."""
    def rate(name: str) -> float:
        return view.require(MetricKey(Category.DISK, device, name)).per_second_value

    def optional(name: str) -> float:
        return view.value_or(MetricKey(Category.DISK, device, name))

    reads = rate("reads_completed")
    writes = rate("writes_completed")
    discards = optional("discards_completed")
    read_mb = rate("read_bytes") / MEBIBYTE
    write_mb = rate("write_bytes") / MEBIBYTE
    return {
        "reads": reads,
        "writes": writes,
        "discards": discards,
        "read_mb": read_mb,
        "write_mb": write_mb,
        "discard_mb": optional("discard_sectors") * SECTOR_BYTES / MEBIBYTE,
        "read_mb_total": view.require(MetricKey(Category.DISK, device, "read_bytes")).delta_value / MEBIBYTE,
        "write_mb_total": view.require(MetricKey(Category.DISK, device, "write_bytes")).delta_value / MEBIBYTE,
        "reads_merged": rate("reads_merged"),
        "writes_merged": rate("writes_merged"),
        "discards_merged": optional("discards_merged"),
        "read_merged_percent": _percent(rate("reads_merged"), rate("reads_merged") + reads),
        "write_merged_percent": _percent(rate("writes_merged"), rate("writes_merged") + writes),
        "read_await": rate("read_time_ms") / reads if reads else 0.0,
        "write_await": rate("write_time_ms") / writes if writes else 0.0,
        "discard_await": optional("discard_time_ms") / discards if discards else 0.0,
        "read_request_mb": read_mb / reads if reads else 0.0,
        "write_request_mb": write_mb / writes if writes else 0.0,
        "queue_size": optional("weighted_time_ms") / 1000.0,
    }


def _disk_table(view: StoreView, print_header: bool, columns: Sequence[str],
                build: Callable[[str, Dict[str, float]], list]) -> List[str]:
    rows = _device_rows(view, Category.DISK, "reads_completed",
                        lambda device: build(device, _disk_io(view, device)))
    return _table(view, print_header, "Device", columns, rows)


def iostat(view: StoreView, print_header: bool) -> List[str]:
    return _disk_table(
        view, print_header, ("tps", "MB_read/s", "MB_wrtn/s", "MB_read", "MB_wrtn"),
        lambda device, io: [io["reads"] + io["writes"], io["read_mb"], io["write_mb"],
                            io["read_mb_total"], io["write_mb_total"]],
    )


def iostat_x(view: StoreView, print_header: bool) -> List[str]:
    columns = ("r/s", "w/s", "rMB/s", "wMB/s", "rrqm/s", "wrqm/s", "%rrqm", "%wrqm",
               "r_await", "w_await", "aqu-sz", "rareq-sz", "wareq-sz")
    return _disk_table(
        view, print_header, columns,
        lambda device, io: [io["reads"], io["writes"], io["read_mb"], io["write_mb"],
                            io["reads_merged"], io["writes_merged"], io["read_merged_percent"],
                            io["write_merged_percent"], io["read_await"], io["write_await"],
                            io["queue_size"], io["read_request_mb"], io["write_request_mb"]],
    )


def _queue_gauge(view: StoreView, device: str, name: str) -> float:
    # partitions have no request queue of their own
    return view.last_or(MetricKey(Category.DISK, device, name))


def ioq(view: StoreView, print_header: bool) -> List[str]:
    columns = ("r/s", "rMB/s", "rmrg/s", "r_await", "w/s", "wMB/s", "wmrg/s", "w_await",
               "d/s", "dMB/s", "dmrg/s", "d_await", "q_size", "q_limit", "r_inflight", "w_inflight")
    return _disk_table(
        view, print_header, columns,
        lambda device, io: [io["reads"], io["read_mb"], io["reads_merged"], io["read_await"],
                            io["writes"], io["write_mb"], io["writes_merged"], io["write_await"],
                            io["discards"], io["discard_mb"], io["discards_merged"], io["discard_await"],
                            io["queue_size"],
                            int(_queue_gauge(view, device, "queue_nr_requests")),
                            int(_queue_gauge(view, device, "inflight_reads")),
                            int(_queue_gauge(view, device, "inflight_writes"))],
    )


def ios(view: StoreView, print_header: bool) -> List[str]:
    columns = ("r/s", "rMB/s", "rmrg/s", "r_await", "rareq_MB", "w/s", "wMB/s", "wmrg/s", "w_await",
               "wareq_MB", "d/s", "dMB/s", "dmrg/s", "d_await", "max_MB", "hw_max_MB")
    return _disk_table(
        view, print_header, columns,
        lambda device, io: [io["reads"], io["read_mb"], io["reads_merged"], io["read_await"],
                            io["read_request_mb"], io["writes"], io["write_mb"], io["writes_merged"],
                            io["write_await"], io["write_request_mb"], io["discards"], io["discard_mb"],
                            io["discards_merged"], io["discard_await"],
                            _queue_gauge(view, device, "queue_max_sectors_kb") / KIBIBYTE,
                            _queue_gauge(view, device, "queue_max_hw_sectors_kb") / KIBIBYTE],
    )


def sar_b_io(view: StoreView, print_header: bool) -> List[str]:
    """System-wide transfer rates; sector counts are 512-byte blocks."""
    devices = [
        device for device in view.instances(Category.DISK)
        if not device.startswith(EXCLUDED_DISK_PREFIXES)
        and _updated(view, MetricKey(Category.DISK, device, "reads_completed"))
    ]
    if not devices:
        return []
    totals = {name: 0.0 for name in ("reads", "writes", "discards")}
    blocks = {"read": 0.0, "write": 0.0, "discard": 0.0}
    for device in devices:
        io = _disk_io(view, device)
        for name in totals:
            totals[name] += io[name]
        for name in blocks:
            blocks[name] += io[f"{name}_mb"] * MEBIBYTE / SECTOR_BYTES
    values = [
        totals["reads"] + totals["writes"] + totals["discards"],
        totals["reads"],
        totals["writes"],
        totals["discards"],
        blocks["read"],
        blocks["write"],
        blocks["discard"],
    ]
    return _table(view, print_header, "", ("tps", "rtps", "wtps", "dtps", "bread/s", "bwrtn/s", "bdscd/s"),
                  [("", values)])


def sar_n_edev(view: StoreView, print_header: bool) -> List[str]:
    def build(interface: str) -> list:
        def rate(name: str) -> float:
            return view.require(MetricKey(Category.NETWORK, interface, name)).per_second_value

        def optional(name: str) -> float:
            return view.value_or(MetricKey(Category.NETWORK, interface, name))

        return [
            rate("receive_errors"),
            rate("transmit_errors"),
            optional("transmit_collisions"),
            rate("receive_drop"),
            rate("transmit_drop"),
            optional("transmit_carrier"),
            optional("receive_frame"),
            optional("receive_fifo"),
            optional("transmit_fifo"),
        ]

    rows = _device_rows(view, Category.NETWORK, "receive_bytes", build)
    columns = ("rxerr/s", "txerr/s", "coll/s", "rxdrop/s", "txdrop/s", "txcarr/s", "rxfram/s",
               "rxfifo/s", "txfifo/s")
    return _table(view, print_header, "IFACE", columns, rows)


RENDERERS: Dict[str, Renderer] = {
    "sar-u": sar_u,
    "sar-u-ALL": sar_u_all,
    "cpu-all": cpu_all,
    "mpstat-P-ALL": mpstat_p_all,
    "per-cpu-all": per_cpu_all,
    "schedstat": schedstat,
    "sar-q": sar_q_load,
    "sar-q-LOAD": sar_q_load,
    "sar-q-CPU": sar_q_cpu,
    "sar-q-IO": sar_q_io,
    "sar-q-MEM": sar_q_mem,
    "sar-w": sar_w_tasks,
    "sar-d": sar_d,
    "sar-b": sar_b_io,
    "iostat": iostat,
    "iostat-x": iostat_x,
    "ioq": ioq,
    "ios": ios,
    "sar-n-DEV": sar_n_dev,
    "sar-n-EDEV": sar_n_edev,
    "sar-r": sar_r,
    "sar-r-ALL": sar_r_all,
    "sar-H": sar_h,
    "sar-S": sar_s,
    "sar-B": sar_b_paging,
    "sar-W": sar_w_swapping,
    "vmstat": vmstat,
}


def get_renderer(name: str) -> Optional[Renderer]:
    return RENDERERS.get(name)
