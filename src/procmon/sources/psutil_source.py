"""
Counter source implementation using the 'psutil' library.

psutil covers CPU times, block device and network interface counters,
virtual and swap memory, and the load averages. Everything psutil does
not expose (scheduler statistics, pressure stall information, the
/proc/stat and /proc/vmstat counters, the extra /proc/meminfo, diskstats
and net/dev columns, block queue settings) is read from procfs and sysfs
directly.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import psutil

from ..errors import SnapshotUnavailable
from ..models.keys import ALL, SINGLE, Category, MetricKey
from ..models.snapshot import CounterSnapshot
from .base import AbstractCounterSource
from .fields import fields_for

logger = logging.getLogger(__name__)

SECTOR_BYTES = 512
KIBIBYTE = 1024


class PsutilCounterSource(AbstractCounterSource):
    """
    Reads all tracked counters of the local machine.

    Every reader fills one group of counters and raises SnapshotUnavailable
    when its group cannot be read; the other groups of the tick are still
    collected.

    Attributes:
        proc_root: Mount point of procfs, overridable for tests.
        sys_root: Mount point of sysfs, overridable for tests.
        clock: Wall clock used to stamp snapshots.
    """

    def __init__(self, proc_root: Path = Path("/proc"), sys_root: Path = Path("/sys"),
                 clock: Callable[[], float] = time.time):
        super().__init__()
        self.proc_root = Path(proc_root)
        self.sys_root = Path(sys_root)
        self.clock = clock
        self._warned: set = set()

    def _now(self) -> float:
        return self.clock()

    def _readers(self) -> List[Callable[[CounterSnapshot], None]]:
        return [
            self._read_cpu,
            self._read_proc_stat,
            self._read_schedstat,
            self._read_disks,
            self._read_network,
            self._read_virtual_memory,
            self._read_swap_memory,
            self._read_meminfo,
            self._read_vmstat,
            self._read_load,
            self._read_loadavg_tasks,
            self._read_pressure,
        ]

    def _collect(self, snapshot: CounterSnapshot) -> None:
        for reader in self._readers():
            try:
                reader(snapshot)
            except SnapshotUnavailable as e:
                self._warn_once(e)

    def _warn_once(self, error: SnapshotUnavailable) -> None:
        # Unsupported counters stay unsupported; only log the first time.
        if error.what not in self._warned:
            self._warned.add(error.what)
            logger.warning(str(error))

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text()
        except OSError as e:
            raise SnapshotUnavailable(str(path), e) from e

    @staticmethod
    def _fill(snapshot: CounterSnapshot, category: Category, subcategory: str,
              record: Any, origin: str) -> None:
        for spec in fields_for(category, origin):
            value = getattr(record, spec.attribute, None)
            snapshot.set(MetricKey(category, subcategory, spec.name), value)

    @staticmethod
    def _fill_mapping(snapshot: CounterSnapshot, category: Category, subcategory: str,
                      values: Dict[str, float], origin: Optional[str] = None) -> None:
        for spec in fields_for(category, origin):
            if spec.attribute in values:
                snapshot.set(MetricKey(category, subcategory, spec.name), values[spec.attribute])

    def _read_cpu(self, snapshot: CounterSnapshot) -> None:
        try:
            total = psutil.cpu_times(percpu=False)
            per_cpu = psutil.cpu_times(percpu=True)
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("cpu times", e) from e
        self._fill(snapshot, Category.CPU, ALL, total, "cpu_times")
        for index, times in enumerate(per_cpu):
            self._fill(snapshot, Category.CPU, f"cpu{index}", times, "cpu_times")

    def _read_proc_stat(self, snapshot: CounterSnapshot) -> None:
        content = self._read_text(self.proc_root / "stat")
        self._fill_mapping(snapshot, Category.CPU, SINGLE, parse_proc_stat(content), "proc_stat")

    def _read_schedstat(self, snapshot: CounterSnapshot) -> None:
        content = self._read_text(self.proc_root / "schedstat")

        totals = {"running": 0.0, "waiting": 0.0, "timeslices": 0.0}
        found = False
        for line in content.splitlines():
            parts = line.split()
            if len(parts) < 10 or not parts[0].startswith("cpu"):
                continue
            try:
                # cpu<N> ... <running ns> <waiting ns> <timeslices>
                values = {"running": float(parts[7]), "waiting": float(parts[8]), "timeslices": float(parts[9])}
            except ValueError:
                logger.debug(f"Skipping malformed schedstat line: {line!r}")
                continue
            found = True
            for name, value in values.items():
                totals[name] += value
                snapshot.set(MetricKey(Category.SCHEDULER, parts[0], name), value)
        if found:
            for name, value in totals.items():
                snapshot.set(MetricKey(Category.SCHEDULER, ALL, name), value)

    def _read_disks(self, snapshot: CounterSnapshot) -> None:
        try:
            disks = psutil.disk_io_counters(perdisk=True) or {}
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("disk counters", e) from e
        for device, counters in disks.items():
            self._fill(snapshot, Category.DISK, device, counters, "disk_io_counters")
        self._read_block_queues(snapshot, disks)
        # extra columns only for devices psutil reported
        content = self._read_text(self.proc_root / "diskstats")
        for device, columns in parse_columns(content, name_column=2).items():
            if device in disks:
                self._fill_columns(snapshot, Category.DISK, device, columns, "proc_diskstats")

    def _read_block_queues(self, snapshot: CounterSnapshot, devices: Iterable[str]) -> None:
        # partitions have no queue directory; their keys stay absent
        for device in devices:
            base = self.sys_root / "block" / device
            if not base.is_dir():
                continue
            for spec in fields_for(Category.DISK, "sysfs_block"):
                relative, _, column = spec.attribute.partition(":")
                try:
                    parts = (base / relative).read_text().split()
                    value = float(parts[int(column or 0)])
                except (OSError, IndexError, ValueError) as e:
                    logger.debug(f"Unable to read {base / relative}: {e}")
                    continue
                snapshot.set(MetricKey(Category.DISK, device, spec.name), value)

    def _read_network(self, snapshot: CounterSnapshot) -> None:
        try:
            interfaces = psutil.net_io_counters(pernic=True) or {}
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("network counters", e) from e
        for interface, counters in interfaces.items():
            self._fill(snapshot, Category.NETWORK, interface, counters, "net_io_counters")
        content = self._read_text(self.proc_root / "net" / "dev")
        for interface, columns in parse_net_dev(content).items():
            if interface in interfaces:
                self._fill_columns(snapshot, Category.NETWORK, interface, columns, "proc_net_dev")

    @staticmethod
    def _fill_columns(snapshot: CounterSnapshot, category: Category, subcategory: str,
                      columns: List[float], origin: str) -> None:
        for spec in fields_for(category, origin):
            index = int(spec.attribute)
            if index < len(columns):
                snapshot.set(MetricKey(category, subcategory, spec.name), columns[index])

    def _read_virtual_memory(self, snapshot: CounterSnapshot) -> None:
        try:
            memory = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("virtual memory", e) from e
        self._fill(snapshot, Category.MEMORY, SINGLE, memory, "virtual_memory")

    def _read_swap_memory(self, snapshot: CounterSnapshot) -> None:
        try:
            swap = psutil.swap_memory()
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("swap memory", e) from e
        self._fill(snapshot, Category.MEMORY, SINGLE, swap, "swap_memory")

    def _read_meminfo(self, snapshot: CounterSnapshot) -> None:
        content = self._read_text(self.proc_root / "meminfo")
        self._fill_mapping(snapshot, Category.MEMORY, SINGLE, parse_meminfo(content), "proc_meminfo")

    def _read_vmstat(self, snapshot: CounterSnapshot) -> None:
        content = self._read_text(self.proc_root / "vmstat")
        self._fill_mapping(snapshot, Category.VMSTAT, SINGLE, parse_key_values(content))

    def _read_load(self, snapshot: CounterSnapshot) -> None:
        try:
            load_1, load_5, load_15 = psutil.getloadavg()
        except (OSError, psutil.Error) as e:
            raise SnapshotUnavailable("load averages", e) from e
        snapshot.set(MetricKey(Category.LOAD, SINGLE, "load_1"), load_1)
        snapshot.set(MetricKey(Category.LOAD, SINGLE, "load_5"), load_5)
        snapshot.set(MetricKey(Category.LOAD, SINGLE, "load_15"), load_15)

    def _read_loadavg_tasks(self, snapshot: CounterSnapshot) -> None:
        path = self.proc_root / "loadavg"
        content = self._read_text(path)
        try:
            # "0.20 0.18 0.12 1/80 11206"
            runnable, total = content.split()[3].split("/")
            snapshot.set(MetricKey(Category.LOAD, SINGLE, "current_runnable"), float(runnable))
            snapshot.set(MetricKey(Category.LOAD, SINGLE, "total"), float(total))
        except (IndexError, ValueError) as e:
            raise SnapshotUnavailable(str(path), e) from e

    def _read_pressure(self, snapshot: CounterSnapshot) -> None:
        for resource in ("cpu", "io", "memory"):
            try:
                content = self._read_text(self.proc_root / "pressure" / resource)
            except SnapshotUnavailable as e:
                # one missing resource does not hide the others
                self._warn_once(e)
                continue
            for kind, values in parse_pressure(content).items():
                for field_name, value in values.items():
                    snapshot.set(MetricKey(Category.PRESSURE, SINGLE, f"{resource}_{kind}_{field_name}"), value)


def parse_key_values(content: str) -> Dict[str, float]:
    """
    Parse "name value" lines such as /proc/vmstat.

    Lines with a non-numeric value are skipped.
    """
    values = {}
    for line in content.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            values[parts[0]] = float(parts[1])
        except ValueError:
            logger.debug(f"Skipping malformed line: {line!r}")
    return values


def parse_proc_stat(content: str) -> Dict[str, float]:
    """
    Parse the singleton counters of /proc/stat.

    Only the first number of each line is kept, so "intr" yields the total
    interrupt count; the per-cpu lines are left to psutil.
    """
    return {
        name: value for name, value in parse_key_values(content).items()
        if not name.startswith("cpu")
    }


def parse_meminfo(content: str) -> Dict[str, float]:
    """
    Parse /proc/meminfo into bytes; unitless fields (page counts) as-is.

    Example:
        >>> parse_meminfo("Dirty:   12 kB\\nHugePages_Free:  3")
        {'Dirty': 12288.0, 'HugePages_Free': 3.0}
    """
    values = {}
    for line in content.splitlines():
        name, _, rest = line.partition(":")
        parts = rest.split()
        if not parts:
            continue
        try:
            value = float(parts[0])
        except ValueError:
            logger.debug(f"Skipping malformed meminfo line: {line!r}")
            continue
        if len(parts) > 1 and parts[1] == "kB":
            value *= KIBIBYTE
        values[name.strip()] = value
    return values


def parse_columns(content: str, name_column: int) -> Dict[str, List[float]]:
    """
    Parse whitespace separated tables keyed by a name column, like
    /proc/diskstats. Returns the numeric columns after the name.
    """
    rows = {}
    for line in content.splitlines():
        parts = line.split()
        if len(parts) <= name_column + 1:
            continue
        try:
            rows[parts[name_column]] = [float(part) for part in parts[name_column + 1:]]
        except ValueError:
            logger.debug(f"Skipping malformed line: {line!r}")
    return rows


def parse_net_dev(content: str) -> Dict[str, List[float]]:
    """Parse /proc/net/dev, skipping its two header lines."""
    rows = {}
    for line in content.splitlines()[2:]:
        interface, separator, rest = line.partition(":")
        if not separator:
            continue
        try:
            rows[interface.strip()] = [float(part) for part in rest.split()]
        except ValueError:
            logger.debug(f"Skipping malformed net/dev line: {line!r}")
    return rows


def parse_pressure(content: str) -> Dict[str, Dict[str, float]]:
    """
    Parse the content of a /proc/pressure/<resource> file.

    Example:
        >>> parse_pressure("some avg10=0.12 avg60=0.05 avg300=0.01 total=1234")
        {'some': {'avg10': 0.12, 'avg60': 0.05, 'avg300': 0.01, 'total': 1234.0}}
    """
    result: Dict[str, Dict[str, float]] = {}
    for line in content.splitlines():
        parts = line.split()
        if not parts or parts[0] not in ("some", "full"):
            continue
        values = {}
        for part in parts[1:]:
            name, _, raw = part.partition("=")
            try:
                values[name] = float(raw)
            except ValueError:
                logger.debug(f"Skipping malformed pressure value: {part!r}")
        result[parts[0]] = values
    return result
