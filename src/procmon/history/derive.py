"""
Derivation of chart-ready samples from a published store view.

Each history category has one deriver. A deriver returns an empty list
unless the anchor statistic of its category produced a rate on this
tick, so history never receives samples built from stale or first-tick
values.
"""

import logging
from typing import Callable, Dict, List

from ..models.keys import ALL, SINGLE, Category, MetricKey
from ..models.samples import (
    TOTAL,
    CpuSample,
    DiskSample,
    HistoricalSample,
    HistoryCategory,
    LoadSample,
    MemorySample,
    NetworkSample,
    PressureSample,
    VmstatSample,
)
from ..sources.fields import fields_for, is_cumulative
from ..statistics.store import StoreView

logger = logging.getLogger(__name__)

NANOSECONDS = 1_000_000_000.0
MICROSECONDS = 1_000_000.0

# Devices left out of the TOTAL rows.
EXCLUDED_DISK_PREFIXES = ("loop", "sr", "ram")
EXCLUDED_INTERFACES = ("lo",)

Deriver = Callable[[StoreView, float], List[HistoricalSample]]


def _is_updated(view: StoreView, key: MetricKey) -> bool:
    statistic = view.get(key)
    return statistic is not None and statistic.updated_value


def _values(view: StoreView, category: Category, subcategory: str, sample_type) -> Dict[str, float]:
    """
    Rate for cumulative fields, last value for gauges, 0 when absent.

    Only fields the sample type declares are returned.
    """
    names = sample_type.__dataclass_fields__
    values = {}
    for spec in fields_for(category):
        if spec.name not in names:
            continue
        key = MetricKey(category, subcategory, spec.name)
        if is_cumulative(key):
            values[spec.name] = view.value_or(key)
        else:
            values[spec.name] = view.last_or(key)
    return values


def _cpu_sample(view: StoreView, timestamp: float, cpu_name: str) -> CpuSample:
    times = _values(view, Category.CPU, cpu_name, CpuSample)
    return CpuSample(
        timestamp=timestamp,
        cpu_name=cpu_name,
        scheduler_running=view.value_or(MetricKey(Category.SCHEDULER, cpu_name, "running")) / NANOSECONDS,
        scheduler_waiting=view.value_or(MetricKey(Category.SCHEDULER, cpu_name, "waiting")) / NANOSECONDS,
        **times,
    )


def derive_cpu_total(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    if not _is_updated(view, MetricKey(Category.CPU, ALL, "user")):
        return []
    return [_cpu_sample(view, timestamp, ALL)]


def derive_per_cpu(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    samples = []
    for cpu_name in view.instances(Category.CPU):
        if not cpu_name.startswith("cpu") or not _is_updated(view, MetricKey(Category.CPU, cpu_name, "user")):
            continue
        samples.append(_cpu_sample(view, timestamp, cpu_name))
    samples.sort(key=lambda sample: _cpu_index(sample.cpu_name))
    return samples


def _cpu_index(cpu_name: str) -> int:
    try:
        return int(cpu_name[3:])
    except ValueError:
        return -1


def _with_total(samples: List[HistoricalSample], sample_type, timestamp: float,
                excluded: Callable[[str], bool]) -> List[HistoricalSample]:
    if not samples:
        return samples
    included = [sample for sample in samples if not excluded(sample.device_name)]
    totals = {}
    for field_name in sample_type.__dataclass_fields__:
        if field_name in ("timestamp", "device_name"):
            continue
        totals[field_name] = sum(getattr(sample, field_name) for sample in included)
    samples.append(sample_type(timestamp=timestamp, device_name=TOTAL, **totals))
    return samples


def derive_disks(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    samples = [
        DiskSample(timestamp=timestamp, device_name=device,
                   **_values(view, Category.DISK, device, DiskSample))
        for device in view.instances(Category.DISK)
        if _is_updated(view, MetricKey(Category.DISK, device, "reads_completed"))
    ]
    return _with_total(samples, DiskSample, timestamp,
                       lambda device: device.startswith(EXCLUDED_DISK_PREFIXES))


def derive_network(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    samples = [
        NetworkSample(timestamp=timestamp, device_name=interface,
                      **_values(view, Category.NETWORK, interface, NetworkSample))
        for interface in view.instances(Category.NETWORK)
        if _is_updated(view, MetricKey(Category.NETWORK, interface, "receive_bytes"))
    ]
    return _with_total(samples, NetworkSample, timestamp,
                       lambda interface: interface in EXCLUDED_INTERFACES)


def derive_memory(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    if not _is_updated(view, MetricKey(Category.MEMORY, SINGLE, "memtotal")):
        return []
    return [MemorySample(timestamp=timestamp, **_values(view, Category.MEMORY, SINGLE, MemorySample))]


def derive_load(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    if not _is_updated(view, MetricKey(Category.LOAD, SINGLE, "load_1")):
        return []
    return [LoadSample(timestamp=timestamp, **_values(view, Category.LOAD, SINGLE, LoadSample))]


def derive_pressure(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    if not _is_updated(view, MetricKey(Category.PRESSURE, SINGLE, "cpu_some_avg10")):
        return []
    values = _values(view, Category.PRESSURE, SINGLE, PressureSample)
    for name in values:
        if name.endswith("_total"):
            values[name] /= MICROSECONDS
    return [PressureSample(timestamp=timestamp, **values)]


def derive_vmstat(view: StoreView, timestamp: float) -> List[HistoricalSample]:
    if not _is_updated(view, MetricKey(Category.VMSTAT, SINGLE, "pgpgin")):
        return []
    values = _values(view, Category.VMSTAT, SINGLE, VmstatSample)
    values.update(_values(view, Category.CPU, SINGLE, VmstatSample))
    return [VmstatSample(timestamp=timestamp, **values)]


DERIVERS: Dict[HistoryCategory, Deriver] = {
    HistoryCategory.CPU: derive_cpu_total,
    HistoryCategory.PER_CPU: derive_per_cpu,
    HistoryCategory.DISK: derive_disks,
    HistoryCategory.NETWORK: derive_network,
    HistoryCategory.MEMORY: derive_memory,
    HistoryCategory.LOAD: derive_load,
    HistoryCategory.PRESSURE: derive_pressure,
    HistoryCategory.VMSTAT: derive_vmstat,
}


def derive_all(view: StoreView, timestamp: float) -> Dict[HistoryCategory, List[HistoricalSample]]:
    """Run every deriver; categories without new samples are left out."""
    derived = {}
    for category, deriver in DERIVERS.items():
        samples = deriver(view, timestamp)
        if samples:
            derived[category] = samples
    return derived
