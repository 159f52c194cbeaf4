"""
Structured identifiers for counter streams.
"""

import sys
from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Kernel subsystem a counter belongs to."""

    CPU = "stat"
    SCHEDULER = "schedstat"
    MEMORY = "meminfo"
    DISK = "blockdevice"
    NETWORK = "net_dev"
    LOAD = "loadavg"
    PRESSURE = "pressure"
    VMSTAT = "vmstat"

    def __str__(self) -> str:
        return self.value


# Subcategory used for system-wide CPU aggregates and for singletons.
ALL = "all"
SINGLE = ""


@dataclass(frozen=True)
class MetricKey:
    """
    Identifies one counter stream.

    Attributes:
        category: Subsystem of the counter.
        subcategory: Instance the counter belongs to ("cpu3", "sda",
            "eth0"), "all" for CPU aggregates or "" for singletons.
        name: The raw field name (e.g. "user", "read_bytes").
    """

    category: Category
    subcategory: str
    name: str

    def __post_init__(self):
        # device and cpu names repeat on every tick
        object.__setattr__(self, "subcategory", sys.intern(self.subcategory))
        object.__setattr__(self, "name", sys.intern(self.name))

    def __str__(self) -> str:
        return f"{self.category.value}/{self.subcategory or '-'}/{self.name}"
