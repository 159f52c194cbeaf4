"""
Counter snapshot sources.
"""

from .base import AbstractCounterSource
from .fields import FIELDS, FieldSpec, fields_for, is_cumulative
from .psutil_source import (
    PsutilCounterSource,
    parse_key_values,
    parse_meminfo,
    parse_net_dev,
    parse_pressure,
    parse_proc_stat,
)

__all__ = [
    "AbstractCounterSource",
    "FIELDS",
    "FieldSpec",
    "fields_for",
    "is_cumulative",
    "PsutilCounterSource",
    "parse_key_values",
    "parse_meminfo",
    "parse_net_dev",
    "parse_pressure",
    "parse_proc_stat",
]
