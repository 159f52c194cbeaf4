"""
Configuration validation utilities.

This module turns the raw ``[monitor.*]`` tables of config.toml into the
validated configuration dataclasses.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AppConfig, ArchiveConfig, ChartConfig, SamplerConfig, DEFAULT_OUTPUT
from ..renderers.text import RENDERERS
from ..validation import (
    ConfigurationError,
    ValidationError,
    validate_boolean,
    validate_directory,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)
from .loader import resolve_relative

logger = logging.getLogger(__name__)


def _as_configuration_error(error: ValidationError) -> ConfigurationError:
    return ConfigurationError(
        str(error), field_name=error.field_name, value=error.value, severity=error.severity
    )


def validate_sampler_config(sampling: Dict[str, Any]) -> SamplerConfig:
    """
    Validate the [monitor.sampling] table.

    Raises:
        ConfigurationError: If a value is out of range or of the wrong type
    """
    try:
        interval_seconds = validate_positive_float(
            sampling.get("interval_seconds", 1.0),
            min_value=0.0,
            max_value=3600.0,
            field_name="monitor.sampling.interval_seconds",
            exclusive_min=True,
        )
        history_capacity = validate_positive_integer(
            sampling.get("history_capacity", 10800),
            min_value=1,
            field_name="monitor.sampling.history_capacity",
        )
        max_cycles: Optional[int] = sampling.get("max_cycles")
        if max_cycles is not None:
            max_cycles = validate_positive_integer(
                max_cycles, min_value=1, field_name="monitor.sampling.max_cycles"
            )
        output = validate_enum_choice(
            sampling.get("output", DEFAULT_OUTPUT),
            list(RENDERERS),
            field_name="monitor.sampling.output",
        )
        header_interval = validate_positive_integer(
            sampling.get("header_interval", 30),
            min_value=1,
            field_name="monitor.sampling.header_interval",
        )
        daemon = validate_boolean(sampling.get("daemon", False), field_name="monitor.sampling.daemon")
    except ConfigurationError:
        raise
    except ValidationError as e:
        raise _as_configuration_error(e) from e

    return SamplerConfig(
        interval_seconds=interval_seconds,
        history_capacity=history_capacity,
        max_cycles=max_cycles,
        output=output,
        header_interval=header_interval,
        daemon=daemon,
    )


def validate_archive_config(archive: Dict[str, Any], config_dir: Path = Path(".")) -> ArchiveConfig:
    """
    Validate the [monitor.archive] table.

    Raises:
        ConfigurationError: If a value is invalid
    """
    try:
        enabled = validate_boolean(archive.get("enabled", False), field_name="monitor.archive.enabled")
        directory_value = archive.get("directory", "archive")
        if not isinstance(directory_value, str):
            raise ValidationError(
                "monitor.archive.directory must be a string",
                field_name="monitor.archive.directory",
                value=directory_value,
            )
        directory = validate_directory(
            resolve_relative(directory_value, config_dir) if directory_value.strip() else directory_value,
            field_name="monitor.archive.directory",
        )
        every_samples = validate_positive_integer(
            archive.get("every_samples", 60),
            min_value=1,
            field_name="monitor.archive.every_samples",
        )
        partition_minutes = validate_positive_integer(
            archive.get("partition_minutes", 10),
            min_value=1,
            max_value=1440,
            field_name="monitor.archive.partition_minutes",
        )
    except ConfigurationError:
        raise
    except ValidationError as e:
        raise _as_configuration_error(e) from e

    return ArchiveConfig(
        enabled=enabled,
        directory=directory,
        every_samples=every_samples,
        partition_minutes=partition_minutes,
    )


def validate_chart_config(charts: Dict[str, Any], config_dir: Path = Path(".")) -> ChartConfig:
    """
    Validate the [monitor.charts] table.

    Raises:
        ConfigurationError: If a value is invalid
    """
    try:
        enabled = validate_boolean(charts.get("enabled", False), field_name="monitor.charts.enabled")
        width = validate_positive_integer(
            charts.get("width", 1800), min_value=100, max_value=20000, field_name="monitor.charts.width"
        )
        height = validate_positive_integer(
            charts.get("height", 1200), min_value=100, max_value=20000, field_name="monitor.charts.height"
        )
        output_value = charts.get("output_dir", "charts")
        if not isinstance(output_value, str):
            raise ValidationError(
                "monitor.charts.output_dir must be a string",
                field_name="monitor.charts.output_dir",
                value=output_value,
            )
        output_dir = validate_directory(
            resolve_relative(output_value, config_dir) if output_value.strip() else output_value,
            field_name="monitor.charts.output_dir",
        )
    except ConfigurationError:
        raise
    except ValidationError as e:
        raise _as_configuration_error(e) from e

    return ChartConfig(enabled=enabled, width=width, height=height, output_dir=output_dir)


def validate_archive_cadence(config: AppConfig) -> AppConfig:
    """
    Reject an archive cadence longer than the history can hold.

    With more ticks between writes than samples per category, the oldest
    samples are evicted before any write could copy them.

    Raises:
        ConfigurationError: If archiving is enabled and every_samples
            exceeds history_capacity
    """
    archive = config.archive
    capacity = config.sampler.history_capacity
    if archive.enabled and archive.every_samples > capacity:
        raise ConfigurationError(
            f"monitor.archive.every_samples ({archive.every_samples}) must not exceed "
            f"monitor.sampling.history_capacity ({capacity})",
            field_name="monitor.archive.every_samples",
            value=archive.every_samples,
        )
    return config


def validate_app_config(data: Dict[str, Any], config_dir: Path = Path(".")) -> AppConfig:
    """
    Validate the whole parsed config.toml.

    Args:
        data: Parsed TOML document
        config_dir: Directory of the config file, for relative paths

    Returns:
        Validated AppConfig instance
    """
    monitor = data.get("monitor", {})
    if not isinstance(monitor, dict):
        raise ConfigurationError("[monitor] must be a table", field_name="monitor", value=monitor)

    config = AppConfig(
        sampler=validate_sampler_config(monitor.get("sampling", {})),
        archive=validate_archive_config(monitor.get("archive", {}), config_dir),
        charts=validate_chart_config(monitor.get("charts", {}), config_dir),
    )
    validate_archive_cadence(config)
    logger.debug(f"Validated configuration: {config}")
    return config
