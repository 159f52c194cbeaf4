"""
Process-wide configuration cache.

The configuration is read once, on the first :func:`get_config` call,
from the path set with :func:`set_config_path` (the CLI's ``--config``)
or from ``conf/config.toml`` next to the source tree.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, ValidationError, handle_config_error
from .loader import load_toml_file
from .validators import validate_app_config

logger = logging.getLogger(__name__)

_CONFIG: Optional[AppConfig] = None
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """Use another config file; the next get_config() call reads it."""
    global _CONFIG_FILE_PATH
    _CONFIG_FILE_PATH = Path(config_path)
    clear_config_cache()
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    global _CONFIG
    _CONFIG = None


def _load_config(config_path: Path) -> AppConfig:
    """
    Read and validate ``config_path``.

    Without a config file the built-in defaults apply.

    Raises:
        ConfigurationError: If a configuration value is invalid
        tomllib.TOMLDecodeError: If the file is malformed
    """
    if not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using defaults")
        return AppConfig()

    data = load_toml_file(config_path)
    try:
        config = validate_app_config(data, config_path.parent)
    except ValidationError as e:
        handle_config_error(e, f"validating {config_path}", severity=ErrorSeverity.CRITICAL, logger=logger)
        raise
    logger.info(
        f"Loaded configuration: interval {config.sampler.interval_seconds}s, "
        f"history {config.sampler.history_capacity}, archive {'on' if config.archive.enabled else 'off'}"
    )
    return config


def get_config() -> AppConfig:
    """
    Get the application configuration, loading it on first use.

    Returns:
        The cached AppConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None
