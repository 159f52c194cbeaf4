"""
Configuration loading for procmon.

``get_config()`` returns the validated AppConfig read from config.toml;
the CLI points it at another file with ``set_config_path()``.
"""

from .manager import (
    clear_config_cache,
    get_config,
    is_config_loaded,
    set_config_path,
)
from .loader import load_toml_file
from .validators import (
    validate_app_config,
    validate_archive_cadence,
    validate_archive_config,
    validate_chart_config,
    validate_sampler_config,
)

__all__ = [
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "load_toml_file",
    "validate_app_config",
    "validate_archive_cadence",
    "validate_archive_config",
    "validate_chart_config",
    "validate_sampler_config",
]
