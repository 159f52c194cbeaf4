"""
Reading config.toml from disk.

Only parsing happens here; turning the tables into configuration objects
is the job of :mod:`procmon.config.validators`.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path) -> Dict[str, Any]:
    """
    Parse a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    file_path = Path(file_path)
    logger.info(f"Reading configuration from {file_path}")
    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(e, f"parsing {file_path}", severity=ErrorSeverity.CRITICAL, logger=logger)
        raise


def resolve_relative(path_value: str, config_dir: Path) -> Path:
    """Resolve a path from the config file relative to the file's directory."""
    path = Path(path_value).expanduser()
    if path.is_absolute():
        return path
    return config_dir / path
