"""
Validation functions for configuration and command-line values.

Every validator takes the raw value plus the name it is reported under
(a dotted config key or a flag) and returns the converted value, or
raises ValidationError.
"""

import math
from pathlib import Path
from typing import Any, List, NoReturn, Optional, Union

from .exceptions import ValidationError


def _reject(field_name: str, value: Any, reason: str) -> NoReturn:
    raise ValidationError(f"{field_name} {reason}", field_name=field_name, value=value)


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer within [min_value, max_value].

    Args:
        value: Value to validate; strings like "5" are accepted
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    # bool is an int subclass; "true" is never a count
    if isinstance(value, bool) or isinstance(value, float):
        _reject(field_name, value, f"must be a valid integer, got {value}")
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        _reject(field_name, value, f"must be a valid integer, got {value}")
    if int_value < min_value:
        _reject(field_name, value, f"must be >= {min_value}, got {int_value}")
    if max_value is not None and int_value > max_value:
        _reject(field_name, value, f"must be <= {max_value}, got {int_value}")
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value",
    exclusive_min: bool = False
) -> float:
    """
    Validate a finite number within the given bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated
        exclusive_min: Reject values equal to min_value

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        _reject(field_name, value, f"must be a valid number, got {value}")
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        _reject(field_name, value, f"must be a valid number, got {value}")
    if not math.isfinite(float_value):
        _reject(field_name, value, f"must be a finite number, got {value}")
    if float_value < min_value or (exclusive_min and float_value == min_value):
        _reject(field_name, value, f"must be {'>' if exclusive_min else '>='} {min_value}, got {float_value}")
    if max_value is not None and float_value > max_value:
        _reject(field_name, value, f"must be <= {max_value}, got {float_value}")
    return float_value


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML true/false)."""
    if not isinstance(value, bool):
        _reject(field_name, value, f"must be a boolean, got {value!r}")
    return value


def validate_directory(path: Union[str, Path], field_name: str = "directory") -> Path:
    """
    Validate a directory setting.

    The directory does not have to exist yet, but the path must not point
    at an existing regular file.
    """
    if path is None or str(path).strip() == "":
        _reject(field_name, path, "cannot be empty")
    directory = Path(path)
    if directory.exists() and not directory.is_dir():
        _reject(field_name, path, f"is not a directory: {directory}")
    return directory


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    With ``case_sensitive=False`` the matching choice is returned in its
    canonical spelling, e.g. "SAR-U" -> "sar-u".
    """
    str_value = str(value)
    if case_sensitive:
        if str_value not in choices:
            _reject(field_name, value, f"must be one of {choices}, got {value}")
        return str_value

    by_lower = {choice.lower(): choice for choice in choices}
    if str_value.lower() not in by_lower:
        _reject(field_name, value, f"must be one of {choices}, got {value}")
    return by_lower[str_value.lower()]
