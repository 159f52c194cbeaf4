"""
Input validation and error reporting for procmon.

Config loading and the command line share these validators, so a bad
value is reported the same way whichever side it came from.
"""

from .exceptions import (
    ConfigurationError,
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)
from .validators import (
    validate_boolean,
    validate_directory,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    "ConfigurationError",
    "ErrorSeverity",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "validate_boolean",
    "validate_directory",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
]
