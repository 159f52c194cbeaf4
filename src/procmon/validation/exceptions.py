"""
Validation exception types and error-handling helpers.

Every component reports failures through :func:`handle_error`, which logs
at the level matching an :class:`ErrorSeverity` and then either
propagates the exception or lets the caller carry on. The ``handle_*``
wrappers only prefix the context so log lines show which layer failed.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ValidationError(Exception):
    """
    A setting or command-line value failed validation.

    Attributes:
        field_name: Dotted config key or flag name of the bad value.
        value: The rejected value as given.
        severity: How loudly the failure should be reported.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ConfigurationError(ValidationError):
    """
    Raised when a configuration value is invalid.

    Covers a non-positive sampling interval or history capacity, unknown
    renderer names and malformed archive settings.
    """


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error under a context label and optionally re-raise it.

    Args:
        error: The exception that occurred
        context: Where the error occurred, e.g. "scheduled archive write"
        severity: ErrorSeverity or its string value
        reraise: Re-raise ``error`` after logging
        logger: Logger to use (defaults to this module's logger)
    """
    target = logger or globals()['logger']
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    level = _LOG_LEVELS[severity]

    # tracebacks only where someone will read them
    show_traceback = severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL)
    target.log(level, f"Error in {context}: {error}", exc_info=show_traceback)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a command-line failure and exit with ``exit_code`` (default 1)."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
