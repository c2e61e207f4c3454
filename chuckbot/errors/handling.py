from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    AuthenticationError,
    ConfigurationError,
    InternalError,
    NetworkError,
    ParsingError,
)


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The exception is mapped to a coarse category so repeated failures of the
    same kind read consistently in the console.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    error_type = "unknown"
    if isinstance(error, ConfigurationError):
        error_type = "config"
    elif isinstance(error, NetworkError | OSError | ConnectionError):
        error_type = "network"
    elif isinstance(error, AuthenticationError):
        error_type = "auth"
    elif isinstance(error, ParsingError):
        error_type = "parsing"
    elif isinstance(error, InternalError):
        error_type = "internal"

    log_structured_error(
        error_type=error_type,
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
    )
