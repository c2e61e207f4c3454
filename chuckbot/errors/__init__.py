"""Error hierarchy and error logging helpers."""

from .handling import log_error  # noqa: F401
from .internal import (  # noqa: F401
    AuthenticationError,
    ConfigurationError,
    InternalError,
    NetworkError,
    ParsingError,
)

__all__ = [
    "log_error",
    "InternalError",
    "ConfigurationError",
    "NetworkError",
    "ParsingError",
    "AuthenticationError",
]
