"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the session loop and the
entry point. Raw transport / aiohttp / JSON errors are wrapped into them at
the boundary where they occur.

Classes:
  InternalError        – Base for all internal errors.
  ConfigurationError   – Missing or invalid startup configuration (fatal).
  NetworkError         – Transport read/IO failure (triggers a reconnect).
  ParsingError         – Response parsing / schema validation issues.
  AuthenticationError  – Server rejected the credentials (terminal).
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigurationError(InternalError):
    """Raised when a required startup field or the secrets file is unusable.

    Always fatal: the process exits before any network activity.
    """


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    Raised by the connection when reading the next line fails or the server
    closes the stream; the session answers it with a full reconnect cycle.
    """


class ParsingError(InternalError):
    """Exception raised for response parsing or schema validation errors."""


class AuthenticationError(InternalError):
    """Exception raised when the chat server reports a failed login."""


__all__ = [
    "InternalError",
    "ConfigurationError",
    "NetworkError",
    "ParsingError",
    "AuthenticationError",
]
