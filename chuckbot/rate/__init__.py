"""Outbound rate limiting and reconnect backoff."""

from .backoff_strategy import ReconnectBackoff  # noqa: F401
from .outbound_limiter import OutboundLimiter  # noqa: F401

__all__ = ["ReconnectBackoff", "OutboundLimiter"]
