"""External HTTP clients."""

from .facts import FactClient, ReplyFetcher  # noqa: F401

__all__ = ["FactClient", "ReplyFetcher"]
