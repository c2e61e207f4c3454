"""Bot session and chat command handling."""

from .commands import FACT_COMMAND, CommandDispatcher  # noqa: F401
from .session import Session  # noqa: F401

__all__ = ["CommandDispatcher", "FACT_COMMAND", "Session"]
