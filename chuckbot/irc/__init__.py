"""IRC subsystem package.

Contains the protocol event models, the line parser and the connection used
by the session loop.
"""

from .models import (  # noqa: F401
    AuthFailure,
    ChannelMessage,
    DirectMessage,
    Keepalive,
    Notice,
    NoticeKind,
    OutboundItem,
    ProtocolEvent,
    SessionState,
    Unrecognized,
)
from .parser import extract_command, parse_line  # noqa: F401
from .connection import IRCConnection  # noqa: F401  # isort: skip

__all__ = [
    "AuthFailure",
    "ChannelMessage",
    "DirectMessage",
    "IRCConnection",
    "Keepalive",
    "Notice",
    "NoticeKind",
    "OutboundItem",
    "ProtocolEvent",
    "SessionState",
    "Unrecognized",
    "extract_command",
    "parse_line",
]
