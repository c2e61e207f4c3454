"""Shared IRC data models (packaged)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SessionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    AUTHENTICATING = auto()
    JOINING = auto()
    LISTENING = auto()
    RECONNECTING = auto()
    TERMINATED = auto()


class NoticeKind(Enum):
    RATE_LIMITED = auto()
    WHISPERS_REFUSED = auto()
    OTHER = auto()


@dataclass(frozen=True, slots=True)
class Keepalive:
    pass


@dataclass(frozen=True, slots=True)
class AuthFailure:
    pass


@dataclass(frozen=True, slots=True)
class Notice:
    text: str
    kind: NoticeKind = NoticeKind.OTHER


@dataclass(frozen=True, slots=True)
class ChannelMessage:
    sender: str
    target: str
    raw_body: str
    body: str


@dataclass(frozen=True, slots=True)
class DirectMessage:
    sender: str
    body: str


@dataclass(frozen=True, slots=True)
class Unrecognized:
    raw_line: str


ProtocolEvent = (
    Keepalive | AuthFailure | Notice | ChannelMessage | DirectMessage | Unrecognized
)


@dataclass(frozen=True, slots=True)
class OutboundItem:
    """A chat line waiting in the outbound queue.

    ``destination`` is the channel the message command is addressed to and
    ``text`` the payload after the ``:`` separator.
    """

    destination: str
    text: str

    @property
    def line(self) -> str:
        return f"{self.destination} :{self.text}"

    @classmethod
    def for_channel(cls, channel: str, text: str) -> OutboundItem:
        return cls(destination=f"#{channel.lstrip('#')}", text=text)

    @classmethod
    def for_whisper(cls, channel: str, user: str, text: str) -> OutboundItem:
        # Whispers are sent in-band through the /w chat command.
        return cls(destination=f"#{channel.lstrip('#')}", text=f"/w {user} {text}")
