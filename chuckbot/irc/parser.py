"""IRC line parsing utilities (packaged).

Turns one raw protocol line into a typed event. The surface handled is
intentionally narrow: login failures, keepalive probes, channel notices and
user chat/whisper lines. Everything else becomes ``Unrecognized``.
"""

from __future__ import annotations

import re

from .models import (
    AuthFailure,
    ChannelMessage,
    DirectMessage,
    Keepalive,
    Notice,
    NoticeKind,
    ProtocolEvent,
    Unrecognized,
)

AUTH_FAILURE_LINES = frozenset(
    {
        ":tmi.twitch.tv NOTICE * :Login authentication failed",
        ":tmi.twitch.tv NOTICE * :Improperly formatted auth",
    }
)
KEEPALIVE_LINE = "PING :tmi.twitch.tv"

RATE_LIMITED_NOTICE = (
    "Your message was not sent because you are sending messages too quickly."
)
WHISPERS_REFUSED_NOTICE = "Your settings prevent you from sending this whisper."

_NOTICE_KINDS = {
    RATE_LIMITED_NOTICE: NoticeKind.RATE_LIMITED,
    WHISPERS_REFUSED_NOTICE: NoticeKind.WHISPERS_REFUSED,
}

# Groups: sender, raw body ("PRIVMSG #chan :text"), message type, text
_MESSAGE_PATTERN = re.compile(
    r"^(?:@\S+ )?:(\w+)!\S+ ((PRIVMSG|WHISPER) #?(\w+) :(.*))$"
)
_NOTICE_PATTERN = re.compile(r"^(?:@\S+ )?:tmi\.twitch\.tv NOTICE #\w+ :(.+)$")
_COMMAND_PATTERN = re.compile(r"!(\w+)")


def parse_line(line: str) -> ProtocolEvent:
    """Classify a single protocol line.

    Never raises: anything that does not match a known shape is returned as
    ``Unrecognized`` so the read loop can log it and move on.
    """
    if line in AUTH_FAILURE_LINES:
        return AuthFailure()
    if line == KEEPALIVE_LINE:
        return Keepalive()

    notice = _NOTICE_PATTERN.match(line)
    if notice:
        text = notice.group(1)
        return Notice(text=text, kind=_NOTICE_KINDS.get(text, NoticeKind.OTHER))

    chat = _MESSAGE_PATTERN.match(line)
    if chat:
        sender, raw_body, message_type, target, text = chat.groups()
        if message_type == "WHISPER":
            return DirectMessage(sender=sender, body=text.strip())
        return ChannelMessage(
            sender=sender, target=target, raw_body=raw_body, body=text.strip()
        )

    return Unrecognized(raw_line=line)


def extract_command(body: str) -> str | None:
    """Return the name of the first ``!word`` token in a chat body, if any."""
    match = _COMMAND_PATTERN.search(body)
    if not match:
        return None
    return match.group(1).strip()
