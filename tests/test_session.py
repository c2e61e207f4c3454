"""
Scenario tests for Session: handshake order, read loop reactions, reconnects.
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from chuckbot.bot.session import Session
from chuckbot.config.model import BotConfig
from chuckbot.errors.internal import NetworkError
from chuckbot.irc.models import (
    ChannelMessage,
    DirectMessage,
    Notice,
    NoticeKind,
    SessionState,
)
from chuckbot.irc.parser import WHISPERS_REFUSED_NOTICE
from chuckbot.rate.backoff_strategy import ReconnectBackoff

AUTH_FAILED = ":tmi.twitch.tv NOTICE * :Login authentication failed"
PING = "PING :tmi.twitch.tv"


class ScriptedConnection:
    """Stands in for IRCConnection; each connect() starts the next scripted cycle.

    When a cycle runs out of lines, read_line raises NetworkError as if the
    server had closed the stream.
    """

    def __init__(self, cycles: list[list[str]], read_delay: float = 0.02) -> None:
        self.cycles = cycles
        self.read_delay = read_delay
        self.backoff = ReconnectBackoff(base_delay=1.0)
        self.calls: list[str] = []
        self.writes: list[tuple[str, str]] = []
        self.write_times: list[float] = []
        self.backoff_at_connect: list[float] = []
        self.reads = 0
        self._lines: list[str] = []
        self._cycle = -1

    async def connect(self) -> None:
        self.backoff_at_connect.append(self.backoff.delay)
        self.calls.append("connect")
        self._cycle += 1
        self._lines = list(self.cycles[self._cycle])

    async def authenticate(self, token: str, bot_name: str) -> None:
        self.calls.append(f"authenticate {token} {bot_name}")

    async def enable_extended_capabilities(self) -> None:
        self.calls.append("capabilities")

    async def join_channel(self, channel: str) -> None:
        self.calls.append(f"join {channel}")

    async def pong(self) -> None:
        await self.write_raw("PONG", ":tmi.twitch.tv")

    async def write_raw(self, command: str, message: str) -> bool:
        self.writes.append((command, message))
        self.write_times.append(asyncio.get_running_loop().time())
        return True

    async def read_line(self) -> str:
        await asyncio.sleep(self.read_delay)
        if not self._lines:
            raise NetworkError("Connection closed by server")
        self.reads += 1
        return self._lines.pop(0)

    async def disconnect(self) -> None:
        self.calls.append("disconnect")

    def privmsgs(self) -> list[str]:
        return [message for command, message in self.writes if command == "PRIVMSG"]


def _config(**overrides) -> BotConfig:
    data = {
        "bot_name": "chuckbot",
        "channel": "chan",
        "server": "irc.example",
        "port": 6697,
        "secrets_path": "secrets.json",
        "greeting": "Hello chat",
        "whisper_auto_response": "auto reply",
    }
    data.update(overrides)
    return BotConfig.from_dict(data)


def _session(conn: ScriptedConnection, fetch: AsyncMock | None = None) -> Session:
    return Session(
        _config(),
        "oauth:token",
        fetch or AsyncMock(return_value="fact"),
        connection=conn,
        send_interval=0,
    )


class TestSessionHandshake:
    @pytest.mark.asyncio
    async def test_handshake_order_and_single_greeting(self):
        conn = ScriptedConnection([[AUTH_FAILED]])
        session = _session(conn)

        await session.run()

        assert conn.calls == [
            "connect",
            "authenticate oauth:token chuckbot",
            "capabilities",
            "join chan",
            "disconnect",
        ]
        assert conn.privmsgs() == ["#chan :Hello chat"]
        assert session.state is SessionState.TERMINATED

    @pytest.mark.asyncio
    async def test_greeting_queued_before_first_read(self):
        conn = ScriptedConnection([[AUTH_FAILED]])
        session = _session(conn)
        depth_at_first_read: list[int] = []
        original_read = conn.read_line

        async def read_line() -> str:
            if not depth_at_first_read:
                depth_at_first_read.append(session.limiter.depth + len(conn.privmsgs()))
            return await original_read()

        conn.read_line = read_line  # type: ignore[method-assign]
        await session.run()
        assert depth_at_first_read == [1]

    @pytest.mark.asyncio
    async def test_auth_failure_terminates_without_reconnect(self):
        conn = ScriptedConnection([[AUTH_FAILED, PING]])
        session = _session(conn)
        await session.run()
        assert conn.calls.count("connect") == 1
        assert conn.reads == 1
        assert ("PONG", ":tmi.twitch.tv") not in conn.writes

    @pytest.mark.asyncio
    async def test_auth_failure_logged_as_auth_error(self, caplog):
        conn = ScriptedConnection([[AUTH_FAILED]])
        session = _session(conn)
        with caplog.at_level(logging.ERROR):
            await session.run()
        auth = [m for m in caplog.messages if m.startswith("[AUTH] Login rejected")]
        assert len(auth) == 1
        assert "AuthenticationError" in auth[0]
        assert "chuckbot" in auth[0]


class TestSessionReactions:
    @pytest.mark.asyncio
    async def test_keepalive_replies_once_and_keeps_reading(self):
        conn = ScriptedConnection([[PING, ":a!a@a.tmi.twitch.tv PRIVMSG #chan :hi", AUTH_FAILED]])
        session = _session(conn)
        await session.run()
        assert conn.writes.count(("PONG", ":tmi.twitch.tv")) == 1
        assert conn.reads == 3

    @pytest.mark.asyncio
    async def test_keepalive_bypasses_full_queue(self):
        conn = ScriptedConnection([[PING, AUTH_FAILED]])
        session = Session(
            _config(),
            "oauth:token",
            AsyncMock(return_value="fact"),
            connection=conn,
            queue_capacity=1,
            send_interval=60,
        )
        await session.run()
        assert ("PONG", ":tmi.twitch.tv") in conn.writes

    @pytest.mark.asyncio
    async def test_command_reply_enqueued_for_channel(self):
        fetch = AsyncMock(return_value="fact")
        conn = ScriptedConnection(
            [[":bob!bob@bob.tmi.twitch.tv PRIVMSG #chan :!chucknorris", AUTH_FAILED]]
        )
        session = _session(conn, fetch)
        await session.run()
        fetch.assert_awaited_once()
        assert conn.privmsgs() == ["#chan :Hello chat", "#chan :bob: fact"]

    @pytest.mark.asyncio
    async def test_plain_chat_does_not_dispatch(self):
        fetch = AsyncMock(return_value="fact")
        conn = ScriptedConnection(
            [[":bob!bob@bob.tmi.twitch.tv PRIVMSG #chan :no commands here", AUTH_FAILED]]
        )
        session = _session(conn, fetch)
        await session.run()
        fetch.assert_not_called()
        assert conn.privmsgs() == ["#chan :Hello chat"]

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_loop_running(self):
        fetch = AsyncMock(side_effect=NetworkError("FetchFact: boom"))
        conn = ScriptedConnection(
            [[":bob!b@b PRIVMSG #chan :!chucknorris", PING, AUTH_FAILED]]
        )
        session = _session(conn, fetch)
        await session.run()
        assert conn.reads == 3
        assert conn.privmsgs() == ["#chan :Hello chat"]

    @pytest.mark.asyncio
    async def test_whisper_gets_auto_response(self):
        conn = ScriptedConnection(
            [[":dave!dave@dave.tmi.twitch.tv WHISPER chuckbot :hi bot", AUTH_FAILED]]
        )
        session = _session(conn)
        await session.run()
        assert "#chan :/w dave auto reply" in conn.privmsgs()

    @pytest.mark.asyncio
    async def test_whisper_refused_notice_suppresses_all_later_whispers(self):
        conn = ScriptedConnection(
            [
                [
                    f":tmi.twitch.tv NOTICE #chan :{WHISPERS_REFUSED_NOTICE}",
                    ":dave!dave@dave.tmi.twitch.tv WHISPER chuckbot :one",
                    ":erin!erin@erin.tmi.twitch.tv WHISPER chuckbot :two",
                    ":dave!dave@dave.tmi.twitch.tv WHISPER chuckbot :three",
                ],
                [
                    ":frank!frank@frank.tmi.twitch.tv WHISPER chuckbot :after reconnect",
                    AUTH_FAILED,
                ],
            ]
        )
        session = _session(conn)
        await session.run()
        assert session.whispers_disabled is True
        assert not [m for m in conn.privmsgs() if "/w " in m]

    @pytest.mark.asyncio
    async def test_rate_notice_changes_nothing(self):
        session = _session(ScriptedConnection([[]]))
        notice = Notice(
            text="Your message was not sent because you are sending messages too quickly.",
            kind=NoticeKind.RATE_LIMITED,
        )
        assert session.handle_event(notice) is False
        assert session.whispers_disabled is False

    @pytest.mark.asyncio
    async def test_whisper_checks_flag_when_task_runs(self):
        session = _session(ScriptedConnection([[]]))
        session.handle_event(DirectMessage(sender="dave", body="hi"))
        session.whispers_disabled = True
        await asyncio.sleep(0.01)
        assert session.limiter.depth == 0

    @pytest.mark.asyncio
    async def test_empty_chat_is_not_queued(self):
        session = _session(ScriptedConnection([[]]))
        assert session.chat("") is False
        assert session.limiter.depth == 0

    @pytest.mark.asyncio
    async def test_channel_message_without_command_spawns_nothing(self):
        session = _session(ScriptedConnection([[]]))
        event = ChannelMessage(sender="bob", target="chan", raw_body="PRIVMSG #chan :yo", body="yo")
        session.handle_event(event)
        assert not session._tasks  # noqa: SLF001


class TestSessionReconnect:
    @pytest.mark.asyncio
    async def test_read_failure_restarts_full_cycle(self):
        conn = ScriptedConnection([[PING], [AUTH_FAILED]])
        session = _session(conn)
        await session.run()
        assert conn.calls == [
            "connect",
            "authenticate oauth:token chuckbot",
            "capabilities",
            "join chan",
            "disconnect",
            "connect",
            "authenticate oauth:token chuckbot",
            "capabilities",
            "join chan",
            "disconnect",
        ]
        # one greeting per joined connection
        assert conn.privmsgs().count("#chan :Hello chat") == 2

    @pytest.mark.asyncio
    async def test_backoff_reset_before_each_cycle(self):
        conn = ScriptedConnection([[], [], [AUTH_FAILED]])
        session = _session(conn)
        assert session.backoff is conn.backoff
        conn.backoff.advance()
        conn.backoff.advance()
        assert conn.backoff.delay == 2.0

        await session.run()

        assert conn.backoff_at_connect == [0.0, 0.0, 0.0]
        assert conn.calls.count("connect") == 3

    @pytest.mark.asyncio
    async def test_reconnecting_state_logged_between_cycles(self):
        conn = ScriptedConnection([[], [AUTH_FAILED]])
        session = _session(conn)
        states: list[SessionState] = []
        original = session._set_state  # noqa: SLF001

        def record(state: SessionState) -> None:
            states.append(state)
            original(state)

        session._set_state = record  # type: ignore[method-assign]  # noqa: SLF001
        await session.run()
        assert states == [
            SessionState.CONNECTING,
            SessionState.AUTHENTICATING,
            SessionState.JOINING,
            SessionState.LISTENING,
            SessionState.RECONNECTING,
            SessionState.CONNECTING,
            SessionState.AUTHENTICATING,
            SessionState.JOINING,
            SessionState.LISTENING,
            SessionState.TERMINATED,
        ]

    @pytest.mark.asyncio
    async def test_send_spacing_holds_across_reconnect(self):
        # second cycle stays up long enough for the throttled greeting to go out
        conn = ScriptedConnection([[], [PING] * 14 + [AUTH_FAILED]], read_delay=0.05)
        session = Session(
            _config(),
            "oauth:token",
            AsyncMock(return_value="fact"),
            connection=conn,
            send_interval=0.5,
        )
        await session.run()

        times = [t for (command, _), t in zip(conn.writes, conn.write_times) if command == "PRIVMSG"]
        assert conn.privmsgs() == ["#chan :Hello chat", "#chan :Hello chat"]
        assert times[1] - times[0] >= 0.5 - 0.05
