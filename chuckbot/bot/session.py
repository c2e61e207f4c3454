"""Session - the single bot run: handshake, read loop and reconnects."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..api.facts import ReplyFetcher
from ..config.model import BotConfig
from ..constants import CHAT_SEND_INTERVAL_SECONDS, OUTBOUND_QUEUE_CAPACITY
from ..errors.handling import log_error
from ..errors.internal import AuthenticationError, NetworkError
from ..irc.connection import IRCConnection
from ..irc.models import (
    AuthFailure,
    ChannelMessage,
    DirectMessage,
    Keepalive,
    Notice,
    NoticeKind,
    OutboundItem,
    ProtocolEvent,
    SessionState,
)
from ..irc.parser import parse_line
from ..rate.backoff_strategy import ReconnectBackoff
from ..rate.outbound_limiter import OutboundLimiter
from .commands import CommandDispatcher


class Session:  # pylint: disable=too-many-instance-attributes
    """Owns everything one bot run needs and drives its state machine.

    The read loop in ``run`` is the only writer of session state
    (``state``, ``whispers_disabled``). Reactions that may block are spawned
    as background tasks so the next read is never delayed.

    Attributes:
        config: Validated startup configuration.
        token: OAuth token sent with PASS.
        backoff: Reconnect wait, reset at the start of every connection cycle.
        connection: Transport to the chat server.
        limiter: Throttled outbound chat queue.
        dispatcher: Chat command dispatcher.
        whispers_disabled: Set once the server refuses our whispers; never cleared.
    """

    def __init__(
        self,
        config: BotConfig,
        token: str,
        fetch_reply: ReplyFetcher,
        *,
        connection: IRCConnection | None = None,
        backoff: ReconnectBackoff | None = None,
        queue_capacity: int = OUTBOUND_QUEUE_CAPACITY,
        send_interval: float = CHAT_SEND_INTERVAL_SECONDS,
    ) -> None:
        self.config = config
        self.token = token
        if backoff is None and connection is not None:
            backoff = connection.backoff
        self.backoff = backoff or ReconnectBackoff()
        self.connection = connection or IRCConnection(
            config.server,
            config.port,
            backoff=self.backoff,
            use_tls=config.use_tls,
        )
        self.limiter = OutboundLimiter(
            self._send_item, capacity=queue_capacity, interval=send_interval
        )
        self.dispatcher = CommandDispatcher(self.limiter, config.channel, fetch_reply)
        self.state = SessionState.DISCONNECTED
        self.whispers_disabled = False
        self._tasks: set[asyncio.Task[Any]] = set()

    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logging.debug(f"🔀 Session state {self.state.name} -> {new_state.name}")
            self.state = new_state

    async def run(self) -> None:
        """Connect, listen, and reconnect until the server rejects the login."""
        while self.state is not SessionState.TERMINATED:
            # Every cycle starts with an immediate connection attempt.
            self.backoff.reset()
            self._set_state(SessionState.CONNECTING)
            await self.connection.connect()

            self._set_state(SessionState.AUTHENTICATING)
            await self.connection.authenticate(self.token, self.config.bot_name)
            await self.connection.enable_extended_capabilities()

            self._set_state(SessionState.JOINING)
            await self.connection.join_channel(self.config.channel)

            self._set_state(SessionState.LISTENING)
            try:
                await self._listen()
            except NetworkError as e:
                logging.warning(f"⚠️ {e}")
                self._set_state(SessionState.RECONNECTING)
            finally:
                await self.limiter.stop()
                await self.connection.disconnect()
        logging.info(f"🏁 Session for {self.config.bot_name} ended")

    async def _listen(self) -> None:
        self.limiter.start()
        self.chat(self.config.greeting)
        while True:
            line = await self.connection.read_line()
            logging.debug(line)
            if self.handle_event(parse_line(line)):
                return

    def handle_event(self, event: ProtocolEvent) -> bool:
        """React to one parsed line.

        Returns:
            True if the session must end (login rejected).
        """
        if isinstance(event, Keepalive):
            self._spawn(self.connection.pong(), name="pong")
        elif isinstance(event, AuthFailure):
            log_error(
                "Login rejected",
                AuthenticationError(
                    f"Authentication failed. Check the username ({self.config.bot_name}) and token"
                ),
                context={"bot": self.config.bot_name, "channel": self.config.channel},
            )
            self._set_state(SessionState.TERMINATED)
            return True
        elif isinstance(event, Notice):
            self._handle_notice(event)
        elif isinstance(event, ChannelMessage):
            reply = self.dispatcher.dispatch(event)
            if reply is not None:
                self._spawn(reply, name="command-reply")
        elif isinstance(event, DirectMessage):
            logging.info(f"📨 WHISPER received from @{event.sender}: {event.body}")
            if self.whispers_disabled:
                logging.info("🔇 Whispers disabled, not answering")
            else:
                self._spawn(
                    self.whisper(event.sender, self.config.whisper_auto_response),
                    name="whisper-reply",
                )
        return False

    def _handle_notice(self, notice: Notice) -> None:
        logging.info(f"📢 {notice.text}")
        if notice.kind is NoticeKind.WHISPERS_REFUSED:
            self.whispers_disabled = True

    def chat(self, message: str) -> bool:
        """Queue a message for the bot's channel."""
        if not message:
            logging.warning("⚠️ Chat message was empty")
            return False
        return self.limiter.enqueue(OutboundItem.for_channel(self.config.channel, message))

    async def whisper(self, user: str, message: str) -> bool:
        """Queue a whisper to ``user`` unless the server has refused our whispers."""
        if self.whispers_disabled:
            logging.info("🔇 Whispers disabled, refusing to send whisper")
            return False
        if not message:
            logging.warning("⚠️ Whisper message was empty")
            return False
        return self.limiter.enqueue(
            OutboundItem.for_whisper(self.config.channel, user, message)
        )

    async def _send_item(self, item: OutboundItem) -> None:
        await self.connection.write_raw("PRIVMSG", item.line)

    def _spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logging.error(f"❌ Background task {task.get_name()} failed: {error}")
