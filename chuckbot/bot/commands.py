"""CommandDispatcher - maps chat commands to their reply handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from ..api.facts import ReplyFetcher
from ..irc.models import ChannelMessage, OutboundItem
from ..irc.parser import extract_command
from ..logging_config import highlight
from ..rate.outbound_limiter import OutboundLimiter

FACT_COMMAND = "chucknorris"

CommandHandler = Callable[[ChannelMessage], Coroutine[Any, Any, None]]


class CommandDispatcher:
    """Matches ``!command`` tokens in channel messages against the built-in handlers."""

    def __init__(
        self, limiter: OutboundLimiter, channel: str, fetch_reply: ReplyFetcher
    ) -> None:
        """Initialize the dispatcher.

        Args:
            limiter: Outbound queue replies are enqueued on.
            channel: Channel replies are addressed to.
            fetch_reply: Awaitable returning the fact text, raising on failure.
        """
        self.limiter = limiter
        self.channel = channel
        self.fetch_reply = fetch_reply
        self.handlers: dict[str, CommandHandler] = {
            FACT_COMMAND: self.reply_with_fact,
        }

    def dispatch(
        self, message: ChannelMessage
    ) -> Coroutine[Any, Any, None] | None:
        """Resolve the command in a channel message.

        Returns:
            The handler coroutine to schedule, or None when the message has no
            registered command or the outbound queue is already full.
        """
        command = extract_command(message.body)
        if command is None:
            return None
        handler = self.handlers.get(command)
        if handler is None:
            return None

        logging.info(highlight(f"> {message.raw_body}", f"!{command}"))
        # A fetched reply that cannot be queued is wasted work.
        if self.limiter.is_full:
            logging.info("⏳ Too many messages queued up. Not sending request for more facts")
            return None
        return handler(message)

    async def reply_with_fact(self, message: ChannelMessage) -> None:
        try:
            fact = await self.fetch_reply()
        except Exception as e:  # noqa: BLE001
            logging.error(f"❌ Fact request for {message.sender} failed: {e}")
            return
        logging.info(f"🥋 Chuck Fact for {message.sender}: {fact}")
        self.limiter.enqueue(
            OutboundItem.for_channel(self.channel, f"{message.sender}: {fact}")
        )
