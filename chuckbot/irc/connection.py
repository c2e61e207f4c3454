"""Connection handling for the chat server (packaged).

Owns the TLS stream for one connection at a time. ``connect`` only returns
once a connection exists; failed attempts are retried forever with the
session's exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_never,
)

from ..constants import (
    ASYNC_IRC_CONNECT_TIMEOUT,
    IRC_MAX_LINE_BYTES,
    IRC_READ_LIMIT_BYTES,
)
from ..errors.internal import NetworkError
from ..rate.backoff_strategy import ReconnectBackoff


class IRCConnection:  # pylint: disable=too-many-instance-attributes
    """Line-oriented transport to the chat server."""

    def __init__(
        self,
        server: str,
        port: int,
        *,
        backoff: ReconnectBackoff | None = None,
        use_tls: bool = True,
        connect_timeout: float = ASYNC_IRC_CONNECT_TIMEOUT,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.server = server
        self.port = port
        self.backoff = backoff or ReconnectBackoff()
        self.use_tls = use_tls
        self.connect_timeout = connect_timeout
        self._sleep = sleep
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None

    @property
    def address(self) -> str:
        return f"{self.server}:{self.port}"

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """Open the transport, retrying with exponential backoff until it succeeds."""
        logging.info(f"🔌 Establishing connection to {self.address}...")
        retrying = AsyncRetrying(
            stop=stop_never,
            wait=self._next_wait,
            retry=retry_if_exception_type((OSError, TimeoutError)),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        await retrying(self._open)
        logging.info(f"✅ Connected to {self.address}")

    async def _open(self) -> None:
        ssl_context = ssl.create_default_context() if self.use_tls else None
        self.reader, self.writer = await asyncio.wait_for(
            asyncio.open_connection(
                self.server, self.port, ssl=ssl_context, limit=IRC_READ_LIMIT_BYTES
            ),
            timeout=self.connect_timeout,
        )

    def _next_wait(self, retry_state: RetryCallState) -> float:  # noqa: ARG002
        return self.backoff.advance()

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logging.warning(
            f"⚠️ Connection to {self.address} failed ({type(error).__name__}: {error}), "
            f"trying again in {wait:.1f}s (attempt {retry_state.attempt_number})"
        )

    async def authenticate(self, token: str, bot_name: str) -> None:
        logging.info(f"🔐 Authenticating {bot_name}...")
        await self.write_raw("PASS", token)
        await self.write_raw("NICK", bot_name)
        logging.info(f"🔐 Authentication sent for {bot_name}")

    async def enable_extended_capabilities(self) -> None:
        # Without this capability whispers and channel notices never arrive.
        await self.write_raw("CAP REQ", ":twitch.tv/commands")
        logging.debug("🧩 Requested twitch.tv/commands capability")

    async def join_channel(self, channel: str) -> None:
        channel = channel.lstrip("#")
        logging.info(f"🚪 Joining channel #{channel}...")
        await self.write_raw("JOIN", f"#{channel}")

    async def pong(self) -> None:
        await self.write_raw("PONG", ":tmi.twitch.tv")
        logging.debug("🏓 Returned PONG")

    async def write_raw(self, command: str, message: str) -> bool:
        """Write ``"<command> <message>\\r\\n"`` as a single transport write.

        Lines over the protocol limit are dropped, never truncated. Transport
        errors are logged and swallowed; a dead connection surfaces through
        the next read instead.

        Returns:
            True if the line was handed to the transport.
        """
        payload = f"{command} {message}\r\n".encode()
        if len(payload) > IRC_MAX_LINE_BYTES:
            logging.warning(
                f"⚠️ Dropping {command} line of {len(payload)} bytes (limit {IRC_MAX_LINE_BYTES})"
            )
            return False
        if self.writer is None:
            logging.warning(f"⚠️ Cannot send {command}: not connected to {self.address}")
            return False
        try:
            self.writer.write(payload)
            await self.writer.drain()
        except (OSError, RuntimeError) as e:
            logging.warning(f"⚠️ Failed to write {command} to {self.address}: {e}")
            return False
        return True

    async def read_line(self) -> str:
        """Return the next line without its terminator.

        A line over the read limit is discarded and returned as an empty
        string, which parses as unrecognized input.

        Raises:
            NetworkError: If the stream is closed or reading fails.
        """
        if self.reader is None:
            raise NetworkError(f"Not connected to {self.address}")
        try:
            raw = await self.reader.readline()
        except ValueError as e:
            logging.warning(
                f"⚠️ Skipping line over {IRC_READ_LIMIT_BYTES} bytes from {self.address}: {e}"
            )
            return ""
        except OSError as e:
            raise NetworkError(f"Failed to read line from {self.address}: {e}") from e
        if not raw:
            raise NetworkError(f"Connection to {self.address} closed by server")
        return raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def disconnect(self) -> None:
        writer = self.writer
        self.writer = None
        self.reader = None
        if writer is None:
            return
        logging.info(f"🔌 Disconnecting from {self.server}")
        try:
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            logging.debug(f"Error while closing connection to {self.address}: {e}")
        logging.info(f"🔌 Closed connection to {self.server}")
