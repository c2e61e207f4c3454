"""Throttled outbound chat queue.

Producers enqueue fully formatted ``OutboundItem``s without ever blocking; a
single drain task writes them in FIFO order. The time of the last write is kept
on the limiter itself, so the spacing holds across drain restarts (reconnects)
and the server's per-account send budget is never exceeded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..constants import CHAT_SEND_INTERVAL_SECONDS, OUTBOUND_QUEUE_CAPACITY
from ..irc.models import OutboundItem


class OutboundLimiter:
    """Bounded FIFO of outbound chat lines drained at a fixed rate.

    Attributes:
        capacity: Maximum number of pending items.
        interval: Minimum seconds between two writes, across drain restarts.
    """

    def __init__(
        self,
        write: Callable[[OutboundItem], Awaitable[Any]],
        *,
        capacity: int = OUTBOUND_QUEUE_CAPACITY,
        interval: float = CHAT_SEND_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the limiter.

        Args:
            write: Coroutine function that puts one item on the wire.
            capacity: Queue capacity; enqueues beyond it are dropped.
            interval: Minimum spacing between two writes, in seconds.
        """
        self._write = write
        self.capacity = capacity
        self.interval = interval
        self._queue: asyncio.Queue[OutboundItem] = asyncio.Queue(maxsize=capacity)
        self._task: asyncio.Task[None] | None = None
        self._last_write: float | None = None

    @property
    def depth(self) -> int:
        return self._queue.qsize()

    @property
    def is_full(self) -> bool:
        return self._queue.full()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, item: OutboundItem) -> bool:
        """Queue an item without blocking.

        Returns:
            True if the item was queued, False if it was dropped because the
            queue is at capacity.
        """
        try:
            self._queue.put_nowait(item)
        except asyncio.QueueFull:
            logging.warning(
                f"⚠️ Outbound queue full ({self.capacity}), dropping message to {item.destination}"
            )
            return False
        logging.debug(f"📥 Queued message to {item.destination} depth={self.depth}")
        return True

    def start(self) -> None:
        """Start the drain task if it is not already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._drain(), name="outbound-drain")
        logging.debug("▶️ Started outbound drain")

    async def stop(self) -> None:
        """Cancel the drain task and wait until it no longer touches the transport."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logging.debug(f"⏹️ Stopped outbound drain pending={self.depth}")

    async def _wait_for_slot(self) -> None:
        if self._last_write is None:
            return
        loop = asyncio.get_running_loop()
        remaining = self.interval - (loop.time() - self._last_write)
        if remaining > 0:
            await asyncio.sleep(remaining)

    async def _drain(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            # Wait before taking an item so a cancelled drain never loses one.
            await self._wait_for_slot()
            item = await self._queue.get()
            try:
                await self._write(item)
            except Exception as e:  # noqa: BLE001
                logging.error(f"❌ Failed to send queued message to {item.destination}: {e}")
            finally:
                self._last_write = loop.time()
                self._queue.task_done()
