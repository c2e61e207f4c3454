"""Reconnect backoff state shared by the session and its connection."""

from __future__ import annotations

import logging

from ..constants import RECONNECT_BASE_DELAY, RECONNECT_MAX_DELAY


class ReconnectBackoff:
    """Exponential wait between consecutive failed connection attempts.

    The first attempt of a cycle is immediate. Each failure then waits the
    base delay, doubled once per earlier failure in the same cycle. A
    ``max_delay`` of 0 leaves the growth uncapped.
    """

    def __init__(
        self,
        base_delay: float = RECONNECT_BASE_DELAY,
        max_delay: float = RECONNECT_MAX_DELAY,
    ) -> None:
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._delay = 0.0
        self._failures = 0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def failures(self) -> int:
        return self._failures

    def reset(self) -> None:
        if self._delay > 0:
            logging.debug("♻️ Reconnect backoff reset")
        self._delay = 0.0
        self._failures = 0

    def advance(self) -> float:
        """Record one failed attempt and return the wait before the next one."""
        self._failures += 1
        if self._delay == 0:
            new_delay = self.base_delay
        else:
            new_delay = self._delay * 2
        if self.max_delay > 0:
            new_delay = min(new_delay, self.max_delay)
        self._delay = new_delay
        return self._delay
