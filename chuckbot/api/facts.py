"""Thin asynchronous client for the Chuck Norris facts API.

The session only ever sees ``fetch_fact`` as an opaque reply source: an
awaitable returning a short string or raising.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from ..constants import FACT_API_URL, FACT_FETCH_TIMEOUT
from ..errors.internal import NetworkError, ParsingError

ReplyFetcher = Callable[[], Awaitable[str]]


class FactClient:
    """Asynchronous client for the random fact endpoint.

    Attributes:
        url: Endpoint returning a JSON object with a ``value`` field.
        timeout: Total time allowed for one request, in seconds.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        url: str = FACT_API_URL,
        timeout: float = FACT_FETCH_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            session: The aiohttp session to use for requests.
            url: Fact endpoint URL.
            timeout: Total request timeout in seconds.

        Raises:
            ValueError: If session is not provided.
        """
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch_fact(self) -> str:
        """Fetch one random fact.

        Returns:
            The fact text.

        Raises:
            NetworkError: If the request fails, times out or returns a non-200 status.
            ParsingError: If the body is not JSON or has no usable ``value``.
        """
        try:
            async with self._session.get(self.url, timeout=self.timeout) as resp:
                logging.debug(f"Fact API response: status={resp.status}, url={self.url}")
                if resp.status != 200:
                    raise NetworkError(
                        f"FetchFact: unexpected HTTP status {resp.status}",
                        data={"status": resp.status},
                    )
                data: Any = await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(f"FetchFact: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise ParsingError(f"FetchFact: invalid JSON body: {e}") from e
        return self._extract_value(data)

    @staticmethod
    def _extract_value(data: Any) -> str:
        value = data.get("value") if isinstance(data, dict) else None
        if not isinstance(value, str) or not value.strip():
            raise ParsingError("FetchFact: response has no 'value'")
        return value.strip()
