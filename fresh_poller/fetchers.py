"""Upstream fetchers.

A fetcher is anything with an ``async fetch()`` returning the latest
reading. Failures are raised; the fetch cycle decides what to do with them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

import httpx

from .errors import TransportFailure

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self) -> Any: ...


def _coerce_reading(payload: Any, field: str | None) -> int:
    if field is not None:
        if not isinstance(payload, dict) or field not in payload:
            raise TransportFailure(f"response has no {field!r} field")
        payload = payload[field]
    if isinstance(payload, bool):
        raise TransportFailure(f"unusable reading: {payload!r}")
    try:
        return int(payload)
    except (TypeError, ValueError) as exc:
        raise TransportFailure(f"unusable reading: {payload!r}") from exc


class HttpFetcher:
    """Fetch an integral reading from a JSON endpoint.

    Args:
        url: Endpoint returning either a bare number or a JSON object.
        field: Key holding the reading when the body is an object.
        timeout: httpx client timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        *,
        field: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.field = field
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> int:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise TransportFailure(f"invalid JSON from {self.url}") from exc
        reading = _coerce_reading(payload, self.field)
        logger.debug("Fetched %s from %s", reading, self.url)
        return reading


class ThreadedFetcher:
    """Adapt a blocking callable (e.g. a ``requests`` call) to the fetcher protocol.

    The callable runs in a worker thread. A cancelled fetch cannot stop the
    thread, but its result is dropped.
    """

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn

    async def fetch(self) -> Any:
        return await asyncio.to_thread(self._fn)


__all__ = ["Fetcher", "HttpFetcher", "ThreadedFetcher"]
