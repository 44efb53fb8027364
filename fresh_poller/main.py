"""Entrypoint for watching an upstream endpoint from the command line.

This module wires configuration, the HTTP fetcher and the value stream,
and logs every value the stream emits until interrupted.
"""

from __future__ import annotations

import asyncio
import logging

from . import config
from .fetchers import HttpFetcher
from .logger import setup_logging
from .stream import FreshValueStream

logger = logging.getLogger(__name__)


def build_stream() -> FreshValueStream:
    if config.FETCH_URL is None:
        raise RuntimeError("FRESH_FETCH_URL environment variable is not set")

    fetcher = HttpFetcher(
        config.FETCH_URL,
        field=config.FETCH_FIELD,
        timeout=config.FETCH_TIMEOUT_S,
    )
    return FreshValueStream.from_settings(fetcher, config.settings)


async def watch(stream: FreshValueStream) -> None:
    async for value in stream.observe():
        logger.info("Current value: %s", value)


def run() -> None:
    setup_logging()
    config.validate_settings()
    logger.info(
        "Starting fresh_poller (window=%ss, retries=%s every %ss)",
        config.WINDOW_S,
        config.MAX_RETRIES,
        config.RETRY_DELAY_S,
    )
    stream = build_stream()
    try:
        asyncio.run(watch(stream))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    run()
