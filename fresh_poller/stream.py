"""The externally visible stream of fresh values."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable

from .clock import AsyncioScheduler, Clock, Scheduler, SystemClock
from .fetchers import Fetcher
from .models.cache import CacheEntry
from .models.cycle import Resolution
from .models.settings import Settings
from .orchestrator import FetchOrchestrator
from .retry import FreshnessGate, RetryPolicy
from .segments import validate_window
from .ticker import AlignedTicker

logger = logging.getLogger(__name__)

_UNSET = object()


def _log_pump_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Ticker stopped unexpectedly: %s", exc, exc_info=exc)


class Subscription:
    """State owned by one consumer of ``observe()``.

    All mutation happens on the event loop thread, either while seeding or
    inside the orchestrator's completion callback, so no lock is needed.
    """

    def __init__(self, initial: Any, orchestrator: FetchOrchestrator) -> None:
        self.cache = CacheEntry(value=initial)
        self.orchestrator = orchestrator
        self.queue: asyncio.Queue[Any] = asyncio.Queue()
        self.last_emitted: Any = _UNSET
        self.closed = False

    def emit(self, value: Any) -> None:
        if self.closed or value is None:
            return
        if self.last_emitted is not _UNSET and value == self.last_emitted:
            return
        self.last_emitted = value
        self.queue.put_nowait(value)

    def resolve(self, resolution: Resolution) -> None:
        if self.closed:
            return
        if resolution.fresh:
            self.cache.accept(
                resolution.value,
                updated_at=resolution.evaluated_at,
                generation=resolution.generation,
            )
            logger.info(
                "Accepted fresh value %r (cycle %s, %s retries)",
                resolution.value,
                resolution.generation,
                resolution.attempts,
            )
            self.emit(resolution.value)
        else:
            self.emit(self.cache.value)

    def on_tick(self) -> None:
        self.orchestrator.start_cycle(self.resolve)

    def close(self) -> None:
        self.closed = True
        self.orchestrator.cancel()


class FreshValueStream:
    """Live, deduplicated view of the freshest confirmed upstream reading.

    Usage::

        stream = FreshValueStream(HttpFetcher(url))
        async for value in stream.observe():
            ...

    Each ``observe()`` call is an independent subscription with its own
    cache, seeded with ``initial``. Fetch errors and stale readings never
    reach the consumer; the stream keeps showing the last good value.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
        window_s: int = 600,
        policy: RetryPolicy | None = None,
        initial: Any = 0,
        segment_of: Callable[[Any], int] | None = None,
    ) -> None:
        validate_window(window_s)
        self.fetcher = fetcher
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or AsyncioScheduler()
        self.window_s = window_s
        self.policy = policy or RetryPolicy()
        self.initial = initial
        self.segment_of = segment_of

    @classmethod
    def from_settings(
        cls,
        fetcher: Fetcher,
        settings: Settings,
        *,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
    ) -> FreshValueStream:
        return cls(
            fetcher,
            clock=clock,
            scheduler=scheduler,
            window_s=settings.WINDOW_S,
            policy=RetryPolicy(
                max_retries=settings.MAX_RETRIES, delay_s=settings.RETRY_DELAY_S
            ),
            initial=settings.INITIAL_VALUE,
        )

    def _subscribe(self) -> Subscription:
        gate = FreshnessGate(self.clock, self.window_s, self.segment_of)
        orchestrator = FetchOrchestrator(self.fetcher, gate, self.policy, self.scheduler)
        return Subscription(self.initial, orchestrator)

    async def _pump(self, subscription: Subscription) -> None:
        ticker = AlignedTicker(self.clock, self.scheduler, self.window_s)
        async for _ in ticker.ticks():
            subscription.on_tick()

    async def observe(self) -> AsyncIterator[Any]:
        subscription = self._subscribe()
        subscription.emit(subscription.cache.value)
        pump = asyncio.create_task(self._pump(subscription), name="fresh-value-ticker")
        pump.add_done_callback(_log_pump_exit)
        logger.debug("Subscription started (window=%ss)", self.window_s)
        try:
            while True:
                yield await subscription.queue.get()
        finally:
            pump.cancel()
            subscription.close()
            logger.debug("Subscription closed")


__all__ = ["FreshValueStream", "Subscription"]
