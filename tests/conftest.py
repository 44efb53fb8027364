"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import asyncio
import heapq
from typing import Any

import pytest

# Enough loop turns for a woken task to fetch, resolve and reach the consumer.
_SETTLE_TURNS = 50


async def settle() -> None:
    for _ in range(_SETTLE_TURNS):
        await asyncio.sleep(0)


class FakeClock:
    """Wall clock that only moves when a test says so."""

    def __init__(self, now: float = 0.0) -> None:
        self._now = now

    def now(self) -> float:
        return self._now

    def set(self, now: float) -> None:
        self._now = now


class VirtualScheduler:
    """Scheduler on a virtual timeline advanced explicitly by tests."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._seq = 0
        self._sleepers: list[tuple[float, int, asyncio.Future]] = []

    def monotonic(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        self._seq += 1
        heapq.heappush(self._sleepers, (self._now + max(0.0, seconds), self._seq, fut))
        await fut

    @property
    def pending(self) -> int:
        return sum(1 for _, _, fut in self._sleepers if not fut.done())

    async def advance(self, seconds: float) -> None:
        target = self._now + seconds
        await settle()
        while self._sleepers and self._sleepers[0][0] <= target:
            when, _, fut = heapq.heappop(self._sleepers)
            if fut.done():
                continue
            self._now = when
            fut.set_result(None)
            await settle()
        self._now = target
        await settle()


class LinkedClock:
    """Wall clock that follows a virtual scheduler from a given epoch."""

    def __init__(self, scheduler: VirtualScheduler, epoch: float = 0.0) -> None:
        self.scheduler = scheduler
        self.epoch = epoch

    def now(self) -> float:
        return self.epoch + self.scheduler.monotonic()


class ScriptedFetcher:
    """Fetcher returning ``response`` (or raising ``error``) on every call."""

    def __init__(self, response: Any = 0) -> None:
        self.response = response
        self.error: Exception | None = None
        self.calls = 0

    async def fetch(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.response


class BlockingFetcher:
    """Fetcher whose calls stay pending until the test resolves them."""

    def __init__(self) -> None:
        self.pending: list[asyncio.Future] = []
        self.cancelled = 0

    async def fetch(self) -> Any:
        fut = asyncio.get_running_loop().create_future()
        self.pending.append(fut)
        try:
            return await fut
        except asyncio.CancelledError:
            self.cancelled += 1
            raise


class Collector:
    """Consume a stream in a background task and record what it emits."""

    def __init__(self, stream) -> None:
        self.stream = stream
        self.values: list[Any] = []
        self._task: asyncio.Task | None = None

    async def start(self) -> Collector:
        self._task = asyncio.create_task(self._consume())
        await settle()
        return self

    async def _consume(self) -> None:
        async for value in self.stream.observe():
            self.values.append(value)

    @property
    def latest(self) -> Any:
        return self.values[-1] if self.values else None

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        await settle()


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> ScriptedFetcher:
    return ScriptedFetcher()
