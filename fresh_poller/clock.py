"""Wall clock and timer ports with their production adapters.

The wall clock decides *which* window we are in; the scheduler decides
*when* the next thing happens. They are injected separately so tests can
move one without the other.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Return wall-clock time as epoch seconds."""
        ...


class Scheduler(Protocol):
    def monotonic(self) -> float:
        """Return the scheduler's own timeline reading in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for ``seconds``. Must be cancelable."""
        ...


class SystemClock:
    def now(self) -> float:
        return time.time()


class AsyncioScheduler:
    """Scheduler backed by the running event loop's timer."""

    def monotonic(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


__all__ = ["AsyncioScheduler", "Clock", "Scheduler", "SystemClock"]
