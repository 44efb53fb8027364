"""Ticks aligned to the window boundaries of the wall-clock hour."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from .clock import Clock, Scheduler
from .segments import validate_window, segment_and_remainder

logger = logging.getLogger(__name__)


class AlignedTicker:
    """Recurring tick source: now, then every window boundary.

    The first tick fires on activation. If activation is mid-window the
    ticker sleeps until the next boundary and fires again; from there it
    fires every ``window_s`` seconds. Boundaries come from the wall clock
    (top of the hour), never from the activation time.
    """

    def __init__(self, clock: Clock, scheduler: Scheduler, window_s: int) -> None:
        validate_window(window_s)
        self.clock = clock
        self.scheduler = scheduler
        self.window_s = window_s

    async def _sleep_until(self, deadline: float) -> None:
        delay = deadline - self.scheduler.monotonic()
        if delay > 0:
            await self.scheduler.sleep(delay)

    async def ticks(self) -> AsyncIterator[None]:
        position = segment_and_remainder(self.clock.now(), self.window_s)
        logger.debug(
            "Ticker activated in segment %s, %ss to boundary",
            position.segment,
            position.seconds_to_boundary,
        )
        # Deadlines are fixed up front so a slow consumer cannot drift the grid.
        boundary = self.scheduler.monotonic() + position.seconds_to_boundary
        yield None

        if position.seconds_to_boundary:
            await self._sleep_until(boundary)
            logger.debug("Ticker aligned to window boundary")
            yield None

        count = 0
        while True:
            count += 1
            await self._sleep_until(boundary + count * self.window_s)
            yield None
