"""Latest-wins execution of fetch cycles."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .clock import Scheduler
from .fetchers import Fetcher
from .models.cycle import CyclePhase, FetchCycle, Resolution
from .retry import FreshnessGate, RetryPolicy, run_cycle

logger = logging.getLogger(__name__)


class FetchOrchestrator:
    """Run at most one fetch cycle at a time; a new tick preempts the old one.

    Every cycle carries a generation number. A completion is delivered only
    if its generation is still the current one, so a slow, superseded fetch
    can never overwrite the result of a newer one.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        gate: FreshnessGate,
        policy: RetryPolicy,
        scheduler: Scheduler,
    ) -> None:
        self.fetcher = fetcher
        self.gate = gate
        self.policy = policy
        self.scheduler = scheduler
        self.generation = 0
        self.active: FetchCycle | None = None
        self._task: asyncio.Task | None = None

    def start_cycle(self, on_resolved: Callable[[Resolution], None]) -> FetchCycle:
        self.cancel()
        self.generation += 1
        cycle = FetchCycle(generation=self.generation)
        self.active = cycle
        self._task = asyncio.create_task(
            self._run(cycle, on_resolved), name=f"fetch-cycle-{cycle.generation}"
        )
        return cycle

    def cancel(self) -> None:
        task = self._task
        cycle = self.active
        if task is not None and not task.done():
            task.cancel()
            if cycle is not None and not cycle.resolved:
                cycle.phase = CyclePhase.CANCELLED
                logger.debug(
                    "Cancelled fetch cycle %s after %s retries",
                    cycle.generation,
                    cycle.attempts,
                )
        self._task = None

    async def _run(self, cycle: FetchCycle, on_resolved: Callable[[Resolution], None]) -> None:
        resolution = await run_cycle(
            cycle, self.fetcher, self.gate, self.policy, self.scheduler
        )
        if resolution.generation != self.generation:
            logger.debug("Dropping result of superseded cycle %s", resolution.generation)
            return
        self.active = None
        self._task = None
        on_resolved(resolution)
