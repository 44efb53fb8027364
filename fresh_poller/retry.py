"""Freshness check and the bounded retry loop of a single fetch cycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .clock import Clock, Scheduler
from .errors import StaleResult
from .fetchers import Fetcher
from .models.cycle import CyclePhase, FetchCycle, Resolution
from .segments import current_segment, validate_window

logger = logging.getLogger(__name__)


class FreshnessGate:
    """Accept a reading only if it is from the current window or later.

    The wall clock is read at evaluation time, not at tick time: a fetch
    started just before a boundary and answered just after it must be
    judged against the new window.
    """

    def __init__(
        self,
        clock: Clock,
        window_s: int,
        segment_of: Callable[[Any], int] | None = None,
    ) -> None:
        validate_window(window_s)
        self.clock = clock
        self.window_s = window_s
        self.segment_of = segment_of or int
        self.last_evaluated_at: float | None = None

    def check(self, value: Any) -> Any:
        now = self.clock.now()
        self.last_evaluated_at = now
        current = current_segment(now, self.window_s)
        segment = self.segment_of(value)
        if segment < current:
            raise StaleResult(value, segment, current)
        return value

    def is_fresh(self, value: Any) -> bool:
        try:
            self.check(value)
        except StaleResult:
            return False
        return True


@dataclass(frozen=True)
class RetryPolicy:
    """How hard one tick tries before falling back to the cache.

    ``max_retries`` counts re-fetches after the first one, so a cycle makes
    at most ``1 + max_retries`` fetches. Stale readings and transport
    failures draw from the same budget.
    """

    max_retries: int = 20
    delay_s: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.delay_s < 0:
            raise ValueError(f"delay_s must be >= 0, got {self.delay_s}")


async def run_cycle(
    cycle: FetchCycle,
    fetcher: Fetcher,
    gate: FreshnessGate,
    policy: RetryPolicy,
    scheduler: Scheduler,
) -> Resolution:
    """Fetch until a fresh reading arrives or the retry budget is spent.

    Never raises for stale readings or fetch errors; an exhausted cycle
    resolves with ``fresh=False`` and no value. Cancellation propagates.
    """
    while True:
        cycle.phase = CyclePhase.FETCHING
        try:
            value = await fetcher.fetch()
            gate.check(value)
        except StaleResult as exc:
            cycle.last_error = exc
            logger.info(
                "Stale reading (attempt %s/%s): %s",
                cycle.attempts + 1,
                policy.max_retries + 1,
                exc,
            )
        except Exception as exc:
            cycle.last_error = exc
            logger.warning(
                "Fetch failed (attempt %s/%s): %s",
                cycle.attempts + 1,
                policy.max_retries + 1,
                exc,
            )
        else:
            cycle.phase = CyclePhase.FRESH
            cycle.last_error = None
            return Resolution(
                generation=cycle.generation,
                value=value,
                fresh=True,
                attempts=cycle.attempts,
                evaluated_at=gate.last_evaluated_at,
            )

        if cycle.attempts >= policy.max_retries:
            cycle.phase = CyclePhase.EXHAUSTED
            logger.warning(
                "No fresh reading after %s attempts; keeping cached value",
                cycle.attempts + 1,
            )
            return Resolution(
                generation=cycle.generation,
                value=None,
                fresh=False,
                attempts=cycle.attempts,
            )

        cycle.attempts += 1
        cycle.phase = CyclePhase.WAITING
        await scheduler.sleep(policy.delay_s)
