"""Fetch cycle state dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CyclePhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    WAITING = "waiting"
    FRESH = "fresh"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class FetchCycle:
    """Working state of the fetch/retry loop started by one tick."""

    generation: int
    attempts: int = 0
    phase: CyclePhase = CyclePhase.IDLE
    last_error: Exception | None = None

    @property
    def resolved(self) -> bool:
        return self.phase in (CyclePhase.FRESH, CyclePhase.EXHAUSTED, CyclePhase.CANCELLED)


@dataclass(frozen=True)
class Resolution:
    generation: int
    value: object | None
    fresh: bool
    attempts: int
    evaluated_at: float | None = None
