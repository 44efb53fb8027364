"""Per-subscription value cache."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CacheEntry:
    """Last value accepted as fresh, or the seed before any was accepted."""

    value: object | None
    updated_at: float | None = None
    generation: int = 0

    def accept(self, value: object, updated_at: float, generation: int) -> None:
        self.value = value
        self.updated_at = updated_at
        self.generation = generation
