"""Seeded random source for the search driver."""

from __future__ import annotations

import random
from typing import Any, Sequence


class RNGManager:
    """Single owned random stream.

    Every stochastic decision of a run (initial chromosomes, cut points,
    mutation sites and operators, parent sampling) draws from this one
    stream, on the driver's thread only. Fitness evaluation never touches it,
    so evaluation order cannot change what a seed produces.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def randrange(self, stop: int) -> int:
        return self._rng.randrange(stop)

    def choice(self, seq: Sequence[Any]) -> Any:
        return self._rng.choice(seq)

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        return self._rng.sample(population, k)

    def weighted_index(self, weights: Sequence[float]) -> int:
        """Roulette pick of an index proportional to ``weights``."""
        total = float(sum(weights))
        if total <= 0:
            return self._rng.randrange(len(weights))
        r = self._rng.random() * total
        cumulative = 0.0
        for idx, w in enumerate(weights):
            cumulative += w
            if r < cumulative:
                return idx
        return len(weights) - 1

    def get_state(self) -> Any:
        return self._rng.getstate()

    def set_state(self, state: Any) -> None:
        self._rng.setstate(state)


__all__ = ["RNGManager"]
