"""Fitness records and the ranked population."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from passevo.core.chromosome import Chromosome

WORST_COST = math.inf


@dataclass(frozen=True)
class FitnessRecord:
    """A chromosome with its cost.

    ``cost`` is None until evaluated; a failed evaluation is stored as
    ``WORST_COST``. Lower is better.
    """

    chromosome: Chromosome
    cost: Any = None

    @property
    def evaluated(self) -> bool:
        return self.cost is not None

    @property
    def failed(self) -> bool:
        return self.cost == WORST_COST

    def with_cost(self, cost: Any) -> "FitnessRecord":
        return FitnessRecord(self.chromosome, cost)


def _rank_key(record: FitnessRecord):
    # Unevaluated records sort after everything, failures included
    if record.cost is None:
        return (1, 0)
    return (0, record.cost)


class Population:
    """Fixed-size collection of fitness records owned by the driver."""

    def __init__(self, records: Iterable[FitnessRecord]) -> None:
        self._records: list[FitnessRecord] = list(records)
        if not self._records:
            raise ValueError("Population cannot be empty")
        self.size = len(self._records)

    @classmethod
    def from_chromosomes(cls, chromosomes: Iterable[Chromosome]) -> "Population":
        return cls(FitnessRecord(c) for c in chromosomes)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FitnessRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> FitnessRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[FitnessRecord, ...]:
        return tuple(self._records)

    def chromosomes(self) -> list[Chromosome]:
        return [r.chromosome for r in self._records]

    def unevaluated_indices(self) -> list[int]:
        return [i for i, r in enumerate(self._records) if r.cost is None]

    def set_cost(self, index: int, cost: Any) -> None:
        self._records[index] = self._records[index].with_cost(cost)

    def rank(self) -> None:
        """Stable ascending sort by cost; ties keep their current order."""
        self._records.sort(key=_rank_key)

    @property
    def best(self) -> FitnessRecord:
        return min(self._records, key=_rank_key)

    def top(self, count: int) -> list[FitnessRecord]:
        return self._records[:count]

    def finite_costs(self) -> list[float]:
        return [r.cost for r in self._records if r.cost is not None and r.cost != WORST_COST]

    def mean_cost(self) -> float | None:
        costs = self.finite_costs()
        if not costs:
            return None
        return sum(costs) / len(costs)

    def failure_count(self) -> int:
        return sum(1 for r in self._records if r.failed)


def is_improvement(new_cost: Any, old_cost: Any) -> bool:
    if new_cost is None:
        return False
    if old_cost is None:
        return True
    return new_cost < old_cost


__all__ = ["WORST_COST", "FitnessRecord", "Population", "is_improvement"]
