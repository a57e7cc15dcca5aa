"""Per-generation bookkeeping for a search run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from passevo.core.chromosome import Chromosome


@dataclass
class GenerationRecord:
    generation: int
    best_cost: Any
    best_chromosome: str
    mean_cost: float | None
    failures: int
    evaluations: int
    population: list[tuple[str, Any]] = field(default_factory=list)


@dataclass
class SearchHistory:
    """Tracks how the population evolves across generations."""

    generations: list[GenerationRecord] = field(default_factory=list)

    def add(self, record: GenerationRecord) -> None:
        self.generations.append(record)

    def best_costs(self) -> list[Any]:
        return [g.best_cost for g in self.generations]

    def populations(self) -> list[list[tuple[str, Any]]]:
        return [list(g.population) for g in self.generations]

    def __len__(self) -> int:
        return len(self.generations)


@dataclass
class SearchResult:
    best_chromosome: Chromosome | None
    best_cost: Any
    generations: int
    evaluations: int
    stop_reason: str
    history: SearchHistory = field(default_factory=SearchHistory)


__all__ = ["GenerationRecord", "SearchHistory", "SearchResult"]
