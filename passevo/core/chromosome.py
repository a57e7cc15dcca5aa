"""Chromosome: one candidate optimisation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from passevo.core.catalog import Catalog
from passevo.utils.validation import DecodeError


@dataclass(frozen=True)
class Chromosome:
    """Ordered, immutable sequence of step ids.

    Equality and hashing are structural, so two chromosomes with the same
    steps share one fitness cache entry. Operators never modify a chromosome
    in place; they return new ones.

    Attributes:
        steps: Step ids in application order
    """

    steps: tuple[str, ...] = ()

    def __init__(self, steps: Iterable[str] = ()) -> None:
        object.__setattr__(self, "steps", tuple(steps))

    @classmethod
    def make_random(cls, catalog: Catalog, length: int, rng) -> "Chromosome":
        """Draw ``length`` steps uniformly with replacement from the catalog."""
        if length < 0:
            raise ValueError("length must be non-negative")
        step_ids = catalog.all_step_ids()
        if length and not step_ids:
            raise ValueError("cannot draw steps from an empty catalog")
        return cls(rng.choice(step_ids) for _ in range(length))

    @classmethod
    def decode(cls, text: str, catalog: Catalog) -> "Chromosome":
        table = catalog.table
        steps = []
        for pos, char in enumerate(text):
            if not table.has_char(char):
                raise DecodeError(
                    "unknown_abbreviation",
                    f"Unknown step abbreviation {char!r} at position {pos}",
                    char=char,
                    position=pos,
                    text=text,
                )
            steps.append(table.to_step(char))
        return cls(steps)

    def encode(self, catalog: Catalog) -> str:
        table = catalog.table
        return "".join(table.to_char(s) for s in self.steps)

    def is_valid_for(self, catalog: Catalog) -> bool:
        return all(s in catalog for s in self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[str]:
        return iter(self.steps)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Chromosome(self.steps[index])
        return self.steps[index]

    def __add__(self, other: "Chromosome") -> "Chromosome":
        return Chromosome(self.steps + tuple(other.steps))

    def __str__(self) -> str:
        return " ".join(self.steps)

    def __repr__(self) -> str:
        return f"Chromosome({list(self.steps)!r})"


EMPTY = Chromosome()


__all__ = ["Chromosome", "EMPTY"]
