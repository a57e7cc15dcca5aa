"""Step catalog and abbreviation table.

The catalog is built once at startup from the compiler tooling's list of
``(step_id, abbreviation, handle)`` triples and then passed by reference to
every component that needs it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from passevo.utils.validation import CatalogCollisionError, ValidationError, raise_first


@dataclass(frozen=True)
class Step:
    step_id: str
    abbreviation: str
    handle: Any = None


COMMENT_CHAR = "#"


def _is_valid_abbreviation(char: Any) -> bool:
    # "#" starts a comment line in text seed files
    return (
        isinstance(char, str) and len(char) == 1 and char.isprintable()
        and not char.isspace() and char != COMMENT_CHAR
    )


class AbbreviationTable:
    """Bijection between step ids and single printable characters."""

    def __init__(self, steps: Iterable[Step]) -> None:
        errors: list[ValidationError] = []
        self._to_char: dict[str, str] = {}
        self._to_step: dict[str, str] = {}
        for step in steps:
            if not _is_valid_abbreviation(step.abbreviation):
                errors.append(CatalogCollisionError(
                    "invalid_abbreviation",
                    f"Step {step.step_id!r} has invalid abbreviation {step.abbreviation!r}",
                    step_id=step.step_id,
                    abbreviation=step.abbreviation,
                ))
                continue
            if step.step_id in self._to_char:
                errors.append(CatalogCollisionError(
                    "duplicate_step",
                    f"Step {step.step_id!r} listed more than once",
                    step_id=step.step_id,
                ))
                continue
            other = self._to_step.get(step.abbreviation)
            if other is not None:
                errors.append(CatalogCollisionError(
                    "abbreviation_collision",
                    f"Steps {other!r} and {step.step_id!r} share abbreviation {step.abbreviation!r}",
                    abbreviation=step.abbreviation,
                    steps=(other, step.step_id),
                ))
                continue
            self._to_char[step.step_id] = step.abbreviation
            self._to_step[step.abbreviation] = step.step_id
        self.errors = errors

    def to_char(self, step_id: str) -> str:
        return self._to_char[step_id]

    def to_step(self, char: str) -> str:
        return self._to_step[char]

    def has_char(self, char: str) -> bool:
        return char in self._to_step


class Catalog:
    """Immutable table of available optimisation steps.

    Raises CatalogCollisionError on construction if the abbreviation table
    would be ambiguous; use ``Catalog.validate`` to collect every problem
    without raising.
    """

    __slots__ = ("_steps", "_by_id", "_step_ids", "_table")

    def __init__(self, steps: Iterable[Step | tuple]) -> None:
        normalized = tuple(s if isinstance(s, Step) else Step(*s) for s in steps)
        table = AbbreviationTable(normalized)
        raise_first(table.errors)
        object.__setattr__(self, "_steps", normalized)
        object.__setattr__(self, "_by_id", {s.step_id: s for s in normalized})
        object.__setattr__(self, "_step_ids", tuple(s.step_id for s in normalized))
        object.__setattr__(self, "_table", table)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Catalog is immutable")

    @staticmethod
    def validate(steps: Iterable[Step | tuple], collect_errors: list | None = None) -> bool:
        normalized = [s if isinstance(s, Step) else Step(*s) for s in steps]
        table = AbbreviationTable(normalized)
        if collect_errors is not None:
            collect_errors.extend(table.errors)
        return not table.errors

    @property
    def table(self) -> AbbreviationTable:
        return self._table

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    def all_step_ids(self) -> tuple[str, ...]:
        return self._step_ids

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._by_id

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)

    def step(self, step_id: str) -> Step:
        return self._by_id[step_id]

    def handles_for(self, chromosome) -> list[Any]:
        """Transform handles in application order, for the fitness metric."""
        return [self._by_id[s].handle for s in chromosome.steps]

    def __repr__(self) -> str:
        abbrevs = "".join(s.abbreviation for s in self._steps)
        return f"Catalog({len(self._steps)} steps: {abbrevs!r})"


__all__ = ["Step", "AbbreviationTable", "Catalog", "COMMENT_CHAR"]
