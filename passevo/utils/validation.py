"""Typed errors shared across passevo.

Each error carries a machine-readable ``error_type`` and a ``details`` dict
so callers can collect and report several problems before deciding whether
the run may proceed.
"""

from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Base class for configuration-time problems."""

    def __init__(self, error_type: str, message: str, **details: Any) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_type!r}, {self.message!r})"


class CatalogCollisionError(ValidationError):
    """The catalog cannot be turned into an unambiguous abbreviation table."""


class ConfigError(ValidationError):
    """A search configuration value is out of range or unknown."""


class DecodeError(ValidationError):
    """Text does not decode to a chromosome under the current catalog."""


class EvaluationError(Exception):
    """A fitness metric failed for one chromosome.

    Never crosses the driver boundary: the fitness cache records the failure
    as the worst possible cost.
    """

    def __init__(self, message: str, *, chromosome: Any = None) -> None:
        super().__init__(message)
        self.chromosome = chromosome


FATAL_ERRORS = (CatalogCollisionError, ConfigError)


def raise_first(errors: list[ValidationError]) -> None:
    """Raise the first collected error, if any."""
    if errors:
        raise errors[0]


__all__ = [
    "ValidationError",
    "CatalogCollisionError",
    "ConfigError",
    "DecodeError",
    "EvaluationError",
    "FATAL_ERRORS",
    "raise_first",
]
