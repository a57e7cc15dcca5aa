"""Shared utilities: random source, typed errors, run reports."""

from .rng_manager import RNGManager
from .validation import (
    CatalogCollisionError,
    ConfigError,
    DecodeError,
    EvaluationError,
    ValidationError,
)

__all__ = [
    'RNGManager',
    'CatalogCollisionError',
    'ConfigError',
    'DecodeError',
    'EvaluationError',
    'ValidationError',
]
