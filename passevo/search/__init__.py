"""Generational search driver."""

from .driver import DriverState, GeneticAlgorithm  # noqa: F401
from .history import SearchHistory, SearchResult  # noqa: F401
from .runner import run_search  # noqa: F401

__all__ = [
    'DriverState',
    'GeneticAlgorithm',
    'SearchHistory',
    'SearchResult',
    'run_search',
]
