"""Step catalog and chromosome encoding."""

from .catalog import AbbreviationTable, Catalog, Step
from .chromosome import Chromosome

__all__ = [
    'AbbreviationTable',
    'Catalog',
    'Step',
    'Chromosome',
]
