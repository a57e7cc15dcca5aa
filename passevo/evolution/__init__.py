"""Genetic operators, population and selection."""

from .operators import (
    CROSSOVER_OPERATORS,
    MutationPolicy,
    crossover_at,
    mutate,
    single_point_crossover,
)
from .population import WORST_COST, FitnessRecord, Population
from .selection import (
    SELECTION_STRATEGIES,
    FitnessProportionateSelection,
    RankSelection,
    SelectionStrategy,
    TournamentSelection,
    UniformSelection,
)
from .serialization import load_population, save_population

__all__ = [
    "CROSSOVER_OPERATORS",
    "MutationPolicy",
    "crossover_at",
    "mutate",
    "single_point_crossover",
    "WORST_COST",
    "FitnessRecord",
    "Population",
    "SELECTION_STRATEGIES",
    "FitnessProportionateSelection",
    "RankSelection",
    "SelectionStrategy",
    "TournamentSelection",
    "UniformSelection",
    "load_population",
    "save_population",
]
