"""Parent selection strategies over a ranked population.

Every strategy exposes ``select(population, rng) -> FitnessRecord`` and
expects the population to be ranked (best first).
"""

from __future__ import annotations

from passevo.evolution.population import WORST_COST, FitnessRecord, Population


class SelectionStrategy:
    name = "base"

    def select(self, population: Population, rng) -> FitnessRecord:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class UniformSelection(SelectionStrategy):
    """Any member with equal probability."""

    name = "uniform"

    def select(self, population: Population, rng) -> FitnessRecord:
        return population[rng.randrange(len(population))]


class RankSelection(SelectionStrategy):
    """Linear rank weighting: the best of N weighs N, the worst weighs 1.

    Weights depend only on position, so zero or infinite costs need no
    special handling.
    """

    name = "rank"

    def select(self, population: Population, rng) -> FitnessRecord:
        n = len(population)
        weights = [float(n - i) for i in range(n)]
        return population[rng.weighted_index(weights)]


class FitnessProportionateSelection(SelectionStrategy):
    """Roulette over ``1 / (1 + cost - floor)``.

    ``floor`` is the lowest finite cost when that is negative, else 0, so
    negative costs still favour the fitter member. Failed and unevaluated
    members weigh 0. If every weight is 0 the pick is uniform.
    """

    name = "fitness_proportionate"

    def select(self, population: Population, rng) -> FitnessRecord:
        floor = min(0.0, min(population.finite_costs(), default=0.0))
        weights = []
        for record in population:
            if record.cost is None or record.cost == WORST_COST:
                weights.append(0.0)
            else:
                weights.append(1.0 / (1.0 + float(record.cost) - floor))
        return population[rng.weighted_index(weights)]


class TournamentSelection(SelectionStrategy):
    """Sample ``size`` members without replacement and keep the best."""

    name = "tournament"

    def __init__(self, size: int = 3) -> None:
        if size < 1:
            raise ValueError("tournament size must be at least 1")
        self.size = size

    def select(self, population: Population, rng) -> FitnessRecord:
        k = min(self.size, len(population))
        indices = rng.sample(range(len(population)), k)
        # Population is ranked, so the lowest index is the fittest
        return population[min(indices)]

    def __repr__(self) -> str:
        return f"TournamentSelection(size={self.size})"


SELECTION_STRATEGIES = {
    UniformSelection.name: UniformSelection,
    RankSelection.name: RankSelection,
    FitnessProportionateSelection.name: FitnessProportionateSelection,
    TournamentSelection.name: TournamentSelection,
}


def make_selection(config: dict) -> SelectionStrategy:
    name = str(config.get("selection", "tournament"))
    if name == TournamentSelection.name:
        return TournamentSelection(int(config.get("tournament_size", 3)))
    return SELECTION_STRATEGIES[name]()


__all__ = [
    "SelectionStrategy",
    "UniformSelection",
    "RankSelection",
    "FitnessProportionateSelection",
    "TournamentSelection",
    "SELECTION_STRATEGIES",
    "make_selection",
]
