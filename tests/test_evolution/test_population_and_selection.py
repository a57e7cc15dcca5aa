from collections import Counter

import pytest

from passevo.core.chromosome import Chromosome
from passevo.evolution.population import WORST_COST, FitnessRecord, Population
from passevo.evolution.selection import (
    FitnessProportionateSelection,
    RankSelection,
    TournamentSelection,
    UniformSelection,
    make_selection,
)
from passevo.utils.rng_manager import RNGManager


def _ranked_population(costs):
    pop = Population(FitnessRecord(Chromosome(["S"] * i), c) for i, c in enumerate(costs))
    pop.rank()
    return pop


def test_rank_sorts_ascending_and_is_stable():
    records = [
        FitnessRecord(Chromosome(["A"]), 3),
        FitnessRecord(Chromosome(["B"]), 1),
        FitnessRecord(Chromosome(["C"]), 3),
        FitnessRecord(Chromosome(["D"]), WORST_COST),
        FitnessRecord(Chromosome(["E"])),
        FitnessRecord(Chromosome(["F"]), 0),
    ]
    pop = Population(records)
    pop.rank()
    assert [r.chromosome.steps[0] for r in pop] == ["F", "B", "A", "C", "D", "E"]
    assert pop.best.cost == 0
    assert pop.failure_count() == 1
    assert pop.mean_cost() == pytest.approx(7 / 4)


def test_population_keeps_its_size_and_tracks_unevaluated():
    pop = Population.from_chromosomes([Chromosome(), Chromosome(["A"])])
    assert len(pop) == 2 and pop.size == 2
    assert pop.unevaluated_indices() == [0, 1]
    pop.set_cost(1, 4)
    assert pop.unevaluated_indices() == [0]
    assert pop[1].evaluated and not pop[0].evaluated


def test_empty_population_is_rejected():
    with pytest.raises(ValueError):
        Population([])


def test_uniform_selection_covers_every_member():
    pop = _ranked_population([0, 1, 2, 3])
    rng = RNGManager(seed=0)
    seen = Counter(len(UniformSelection().select(pop, rng).chromosome) for _ in range(400))
    assert set(seen) == {0, 1, 2, 3}


def test_rank_selection_favours_fitter_members():
    pop = _ranked_population([0, 10, 20, 30])
    rng = RNGManager(seed=1)
    counts = Counter(RankSelection().select(pop, rng).cost for _ in range(4000))
    assert counts[0] > counts[10] > counts[20] > counts[30] > 0


def test_fitness_proportionate_ignores_failures_and_handles_zero_cost():
    pop = _ranked_population([0, 1, WORST_COST])
    rng = RNGManager(seed=2)
    counts = Counter(FitnessProportionateSelection().select(pop, rng).cost for _ in range(2000))
    assert counts[WORST_COST] == 0
    assert counts[0] > counts[1] > 0


def test_fitness_proportionate_falls_back_to_uniform_when_all_failed():
    pop = _ranked_population([WORST_COST, WORST_COST])
    rng = RNGManager(seed=2)
    picks = {id(FitnessProportionateSelection().select(pop, rng)) for _ in range(50)}
    assert len(picks) == 2


def test_tournament_of_full_size_always_returns_best():
    pop = _ranked_population([5, 0, 9, 2])
    rng = RNGManager(seed=3)
    strategy = TournamentSelection(size=10)
    assert all(strategy.select(pop, rng).cost == 0 for _ in range(20))


def test_tournament_of_size_one_is_uniform():
    pop = _ranked_population([0, 1, 2])
    rng = RNGManager(seed=4)
    seen = {TournamentSelection(size=1).select(pop, rng).cost for _ in range(100)}
    assert seen == {0, 1, 2}


def test_make_selection_from_config():
    strategy = make_selection({"selection": "tournament", "tournament_size": 5})
    assert isinstance(strategy, TournamentSelection) and strategy.size == 5
    assert isinstance(make_selection({"selection": "rank"}), RankSelection)
    with pytest.raises(ValueError):
        TournamentSelection(size=0)


def test_fitness_proportionate_favours_fitter_members_with_negative_costs():
    pop = _ranked_population([-10, -1])
    rng = RNGManager(seed=3)
    counts = Counter(FitnessProportionateSelection().select(pop, rng).cost for _ in range(4000))
    assert counts[-10] > 2 * counts[-1] > 0
