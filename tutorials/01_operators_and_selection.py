"""
Operators and Selection Tutorial

Goals:
- Apply single-point crossover with explicit and random cut points
- Mutate under a weighted policy
- Pick parents from a ranked population with tournament selection
"""

from passevo.core.catalog import Catalog
from passevo.core.chromosome import Chromosome
from passevo.evolution.operators import MutationPolicy, crossover_at, mutate, single_point_crossover
from passevo.evolution.population import FitnessRecord, Population
from passevo.evolution.selection import TournamentSelection
from passevo.utils.rng_manager import RNGManager


def main():
    rng = RNGManager(seed=42)
    catalog = Catalog([(name, name.lower()) for name in "ABCDXYZ"])

    a = Chromosome.decode("abcd", catalog)
    b = Chromosome.decode("xyz", catalog)

    # Cut a after 2 steps and b after 1: "ab" + "yz"
    print("fixed_cut_child:", crossover_at(a, b, 2, 1).encode(catalog))
    print("random_cut_child:", single_point_crossover(a, b, rng).encode(catalog))

    # Mutation: always fire, never insert
    policy = MutationPolicy(probability=1.0, weights={"insertion": 0.0, "deletion": 1.0, "substitution": 1.0})
    print("mutated:", mutate(a, catalog, policy, rng).encode(catalog))

    # Tournament selection over a ranked population (lower cost first)
    population = Population(FitnessRecord(Chromosome.decode(t, catalog), len(t)) for t in ["abcd", "xy", "z", ""])
    population.rank()
    parent = TournamentSelection(size=2).select(population, rng)
    print("selected_parent:", repr(parent.chromosome.encode(catalog)), "cost:", parent.cost)


if __name__ == "__main__":
    main()
