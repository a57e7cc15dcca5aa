"""
Determinism & Resume Tutorial

Goals:
- Run the same seeded search twice and compare determinism signatures
- Save the final population and resume a run from it
"""

import tempfile
from pathlib import Path

from passevo.core.catalog import Catalog
from passevo.core.chromosome import Chromosome
from passevo.evolution.population import FitnessRecord
from passevo.evolution.serialization import load_population, save_population
from passevo.fitness.cache import FitnessCache
from passevo.search.driver import GeneticAlgorithm
from passevo.utils.observability import consolidated_report, determinism_signature


def cost(chromosome):
    return abs(len(chromosome) - 3) + chromosome.steps.count("Loop")


def main():
    catalog = Catalog([("Inline", "i"), ("Loop", "l"), ("Fold", "f"), ("Prune", "p")])
    config = {'population_size': 10, 'max_generations': 8, 'seed': 7}

    signatures = []
    for _ in range(2):
        cache = FitnessCache(cost)
        result = GeneticAlgorithm(catalog, cache, config).run()
        signatures.append(determinism_signature(consolidated_report(result, catalog, config)))
    print('signatures_equal:', signatures[0] == signatures[1])

    # Persist the last generation, then resume from it with known costs preloaded
    last = result.history.generations[-1].population
    with tempfile.TemporaryDirectory() as tmp:
        path = save_population(
            Path(tmp) / 'population.json',
            [FitnessRecord(Chromosome.decode(text, catalog), c) for text, c in last],
            catalog,
        )
        seeds = load_population(path, catalog)

    cache = FitnessCache(cost)
    resumed = GeneticAlgorithm(catalog, cache, dict(config, seed=8), initial_population=seeds).run()
    print('resumed_best:', resumed.best_chromosome.encode(catalog), 'cost:', resumed.best_cost)
    print('cache_metrics:', cache.metrics())


if __name__ == '__main__':
    main()
