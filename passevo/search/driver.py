"""Genetic algorithm driver.

Runs generations of evaluate → rank → reproduce until a stop condition
fires. Selection, crossover, mutation and ranking happen on the calling
thread and draw from one ``RNGManager``; only fitness evaluation may fan out
to a worker pool. Evaluation results are written back by population index,
so a seed reproduces the same generations whatever the worker count.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Iterable

from passevo.config import resolve_config
from passevo.core.catalog import Catalog
from passevo.core.chromosome import EMPTY, Chromosome
from passevo.evolution.operators import CROSSOVER_OPERATORS, MutationPolicy, mutate, truncate
from passevo.evolution.population import FitnessRecord, Population, is_improvement
from passevo.evolution.selection import SelectionStrategy, make_selection
from passevo.fitness.cache import FitnessCache
from passevo.search.history import GenerationRecord, SearchHistory, SearchResult
from passevo.utils.rng_manager import RNGManager
from passevo.utils.validation import ConfigError, DecodeError


class DriverState(Enum):
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    RANKING = "ranking"
    REPRODUCING = "reproducing"
    TERMINATED = "terminated"


STOP_MAX_GENERATIONS = "max_generations"
STOP_MAX_EVALUATIONS = "max_evaluations"
STOP_PLATEAU = "plateau"
STOP_CANCELLED = "cancelled"


class GeneticAlgorithm:
    """Evolves a population of pass sequences toward lower cost.

    Args:
        catalog: Immutable step catalog shared with the metric
        fitness: ``FitnessCache`` or a ``chromosome -> cost`` callable
            (wrapped in a fresh cache)
        config: Overrides merged over ``DEFAULT_CONFIG``
        rng_manager: Random source; defaults to one seeded from ``config['seed']``
        selection: Strategy overriding ``config['selection']``
        cancel_event: Event checked between generations
        initial_population: Encoded strings, chromosomes or fitness records
            placed first in the initial population, e.g. to resume a previous
            run; known record costs are preloaded into the cache
    """

    def __init__(
        self,
        catalog: Catalog,
        fitness: FitnessCache | Callable[[Chromosome], Any],
        config: dict | None = None,
        *,
        rng_manager: RNGManager | None = None,
        selection: SelectionStrategy | None = None,
        cancel_event: threading.Event | None = None,
        initial_population: Iterable[str | Chromosome | FitnessRecord] | None = None,
    ) -> None:
        self.config = resolve_config(config)
        if len(catalog) == 0:
            raise ConfigError("empty_catalog", "Catalog has no steps to search over")
        self.catalog = catalog
        self.cache = fitness if isinstance(fitness, FitnessCache) else FitnessCache(fitness)
        self.rng_manager = rng_manager if rng_manager is not None else RNGManager(self.config['seed'])
        self.selection = selection if selection is not None else make_selection(self.config)
        self.mutation_policy = MutationPolicy.from_config(self.config)
        self.crossover = CROSSOVER_OPERATORS[self.config['crossover']]
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        seeds = list(initial_population or [])
        self._seeds = [self._to_chromosome(item) for item in seeds]
        self.cache.preload(
            (self._seeds[i], item.cost) for i, item in enumerate(seeds) if isinstance(item, FitnessRecord)
        )

        self.state = DriverState.INITIALIZING
        self.generation = 0
        self.population: Population | None = None
        self.best: FitnessRecord | None = None
        self.history = SearchHistory()
        self._generations_without_improvement = 0
        self.stop_reason: str | None = None
        self._pool: ThreadPoolExecutor | None = None

    def _to_chromosome(self, item: str | Chromosome | FitnessRecord) -> Chromosome:
        if isinstance(item, str):
            return Chromosome.decode(item, self.catalog)
        if isinstance(item, FitnessRecord):
            item = item.chromosome
        if not item.is_valid_for(self.catalog):
            unknown = sorted({s for s in item.steps if s not in self.catalog})
            raise DecodeError("unknown_step", f"Seed chromosome uses unknown steps {unknown}", steps=tuple(unknown))
        return item

    # ---------- control ----------

    def cancel(self) -> None:
        """Request a clean stop after the current generation."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> SearchResult:
        """Run generations until a stop condition fires."""
        logging.info(
            f"Starting search: population {self.config['population_size']}, "
            f"elites {self.config['elite_count']}, seed {self.rng_manager.seed}"
        )
        workers = int(self.config['max_workers'])
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="passevo-eval") as pool:
                self._pool = pool
                try:
                    stop_reason = self._loop()
                finally:
                    self._pool = None
        else:
            stop_reason = self._loop()

        result = SearchResult(
            best_chromosome=self.best.chromosome if self.best else None,
            best_cost=self.best.cost if self.best else None,
            generations=len(self.history),
            evaluations=self.cache.evaluation_count,
            stop_reason=stop_reason,
            history=self.history,
        )
        logging.info(
            f"Search finished ({stop_reason}) after {result.generations} generations, "
            f"{result.evaluations} evaluations; best cost {result.best_cost}"
        )
        return result

    def _loop(self) -> str:
        if self.population is None:
            self.population = self._initialize_population()
        while True:
            stop_reason = self.step()
            if stop_reason is not None:
                return stop_reason

    def step(self) -> str | None:
        """Evaluate and rank the current generation, then reproduce.

        Returns the stop reason if the run should end, else None. Once the
        driver has terminated, further calls return the same reason and do
        no work.
        """
        if self.state is DriverState.TERMINATED:
            return self.stop_reason
        if self.population is None:
            self.population = self._initialize_population()

        self.state = DriverState.EVALUATING
        self._evaluate()

        self.state = DriverState.RANKING
        self._rank()

        stop_reason = self._stop_reason()
        if stop_reason is not None:
            self.state = DriverState.TERMINATED
            self.stop_reason = stop_reason
            return stop_reason

        self.state = DriverState.REPRODUCING
        self.population = self._reproduce()
        self.generation += 1
        return None

    # ---------- phases ----------

    def _initialize_population(self) -> Population:
        n = self.config['population_size']
        chromosomes: list[Chromosome] = list(self._seeds[:n])
        if self.config['include_empty_baseline'] and len(chromosomes) < n and EMPTY not in chromosomes:
            chromosomes.append(EMPTY)
        lo, hi = self.config['min_initial_length'], self.config['max_initial_length']
        while len(chromosomes) < n:
            length = self.rng_manager.randint(lo, hi)
            chromosomes.append(Chromosome.make_random(self.catalog, length, self.rng_manager))
        self.generation = 0
        return Population.from_chromosomes(chromosomes)

    def _evaluate(self) -> None:
        indices = self.population.unevaluated_indices()
        if not indices:
            return
        chromosomes = [self.population[i].chromosome for i in indices]
        if self._pool is not None and len(chromosomes) > 1:
            costs = list(self._pool.map(self.cache.get_or_compute, chromosomes))
        else:
            costs = [self.cache.get_or_compute(c) for c in chromosomes]
        for index, cost in zip(indices, costs):
            self.population.set_cost(index, cost)

    def _rank(self) -> None:
        population = self.population
        population.rank()
        leader = population[0]
        if is_improvement(leader.cost, self.best.cost if self.best else None):
            self.best = leader
            self._generations_without_improvement = 0
        else:
            self._generations_without_improvement += 1

        self.history.add(GenerationRecord(
            generation=self.generation,
            best_cost=leader.cost,
            best_chromosome=leader.chromosome.encode(self.catalog),
            mean_cost=population.mean_cost(),
            failures=population.failure_count(),
            evaluations=self.cache.evaluation_count,
            population=[(r.chromosome.encode(self.catalog), r.cost) for r in population],
        ))
        logging.info(
            f"Generation {self.generation}: best {leader.cost} "
            f"({leader.chromosome.encode(self.catalog)!r}), mean {population.mean_cost()}, "
            f"failures {population.failure_count()}"
        )

    def _stop_reason(self) -> str | None:
        if self.cancelled:
            return STOP_CANCELLED
        max_generations = self.config['max_generations']
        if max_generations is not None and self.generation + 1 >= max_generations:
            return STOP_MAX_GENERATIONS
        max_evaluations = self.config['max_evaluations']
        if max_evaluations is not None and self.cache.evaluation_count >= max_evaluations:
            return STOP_MAX_EVALUATIONS
        plateau = self.config['plateau_generations']
        if plateau is not None and self._generations_without_improvement >= plateau:
            return STOP_PLATEAU
        return None

    def _reproduce(self) -> Population:
        """Top-E elites unchanged, then children until the population is full."""
        population = self.population
        n = self.config['population_size']
        rng = self.rng_manager
        next_records: list[FitnessRecord] = list(population.top(self.config['elite_count']))
        for elite in next_records:
            logging.debug(f"  Elite preserved: {elite.chromosome.encode(self.catalog)!r} ({elite.cost})")

        while len(next_records) < n:
            parent1 = self.selection.select(population, rng)
            if self.config['crossover_enabled']:
                parent2 = self.selection.select(population, rng)
                child = self.crossover(parent1.chromosome, parent2.chromosome, rng)
            else:
                child = parent1.chromosome
            child = mutate(child, self.catalog, self.mutation_policy, rng)
            child = truncate(child, self.config['max_chromosome_length'])
            next_records.append(FitnessRecord(child))

        return Population(next_records)


__all__ = [
    "DriverState",
    "GeneticAlgorithm",
    "STOP_MAX_GENERATIONS",
    "STOP_MAX_EVALUATIONS",
    "STOP_PLATEAU",
    "STOP_CANCELLED",
]
