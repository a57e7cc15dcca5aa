import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from passevo.core.chromosome import Chromosome
from passevo.evolution.population import WORST_COST
from passevo.fitness.cache import FitnessCache
from passevo.utils.validation import EvaluationError


class CountingMetric:
    def __init__(self, delay: float = 0.0, fail_on=None):
        self.calls = 0
        self.delay = delay
        self.fail_on = fail_on or set()
        self._lock = threading.Lock()

    def __call__(self, chromosome):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if chromosome in self.fail_on:
            raise EvaluationError("invalid pipeline", chromosome=chromosome)
        return len(chromosome)


def test_sequential_requests_invoke_metric_once():
    metric = CountingMetric()
    cache = FitnessCache(metric)
    c = Chromosome(["A", "B"])
    assert cache.get_or_compute(c) == 2
    assert cache.get_or_compute(Chromosome(("A", "B"))) == 2
    assert metric.calls == 1
    assert cache.evaluation_count == 1
    assert cache.metrics()["hits"] == 1


def test_concurrent_requests_coalesce_onto_one_evaluation():
    metric = CountingMetric(delay=0.05)
    cache = FitnessCache(metric)
    c = Chromosome(["A", "B", "C"])
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(cache.get_or_compute, [c] * 16))
    assert results == [3] * 16
    assert metric.calls == 1
    metrics = cache.metrics()
    assert metrics["misses"] == 1 and metrics["hits"] == 15


def test_distinct_keys_evaluate_independently_under_concurrency():
    metric = CountingMetric(delay=0.01)
    cache = FitnessCache(metric)
    keys = [Chromosome(["A"] * n) for n in range(6)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(cache.get_or_compute, keys * 3))
    assert results == [0, 1, 2, 3, 4, 5] * 3
    assert metric.calls == 6
    assert len(cache) == 6


def test_failures_are_cached_as_worst_cost():
    bad = Chromosome(["X"])
    metric = CountingMetric(fail_on={bad})
    cache = FitnessCache(metric)
    assert cache.get_or_compute(bad) == WORST_COST
    assert cache.get_or_compute(bad) == WORST_COST
    assert metric.calls == 1
    assert cache.metrics()["failures"] == 1


def test_unexpected_exceptions_are_contained():
    def broken(chromosome):
        raise RuntimeError("compiler crashed")

    cache = FitnessCache(broken)
    assert cache.get_or_compute(Chromosome(["A"])) == WORST_COST


def test_interrupt_propagates_and_is_not_cached():
    calls = []

    def interrupted(chromosome):
        calls.append(chromosome)
        if len(calls) == 1:
            raise KeyboardInterrupt
        return 7

    cache = FitnessCache(interrupted)
    c = Chromosome(["A"])
    with pytest.raises(KeyboardInterrupt):
        cache.get_or_compute(c)
    assert c not in cache
    assert cache.get_or_compute(c) == 7


def test_peek_and_preload():
    metric = CountingMetric()
    cache = FitnessCache(metric)
    c = Chromosome(["A"])
    assert cache.peek(c) is None
    assert cache.preload([(c, 10), (Chromosome(["B"]), None)]) == 1
    assert cache.peek(c) == 10
    assert cache.get_or_compute(c) == 10
    assert metric.calls == 0
    assert cache.evaluation_count == 0


def test_clear_resets_entries_and_counters():
    cache = FitnessCache(CountingMetric())
    cache.get_or_compute(Chromosome())
    cache.clear()
    assert len(cache) == 0
    assert cache.metrics()["misses"] == 0
