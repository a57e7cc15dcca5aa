"""Content-keyed fitness cache with in-flight coalescing.

Each distinct chromosome is evaluated at most once per run. A caller that
misses becomes the owner of a ``Future`` and runs the metric; callers that
arrive while the evaluation is in flight wait on the same future instead of
issuing duplicate work. Failures are stored as ``WORST_COST``.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from passevo.core.chromosome import Chromosome
from passevo.evolution.population import WORST_COST


@dataclass
class CacheMetrics:
    hits: int = 0
    misses: int = 0
    failures: int = 0
    coalesced: int = 0
    preloaded: int = 0


class FitnessCache:
    """Memoizes ``metric(chromosome) -> cost`` by chromosome content."""

    def __init__(self, metric: Callable[[Chromosome], Any]) -> None:
        self._metric = metric
        self._lock = threading.Lock()
        self._entries: dict[Chromosome, Future] = {}
        self._metrics = CacheMetrics()

    def get_or_compute(self, chromosome: Chromosome) -> Any:
        with self._lock:
            future = self._entries.get(chromosome)
            owner = future is None
            if owner:
                future = Future()
                self._entries[chromosome] = future
                self._metrics.misses += 1
            else:
                self._metrics.hits += 1
                if not future.done():
                    self._metrics.coalesced += 1

        if owner:
            self._evaluate_into(chromosome, future)
        return future.result()

    def _evaluate_into(self, chromosome: Chromosome, future: Future) -> None:
        try:
            cost = self._metric(chromosome)
        except Exception as exc:
            logging.warning(f"Fitness evaluation failed for {chromosome!r}: {exc}")
            with self._lock:
                self._metrics.failures += 1
            cost = WORST_COST
        except BaseException as exc:
            # Interrupted: forget the entry so a later run can retry it
            with self._lock:
                self._entries.pop(chromosome, None)
            future.set_exception(exc)
            raise
        if cost is None:
            logging.warning(f"Fitness metric returned no cost for {chromosome!r}")
            with self._lock:
                self._metrics.failures += 1
            cost = WORST_COST
        future.set_result(cost)

    def peek(self, chromosome: Chromosome) -> Any | None:
        """Cached cost, or None if absent or still in flight."""
        with self._lock:
            future = self._entries.get(chromosome)
        if future is None or not future.done() or future.exception() is not None:
            return None
        return future.result()

    def preload(self, entries: Iterable[tuple[Chromosome, Any]]) -> int:
        """Seed known costs (e.g. from a saved population). Existing entries win."""
        added = 0
        with self._lock:
            for chromosome, cost in entries:
                if cost is None or chromosome in self._entries:
                    continue
                future: Future = Future()
                future.set_result(cost)
                self._entries[chromosome] = future
                added += 1
            self._metrics.preloaded += added
        return added

    def __contains__(self, chromosome: object) -> bool:
        with self._lock:
            return chromosome in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def evaluation_count(self) -> int:
        """Number of metric invocations so far."""
        with self._lock:
            return self._metrics.misses

    def metrics(self) -> dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._metrics.hits,
                "misses": self._metrics.misses,
                "failures": self._metrics.failures,
                "coalesced": self._metrics.coalesced,
                "preloaded": self._metrics.preloaded,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._metrics = CacheMetrics()


__all__ = ["CacheMetrics", "FitnessCache"]
