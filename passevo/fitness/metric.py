"""Fitness metric contract and program-set aggregation.

A metric maps ``(chromosome, program)`` to a totally ordered cost, lower
being better. The engine only compares costs; it never interprets units.
Applying the steps to a program is the metric's business: it receives the
catalog's transform handles through ``Catalog.handles_for``.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from passevo.core.chromosome import Chromosome
from passevo.utils.validation import EvaluationError


class FitnessMetric:
    """Base class for metrics supplied by the surrounding compiler tooling."""

    def evaluate(self, chromosome: Chromosome, program: Any) -> Any:
        raise NotImplementedError


class CallableMetric(FitnessMetric):
    """Adapts a plain ``fn(chromosome, program) -> cost`` function."""

    def __init__(self, fn: Callable[[Chromosome, Any], Any]) -> None:
        self.fn = fn

    def evaluate(self, chromosome: Chromosome, program: Any) -> Any:
        return self.fn(chromosome, program)


def _average(costs: Sequence[Any]) -> Any:
    return sum(costs) / len(costs)


AGGREGATORS: dict[str, Callable[[Sequence[Any]], Any]] = {
    "sum": sum,
    "average": _average,
    "max": max,
    "min": min,
}


class ProgramSetMetric:
    """Evaluates a chromosome on every program and aggregates the costs.

    Instances are callables ``chromosome -> cost`` suitable for
    ``FitnessCache``. Any failure on any program fails the whole
    evaluation with ``EvaluationError``.
    """

    def __init__(self, metric: FitnessMetric | Callable, programs: Sequence[Any], aggregate: str = "sum") -> None:
        if not programs:
            raise ValueError("ProgramSetMetric needs at least one program")
        if aggregate not in AGGREGATORS:
            raise ValueError(f"Unknown aggregate {aggregate!r}; expected one of {sorted(AGGREGATORS)}")
        self.metric = metric if isinstance(metric, FitnessMetric) else CallableMetric(metric)
        self.programs = list(programs)
        self.aggregate = aggregate

    def __call__(self, chromosome: Chromosome) -> Any:
        costs = []
        for program in self.programs:
            try:
                cost = self.metric.evaluate(chromosome, program)
            except EvaluationError:
                raise
            except Exception as exc:
                raise EvaluationError(str(exc), chromosome=chromosome) from exc
            if cost is None:
                raise EvaluationError("metric returned no cost", chromosome=chromosome)
            costs.append(cost)
        return AGGREGATORS[self.aggregate](costs)


__all__ = ["FitnessMetric", "CallableMetric", "AGGREGATORS", "ProgramSetMetric"]
