"""Mutation and crossover operators for chromosomes.

All operators are pure: they take chromosomes and an RNG and return new
chromosomes. Randomness comes only from the RNG passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

from passevo.core.catalog import Catalog
from passevo.core.chromosome import Chromosome

MUTATION_KINDS = ("insertion", "deletion", "substitution")
MUTATION_MODES = ("per_chromosome", "per_gene")


def _normalize_probs(probabilities: list[float]) -> list[float]:
    total = sum(probabilities)
    if total > 0:
        return [p / total for p in probabilities]
    if probabilities:
        return [1.0 / len(probabilities) for _ in probabilities]
    return []


@dataclass(frozen=True)
class MutationPolicy:
    """How and how often a child is perturbed.

    Attributes:
        probability: Chance of mutating the chromosome (``per_chromosome``)
            or each of its positions (``per_gene``)
        mode: ``per_chromosome`` or ``per_gene``
        weights: Relative weights of insertion, deletion and substitution,
            given as a mapping and stored as a tuple in ``MUTATION_KINDS`` order
    """

    probability: float = 0.2
    mode: str = "per_chromosome"
    weights: tuple = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        if isinstance(self.weights, Mapping):
            object.__setattr__(self, "weights", tuple(float(self.weights.get(k, 0.0)) for k in MUTATION_KINDS))
        else:
            object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))

    @classmethod
    def from_config(cls, config: dict) -> "MutationPolicy":
        return cls(
            probability=float(config.get("mutation_probability", 0.2)),
            mode=str(config.get("mutation_mode", "per_chromosome")),
            weights=config.get("mutation_weights") or cls().weights,
        )

    def pick_kind(self, rng) -> str:
        weights = _normalize_probs(list(self.weights))
        return MUTATION_KINDS[rng.weighted_index(weights)]


# ---------- single-site mutations ----------

def insert_step(chromosome: Chromosome, catalog: Catalog, rng) -> Chromosome:
    """Insert a random step at a random position (``len`` included)."""
    steps = list(chromosome.steps)
    pos = rng.randint(0, len(steps))
    steps.insert(pos, rng.choice(catalog.all_step_ids()))
    return Chromosome(steps)


def delete_step(chromosome: Chromosome, catalog: Catalog, rng) -> Chromosome:
    if not chromosome.steps:
        return chromosome
    steps = list(chromosome.steps)
    del steps[rng.randrange(len(steps))]
    return Chromosome(steps)


def substitute_step(chromosome: Chromosome, catalog: Catalog, rng) -> Chromosome:
    if not chromosome.steps:
        return chromosome
    steps = list(chromosome.steps)
    steps[rng.randrange(len(steps))] = rng.choice(catalog.all_step_ids())
    return Chromosome(steps)


SINGLE_SITE_MUTATIONS: dict[str, Callable[[Chromosome, Catalog, object], Chromosome]] = {
    "insertion": insert_step,
    "deletion": delete_step,
    "substitution": substitute_step,
}


def _mutate_per_gene(chromosome: Chromosome, catalog: Catalog, policy: MutationPolicy, rng) -> Chromosome:
    # Each original position is visited once; insertion puts the new step
    # before the visited one.
    step_ids = catalog.all_step_ids()
    result: list[str] = []
    changed = False
    for step in chromosome.steps:
        if rng.random() >= policy.probability:
            result.append(step)
            continue
        changed = True
        kind = policy.pick_kind(rng)
        if kind == "insertion":
            result.append(rng.choice(step_ids))
            result.append(step)
        elif kind == "substitution":
            result.append(rng.choice(step_ids))
        # deletion drops the step
    if not changed:
        return chromosome
    return Chromosome(result)


def mutate(chromosome: Chromosome, catalog: Catalog, policy: MutationPolicy, rng) -> Chromosome:
    """Mutate a chromosome per ``policy``.

    In ``per_chromosome`` mode one weighted operator is applied with
    probability ``policy.probability``. In ``per_gene`` mode every position
    is considered independently; an empty chromosome can then only grow
    through an insertion drawn with the same probability.
    Returns the original object when nothing changed.
    """
    if policy.mode == "per_gene":
        if not chromosome.steps:
            if rng.random() < policy.probability and policy.pick_kind(rng) == "insertion":
                return insert_step(chromosome, catalog, rng)
            return chromosome
        return _mutate_per_gene(chromosome, catalog, policy, rng)

    if rng.random() >= policy.probability:
        return chromosome
    kind = policy.pick_kind(rng)
    return SINGLE_SITE_MUTATIONS[kind](chromosome, catalog, rng)


# ---------- crossover ----------

def crossover_at(parent1: Chromosome, parent2: Chromosome, cut1: int, cut2: int) -> Chromosome:
    """Child made of ``parent1[:cut1]`` followed by ``parent2[cut2:]``."""
    if not 0 <= cut1 <= len(parent1) or not 0 <= cut2 <= len(parent2):
        raise ValueError(f"cut points ({cut1}, {cut2}) out of range")
    return Chromosome(parent1.steps[:cut1] + parent2.steps[cut2:])


def single_point_crossover(parent1: Chromosome, parent2: Chromosome, rng) -> Chromosome:
    """Independent uniform cut points on both parents.

    The child length can differ from both parents, so the search explores
    pipeline lengths as well as orderings.
    """
    cut1 = rng.randint(0, len(parent1))
    cut2 = rng.randint(0, len(parent2))
    return crossover_at(parent1, parent2, cut1, cut2)


def aligned_point_crossover(parent1: Chromosome, parent2: Chromosome, rng) -> Chromosome:
    """One cut at the same index of both parents; the child has ``parent2``'s length."""
    cut = rng.randint(0, min(len(parent1), len(parent2)))
    return crossover_at(parent1, parent2, cut, cut)


def uniform_crossover(parent1: Chromosome, parent2: Chromosome, rng) -> Chromosome:
    """Pick each aligned position from either parent with equal chance.

    Positions past the shorter parent are kept from the longer one with
    the same 50/50 chance, so the tail is included or dropped as a block.
    """
    shorter = min(len(parent1), len(parent2))
    steps = [
        parent1.steps[i] if rng.random() < 0.5 else parent2.steps[i]
        for i in range(shorter)
    ]
    longer = parent1 if len(parent1) > len(parent2) else parent2
    if len(longer) > shorter and rng.random() < 0.5:
        steps.extend(longer.steps[shorter:])
    return Chromosome(steps)


CROSSOVER_OPERATORS: dict[str, Callable[[Chromosome, Chromosome, object], Chromosome]] = {
    "single_point": single_point_crossover,
    "aligned_point": aligned_point_crossover,
    "uniform": uniform_crossover,
}


def truncate(chromosome: Chromosome, max_length: int | None) -> Chromosome:
    if max_length is None or len(chromosome) <= max_length:
        return chromosome
    return Chromosome(chromosome.steps[:max_length])


__all__ = [
    "MUTATION_KINDS",
    "MUTATION_MODES",
    "MutationPolicy",
    "insert_step",
    "delete_step",
    "substitute_step",
    "mutate",
    "crossover_at",
    "single_point_crossover",
    "aligned_point_crossover",
    "uniform_crossover",
    "CROSSOVER_OPERATORS",
    "truncate",
]
