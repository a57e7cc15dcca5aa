"""Search configuration: defaults, presets and validation.

Configurations are plain dicts read with ``config.get(key, default)``.
``resolve_config`` merges overrides over ``DEFAULT_CONFIG`` and rejects any
invalid or unknown value before a run starts.
"""

from __future__ import annotations

import copy
import math
from typing import Any

from passevo.evolution.operators import CROSSOVER_OPERATORS, MUTATION_KINDS, MUTATION_MODES
from passevo.evolution.selection import SELECTION_STRATEGIES
from passevo.utils.validation import ConfigError, raise_first

DEFAULT_CONFIG: dict[str, Any] = {
    'population_size': 20,
    'elite_count': 2,
    'max_generations': 50,
    'max_evaluations': None,
    'plateau_generations': None,
    'mutation_probability': 0.3,
    'mutation_mode': 'per_chromosome',
    'mutation_weights': {'insertion': 1.0, 'deletion': 1.0, 'substitution': 1.0},
    'crossover_enabled': True,
    'crossover': 'single_point',
    'selection': 'tournament',
    'tournament_size': 3,
    'seed': None,
    'min_initial_length': 0,
    'max_initial_length': 16,
    'include_empty_baseline': True,
    'max_chromosome_length': None,
    'max_workers': 1,
}

PRESET_MINIMAL: dict[str, Any] = {
    'population_size': 8,
    'elite_count': 1,
    'max_generations': 10,
    'max_initial_length': 8,
}

PRESET_STANDARD: dict[str, Any] = {}

PRESET_RESEARCH: dict[str, Any] = {
    'population_size': 100,
    'elite_count': 10,
    'max_generations': 500,
    'plateau_generations': 50,
    'max_initial_length': 30,
    'selection': 'rank',
    'max_workers': 8,
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _positive_or_none(config: dict, key: str, errors: list) -> None:
    value = config.get(key)
    if value is not None and (not _is_int(value) or value < 1):
        errors.append(ConfigError("invalid_value", f"{key} must be a positive integer or None", key=key, value=value))


def _probability(config: dict, key: str, errors: list) -> None:
    value = config.get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value) or not 0.0 <= value <= 1.0:
        errors.append(ConfigError("invalid_probability", f"{key} must lie in [0, 1]", key=key, value=value))


def validate_config(config: dict, collect_errors: list | None = None) -> bool:
    """Check a fully merged config; returns True when valid.

    Errors are ``ConfigError`` instances appended to ``collect_errors``.
    """
    errors: list[ConfigError] = []

    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        errors.append(ConfigError("unknown_key", f"Unknown config keys: {unknown}", keys=tuple(unknown)))

    n = config.get('population_size')
    if not _is_int(n) or n < 1:
        errors.append(ConfigError("invalid_value", "population_size must be a positive integer", key='population_size', value=n))
        n = None

    e = config.get('elite_count')
    if not _is_int(e) or e < 0:
        errors.append(ConfigError("invalid_value", "elite_count must be a non-negative integer", key='elite_count', value=e))
    elif n is not None and e > n:
        errors.append(ConfigError("elite_exceeds_population", f"elite_count {e} exceeds population_size {n}", elite_count=e, population_size=n))

    for key in ('max_generations', 'max_evaluations', 'plateau_generations', 'max_chromosome_length'):
        _positive_or_none(config, key, errors)
    if config.get('max_generations') is None and config.get('max_evaluations') is None and config.get('plateau_generations') is None:
        errors.append(ConfigError("no_stop_condition", "At least one of max_generations, max_evaluations, plateau_generations must be set"))

    _probability(config, 'mutation_probability', errors)

    if config.get('mutation_mode') not in MUTATION_MODES:
        errors.append(ConfigError("unknown_mutation_mode", f"mutation_mode must be one of {MUTATION_MODES}", value=config.get('mutation_mode')))

    weights = config.get('mutation_weights')
    if not isinstance(weights, dict) or set(weights) - set(MUTATION_KINDS):
        errors.append(ConfigError("invalid_mutation_weights", f"mutation_weights keys must be among {MUTATION_KINDS}", value=weights))
    elif any(not isinstance(w, (int, float)) or w < 0 for w in weights.values()) or sum(weights.values()) <= 0:
        errors.append(ConfigError("invalid_mutation_weights", "mutation_weights must be non-negative with a positive sum", value=weights))

    if not isinstance(config.get('crossover_enabled'), bool):
        errors.append(ConfigError("invalid_value", "crossover_enabled must be a bool", key='crossover_enabled'))
    if config.get('crossover') not in CROSSOVER_OPERATORS:
        errors.append(ConfigError("unknown_crossover", f"crossover must be one of {sorted(CROSSOVER_OPERATORS)}", value=config.get('crossover')))

    if config.get('selection') not in SELECTION_STRATEGIES:
        errors.append(ConfigError("unknown_selection", f"selection must be one of {sorted(SELECTION_STRATEGIES)}", value=config.get('selection')))
    k = config.get('tournament_size')
    if not _is_int(k) or k < 1:
        errors.append(ConfigError("invalid_value", "tournament_size must be a positive integer", key='tournament_size', value=k))

    seed = config.get('seed')
    if seed is not None and not _is_int(seed):
        errors.append(ConfigError("invalid_value", "seed must be an integer or None", key='seed', value=seed))

    lo, hi = config.get('min_initial_length'), config.get('max_initial_length')
    if not _is_int(lo) or not _is_int(hi) or lo < 0 or hi < lo:
        errors.append(ConfigError("invalid_length_range", "initial lengths must satisfy 0 <= min_initial_length <= max_initial_length", min=lo, max=hi))

    if not isinstance(config.get('include_empty_baseline'), bool):
        errors.append(ConfigError("invalid_value", "include_empty_baseline must be a bool", key='include_empty_baseline'))

    w = config.get('max_workers')
    if not _is_int(w) or w < 1:
        errors.append(ConfigError("invalid_value", "max_workers must be a positive integer", key='max_workers', value=w))

    if collect_errors is not None:
        collect_errors.extend(errors)
    return not errors


def resolve_config(overrides: dict | None = None, preset: dict | None = None) -> dict:
    """Merge ``preset`` and ``overrides`` over the defaults and validate."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config.update(copy.deepcopy(preset or {}))
    config.update(copy.deepcopy(overrides or {}))
    errors: list[ConfigError] = []
    validate_config(config, collect_errors=errors)
    raise_first(errors)
    return config


__all__ = [
    'DEFAULT_CONFIG',
    'PRESET_MINIMAL',
    'PRESET_STANDARD',
    'PRESET_RESEARCH',
    'validate_config',
    'resolve_config',
]
