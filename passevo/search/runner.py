"""Top-level run entry point.

This is the only place where a fatal configuration problem turns into
process termination; everything below it reports errors as typed values
or exceptions the caller can handle.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

from passevo.config import resolve_config
from passevo.core.catalog import Catalog, Step
from passevo.core.chromosome import Chromosome
from passevo.fitness.cache import FitnessCache
from passevo.search.driver import GeneticAlgorithm
from passevo.search.history import SearchResult
from passevo.utils.validation import FATAL_ERRORS, DecodeError

EXIT_CONFIG_ERROR = 2


def run_search(
    catalog: Catalog | Iterable[Step | tuple],
    fitness: FitnessCache | Callable[[Chromosome], Any],
    config: dict | None = None,
    *,
    preset: dict | None = None,
    cancel_event: threading.Event | None = None,
    initial_population: Iterable[Any] | None = None,
) -> SearchResult:
    """Build the catalog and driver, run the search, return the result.

    Raises:
        SystemExit: with ``EXIT_CONFIG_ERROR`` on a catalog collision, an
            invalid configuration, or an undecodable seed population
    """
    try:
        if not isinstance(catalog, Catalog):
            catalog = Catalog(catalog)
        resolved = resolve_config(config, preset=preset)
        driver = GeneticAlgorithm(
            catalog,
            fitness,
            resolved,
            cancel_event=cancel_event,
            initial_population=initial_population,
        )
    except FATAL_ERRORS + (DecodeError,) as exc:
        logging.error(f"Cannot start search: [{exc.error_type}] {exc.message}")
        raise SystemExit(EXIT_CONFIG_ERROR) from exc
    return driver.run()


__all__ = ["EXIT_CONFIG_ERROR", "run_search"]
