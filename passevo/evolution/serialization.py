"""Population persistence.

A saved population is a JSON object::

    {"schema_version": 1,
     "catalog": "abc...",
     "population": [{"chromosome": "cab", "cost": 12.0}, ...]}

Chromosomes use the catalog's abbreviation encoding. ``cost`` is null for
unevaluated records and the string ``"inf"`` for failures.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from passevo.core.catalog import COMMENT_CHAR, Catalog
from passevo.core.chromosome import Chromosome
from passevo.evolution.population import WORST_COST, FitnessRecord
from passevo.utils.validation import ValidationError

SCHEMA_VERSION = 1
_ALLOWED_KEYS = {"schema_version", "catalog", "population"}
_ALLOWED_ENTRY_KEYS = {"chromosome", "cost"}


def _encode_cost(cost: Any) -> Any:
    if cost == WORST_COST:
        return "inf"
    return cost


def _decode_cost(value: Any) -> Any:
    if value is None:
        return None
    if value == "inf":
        return WORST_COST
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("invalid_cost", f"Cost must be a number, null or \"inf\", got {value!r}", value=value)
    return value


def _catalog_key(catalog: Catalog) -> str:
    return "".join(s.abbreviation for s in catalog.steps)


def serialize_population(records: Iterable[FitnessRecord], catalog: Catalog) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "catalog": _catalog_key(catalog),
        "population": [
            {"chromosome": r.chromosome.encode(catalog), "cost": _encode_cost(r.cost)}
            for r in records
        ],
    }


def deserialize_population(data: dict[str, Any], catalog: Catalog, *, strict: bool = False) -> list[FitnessRecord]:
    """Rebuild records from ``serialize_population`` output.

    Args:
        data: Parsed JSON object
        catalog: Catalog to decode chromosomes with
        strict: Reject unknown fields, a missing ``catalog`` and a
            missing or different ``schema_version``

    Raises:
        DecodeError: a chromosome uses an abbreviation the catalog lacks
        ValidationError: the payload is malformed, a cost is not a number,
            or it was saved under a catalog with different abbreviations
    """
    if strict:
        extras = set(data) - _ALLOWED_KEYS
        if extras:
            raise ValidationError("unknown_field", f"Unknown fields in population: {sorted(extras)}", extras=sorted(extras))
        if data.get("schema_version") != SCHEMA_VERSION:
            raise ValidationError(
                "schema_version_mismatch",
                f"Expected schema_version {SCHEMA_VERSION}, got {data.get('schema_version')!r}",
            )
    saved_catalog = data.get("catalog")
    if strict and saved_catalog is None:
        raise ValidationError("missing_catalog", "Saved population does not record its catalog")
    if saved_catalog is not None and saved_catalog != _catalog_key(catalog):
        raise ValidationError(
            "catalog_mismatch",
            f"Population was saved under catalog {saved_catalog!r}, not {_catalog_key(catalog)!r}",
            saved=saved_catalog,
            current=_catalog_key(catalog),
        )
    entries = data.get("population")
    if not isinstance(entries, list):
        raise ValidationError("missing_population", "Saved population has no 'population' list")

    records: list[FitnessRecord] = []
    for entry in entries:
        if isinstance(entry, str):
            records.append(FitnessRecord(Chromosome.decode(entry, catalog)))
            continue
        if strict and set(entry) - _ALLOWED_ENTRY_KEYS:
            raise ValidationError("unknown_field", f"Unknown fields in population entry: {sorted(set(entry) - _ALLOWED_ENTRY_KEYS)}")
        chromosome = Chromosome.decode(entry["chromosome"], catalog)
        records.append(FitnessRecord(chromosome, _decode_cost(entry.get("cost"))))
    return records


def save_population(path: str | Path, records: Iterable[FitnessRecord], catalog: Catalog) -> Path:
    path = Path(path)
    path.write_text(json.dumps(serialize_population(records, catalog), indent=2), encoding="utf-8")
    return path


def load_population(path: str | Path, catalog: Catalog, *, strict: bool = False) -> list[FitnessRecord]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return deserialize_population(data, catalog, strict=strict)


def population_from_text(lines: Iterable[str], catalog: Catalog) -> list[Chromosome]:
    """One encoded chromosome per line; blank lines and ``#`` comments skipped.

    The empty chromosome has no text form here; it enters the initial
    population through ``include_empty_baseline`` instead.
    """
    chromosomes = []
    for line in lines:
        text = line.strip()
        if not text or text.startswith(COMMENT_CHAR):
            continue
        chromosomes.append(Chromosome.decode(text, catalog))
    return chromosomes


__all__ = [
    "SCHEMA_VERSION",
    "serialize_population",
    "deserialize_population",
    "save_population",
    "load_population",
    "population_from_text",
]
