"""Run reports and determinism signatures."""

from __future__ import annotations

import hashlib
import json
import math
from typing import Any

REPORT_SCHEMA_VERSION = 1

# Fields that may legitimately differ between otherwise identical runs
_NON_DETERMINISTIC_KEYS = {"cache"}


def _canonicalize(obj: Any, float_precision: int = 12) -> Any:
    if obj is None or isinstance(obj, (str, bool, int)):
        return obj
    if isinstance(obj, float):
        if math.isinf(obj):
            return "inf" if obj > 0 else "-inf"
        return f"{obj:.{float_precision}f}"
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(x, float_precision) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _canonicalize(obj[k], float_precision) for k in sorted(obj.keys(), key=str)}
    return str(obj)


def consolidated_report(result, catalog, config: dict, cache=None) -> dict[str, Any]:
    """JSON-serializable summary of a finished search."""
    best = result.best_chromosome
    report: dict[str, Any] = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "seed": config.get("seed"),
        # Worker count changes scheduling only, never results
        "config": _canonicalize({k: v for k, v in config.items() if k != "max_workers"}),
        "stop_reason": result.stop_reason,
        "generations": result.generations,
        "evaluations": result.evaluations,
        "best": {
            "chromosome": best.encode(catalog) if best is not None else None,
            "cost": _canonicalize(result.best_cost),
        },
        "history": [
            {
                "generation": g.generation,
                "best_cost": _canonicalize(g.best_cost),
                "population": _canonicalize(g.population),
            }
            for g in result.history.generations
        ],
    }
    if cache is not None:
        report["cache"] = cache.metrics()
    return report


def determinism_signature(report: dict[str, Any]) -> str:
    payload = {k: v for k, v in report.items() if k not in _NON_DETERMINISTIC_KEYS}
    blob = json.dumps(_canonicalize(payload), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


def assert_determinism_equivalence(reports: list[dict[str, Any]]) -> None:
    signatures = {determinism_signature(r) for r in reports}
    if len(signatures) > 1:
        raise AssertionError(f"Determinism drift across {len(reports)} reports: {sorted(signatures)}")


__all__ = [
    "REPORT_SCHEMA_VERSION",
    "consolidated_report",
    "determinism_signature",
    "assert_determinism_equivalence",
]
