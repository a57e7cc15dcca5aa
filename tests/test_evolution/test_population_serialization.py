import json

import pytest

from passevo.core.catalog import Catalog
from passevo.core.chromosome import Chromosome
from passevo.evolution.population import WORST_COST, FitnessRecord
from passevo.evolution.serialization import (
    SCHEMA_VERSION,
    deserialize_population,
    load_population,
    population_from_text,
    save_population,
    serialize_population,
)
from passevo.utils.validation import DecodeError, ValidationError


def _catalog():
    return Catalog([("A", "a"), ("B", "b"), ("C", "c")])


def _records():
    return [
        FitnessRecord(Chromosome(["C", "A", "B"]), 3.0),
        FitnessRecord(Chromosome(), 0),
        FitnessRecord(Chromosome(["B"]), WORST_COST),
        FitnessRecord(Chromosome(["A", "A"])),
    ]


def test_serialized_population_is_json_and_uses_abbreviations(tmp_path):
    catalog = _catalog()
    data = serialize_population(_records(), catalog)
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["catalog"] == "abc"
    assert [e["chromosome"] for e in data["population"]] == ["cab", "", "b", "aa"]
    assert data["population"][2]["cost"] == "inf"
    json.dumps(data)


def test_save_and_load_preserve_records(tmp_path):
    catalog = _catalog()
    path = save_population(tmp_path / "population.json", _records(), catalog)
    loaded = load_population(path, catalog, strict=True)
    assert loaded == _records()
    assert loaded[2].failed


def test_strict_loader_rejects_unknown_fields_and_missing_schema():
    catalog = _catalog()
    data = serialize_population(_records(), catalog)
    data["extra"] = {"k": "v"}
    deserialize_population(data, catalog)  # tolerant
    with pytest.raises(ValidationError):
        deserialize_population(data, catalog, strict=True)

    data = serialize_population(_records(), catalog)
    data.pop("schema_version")
    assert len(deserialize_population(data, catalog)) == 4
    with pytest.raises(ValidationError):
        deserialize_population(data, catalog, strict=True)


def test_tolerant_loader_accepts_bare_strings():
    records = deserialize_population({"population": ["ab", "c"]}, _catalog())
    assert [r.chromosome for r in records] == [Chromosome(["A", "B"]), Chromosome(["C"])]
    assert not any(r.evaluated for r in records)


def test_unknown_abbreviation_in_saved_population_fails_decode():
    with pytest.raises(DecodeError):
        deserialize_population({"population": [{"chromosome": "az", "cost": 1}]}, _catalog())


def test_population_from_text_skips_blank_and_comment_lines():
    lines = ["# seeds", "cab", "", "  ba  "]
    assert population_from_text(lines, _catalog()) == [Chromosome(["C", "A", "B"]), Chromosome(["B", "A"])]


def test_loader_rejects_population_saved_under_other_catalog():
    saved = serialize_population([FitnessRecord(Chromosome(["A"]), 1.0)], Catalog([("A", "a"), ("B", "b")]))
    reordered = Catalog([("B", "a"), ("A", "b")])
    for strict in (False, True):
        with pytest.raises(ValidationError) as info:
            deserialize_population(saved, reordered, strict=strict)
        assert info.value.error_type == "catalog_mismatch"


def test_strict_loader_requires_catalog():
    data = serialize_population(_records(), _catalog())
    data.pop("catalog")
    assert len(deserialize_population(data, _catalog())) == 4
    with pytest.raises(ValidationError):
        deserialize_population(data, _catalog(), strict=True)


@pytest.mark.parametrize("cost", ["12", [1], True, "nan"])
def test_loader_rejects_non_numeric_costs(cost):
    data = {"population": [{"chromosome": "ab", "cost": cost}]}
    with pytest.raises(ValidationError) as info:
        deserialize_population(data, _catalog())
    assert info.value.error_type == "invalid_cost"
