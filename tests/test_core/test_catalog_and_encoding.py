import pytest

from passevo.core.catalog import Catalog, Step
from passevo.core.chromosome import Chromosome
from passevo.utils.rng_manager import RNGManager
from passevo.utils.validation import CatalogCollisionError, DecodeError


def _abc_catalog():
    return Catalog([("A", "a", "handle-A"), ("B", "b", "handle-B"), ("C", "c", "handle-C")])


def test_decode_cab_yields_c_a_b():
    catalog = _abc_catalog()
    assert Chromosome.decode("cab", catalog) == Chromosome(["C", "A", "B"])


def test_encode_in_application_order():
    catalog = _abc_catalog()
    assert Chromosome(["A", "B", "C"]).encode(catalog) == "abc"
    assert Chromosome().encode(catalog) == ""


def test_round_trip_for_random_chromosomes():
    catalog = _abc_catalog()
    rng = RNGManager(seed=7)
    for length in (0, 1, 5, 40):
        c = Chromosome.make_random(catalog, length, rng)
        assert Chromosome.decode(c.encode(catalog), catalog) == c


def test_decode_unknown_character_raises_decode_error():
    catalog = _abc_catalog()
    with pytest.raises(DecodeError) as info:
        Chromosome.decode("abx", catalog)
    assert info.value.error_type == "unknown_abbreviation"
    assert info.value.details["position"] == 2


def test_make_random_length_laws():
    catalog = _abc_catalog()
    rng = RNGManager(seed=1)
    assert len(Chromosome.make_random(catalog, 0, rng)) == 0
    assert Chromosome.make_random(catalog, 0, rng) == Chromosome()
    for n in (1, 3, 17):
        c = Chromosome.make_random(catalog, n, rng)
        assert len(c) == n
        assert all(step in catalog for step in c)


def test_chromosome_is_value_type():
    a = Chromosome(["A", "B"])
    b = Chromosome(("A", "B"))
    assert a == b and hash(a) == hash(b)
    assert len({a, b}) == 1
    with pytest.raises(AttributeError):
        a.steps = ("C",)


def test_abbreviation_collision_is_fatal_at_construction():
    with pytest.raises(CatalogCollisionError) as info:
        Catalog([("A", "a"), ("B", "a")])
    assert info.value.error_type == "abbreviation_collision"


def test_catalog_validate_collects_all_problems_without_raising():
    errors = []
    ok = Catalog.validate([("A", "a"), ("B", "a"), ("A", "c"), ("D", "dd")], collect_errors=errors)
    assert ok is False
    assert [e.error_type for e in errors] == ["abbreviation_collision", "duplicate_step", "invalid_abbreviation"]


def test_catalog_table_and_handles():
    catalog = _abc_catalog()
    assert catalog.table.to_char("B") == "b"
    assert catalog.table.to_step("c") == "C"
    assert catalog.all_step_ids() == ("A", "B", "C")
    assert catalog.handles_for(Chromosome(["C", "A"])) == ["handle-C", "handle-A"]
    assert isinstance(catalog.step("A"), Step)


def test_catalog_is_immutable():
    catalog = _abc_catalog()
    with pytest.raises(AttributeError):
        catalog.extra = 1


def test_str_shows_step_ids():
    assert str(Chromosome(["A", "C"])) == "A C"


def test_comment_marker_is_not_a_valid_abbreviation():
    errors = []
    assert Catalog.validate([("A", "a"), ("B", "#")], collect_errors=errors) is False
    assert [e.error_type for e in errors] == ["invalid_abbreviation"]
