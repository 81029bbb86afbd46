"""Tests for catalog filtering and sorting."""

import pytest

from src.models.catalog import SortMode
from src.models.product import Product
from src.services.catalog.view import CatalogView, CategoryAliasTable


def _product(pid, category="Cement", sub_category="", unit=0.0, base=0.0, total=None):
    return Product(
        id=pid,
        name=f"Product {pid}",
        category=category,
        sub_category=sub_category,
        unit_price=unit,
        base_price=base,
        total_price=unit if total is None else total,
    )


@pytest.fixture()
def engine():
    return CatalogView(
        aliases=CategoryAliasTable({"Iron": "Steel"}),
        buckets={"Others": ["OPC", "PPC"]},
    )


@pytest.fixture()
def products():
    return [
        _product("opc", sub_category="OPC", unit=400),
        _product("ppc", sub_category="PPC", unit=380),
        _product("blank", sub_category="", unit=350),
        _product("fly", sub_category="Fly Ash", unit=420),
        _product("tmt", category="Steel", sub_category="TMT", unit=8500),
    ]


@pytest.mark.parametrize("category", ["All", "all", "", None])
def test_all_category_disables_filtering(engine, products, category):
    assert engine.apply(products, category) == products


def test_category_match_is_case_insensitive(engine, products):
    result = engine.apply(products, "cEmEnT")

    assert [p.id for p in result] == ["opc", "ppc", "blank", "fly"]


def test_category_alias_resolves_display_name(engine, products):
    result = engine.apply(products, "iron")

    assert [p.id for p in result] == ["tmt"]


def test_subcategory_exact_match(engine, products):
    assert [p.id for p in engine.apply(products, "Cement", "opc")] == ["opc"]


def test_others_bucket_excludes_reserved_and_empty(engine, products):
    result = engine.apply(products, "Cement", "Others")

    assert [p.sub_category for p in result] == ["Fly Ash"]


def test_filtering_is_idempotent(engine, products):
    once = engine.apply(products, "Cement", "Others")
    twice = engine.apply(once, "Cement", "Others")

    assert once == twice


def test_sort_directions_are_exact_reverses(engine, products):
    ascending = engine.apply(products, sort_mode=SortMode.PRICE_ASC)
    descending = engine.apply(products, sort_mode="priceDesc")

    assert [p.unit_price for p in ascending] == [350, 380, 400, 420, 8500]
    assert ascending == list(reversed(descending))
    assert ascending[0] == descending[-1]


def test_sort_is_stable_for_ties(engine):
    tied = [_product("a", unit=100), _product("b", unit=100), _product("c", unit=50)]

    assert [p.id for p in engine.apply(tied, sort_mode="priceAsc")] == ["c", "a", "b"]
    assert [p.id for p in engine.apply(tied, sort_mode="priceDesc")] == ["a", "b", "c"]


def test_none_sort_preserves_input_order(engine, products):
    assert engine.apply(products, sort_mode="none") == products
    assert engine.apply(products, sort_mode="bogus") == products


def test_sort_uses_total_price_with_delivery_context(engine):
    items = [
        _product("near", unit=400, total=420),
        _product("far", unit=390, total=520),
    ]

    by_unit = engine.apply(items, sort_mode="priceAsc")
    by_total = engine.apply(items, sort_mode="priceAsc", delivery_active=True)

    assert [p.id for p in by_unit] == ["far", "near"]
    assert [p.id for p in by_total] == ["near", "far"]


def test_sort_falls_back_to_base_price(engine):
    items = [_product("x", unit=0, base=300), _product("y", unit=200)]

    assert [p.id for p in engine.apply(items, sort_mode="priceAsc")] == ["y", "x"]


@pytest.mark.parametrize("bad_input", [None, "products", {"a": 1}, 42])
def test_malformed_input_yields_empty_list(engine, bad_input):
    assert engine.apply(bad_input, "Cement") == []


def test_non_product_entries_are_ignored(engine, products):
    assert engine.apply([*products, {"id": "raw"}, None]) == products


def test_buckets_are_data_driven(products):
    engine = CatalogView(buckets={"Specialty": ["OPC", "PPC", "Fly Ash"]})

    assert [p.id for p in engine.apply(products, "Cement", "specialty")] == []
    assert [p.id for p in engine.apply(products, None, "Specialty")] == ["tmt"]


def test_malformed_bucket_table_entries_are_skipped(products):
    engine = CatalogView(buckets={"Others": 5, "Misc": None, "Rest": ["OPC", 7]})

    # "Others" is no bucket now, so it falls back to an exact match.
    assert engine.apply(products, "Cement", "Others") == []
    assert [p.id for p in engine.apply(products, "Cement", "Rest")] == [
        "ppc",
        "fly",
    ]
