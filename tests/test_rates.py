"""Tests for ExchangeRateTable."""

from decimal import Decimal

import pytest

from unitmeasure.errors import NoBaseUnitFound, UnknownUnit
from unitmeasure.rates import ExchangeRateTable


def make_table() -> ExchangeRateTable:
    return ExchangeRateTable.of({"min": 60, "s": 1, "h": 3600, "ms": "0.001"})


def test_lookup_and_order():
    table = make_table()

    assert table["h"] == Decimal(3600)
    assert table.get("ms") == Decimal("0.001")
    assert table.get("day") is None
    assert list(table) == ["min", "s", "h", "ms"]
    assert len(table) == 4
    assert "s" in table


def test_rate_raises_unknown_unit():
    with pytest.raises(UnknownUnit, match="Unknown unit: 'day'") as info:
        make_table().rate("day")
    assert info.value.unit == "day"


def test_with_rate_overwrites_in_place():
    table = make_table().with_rate("min", 61)

    assert list(table) == ["min", "s", "h", "ms"]
    assert table["min"] == 61


def test_with_rate_appends_or_prepends():
    table = make_table()

    assert list(table.with_rate("d", 86400)) == ["min", "s", "h", "ms", "d"]
    assert list(table.with_rate("d", 86400, prepend=True)) == [
        "d",
        "min",
        "s",
        "h",
        "ms",
    ]
    # Prepending an existing unit moves it to the front
    assert list(table.with_rate("h", 3600, prepend=True)) == ["h", "min", "s", "ms"]


def test_edits_never_touch_the_original():
    table = make_table()
    edited = table.with_rate("d", 86400).without("ms")

    assert list(table) == ["min", "s", "h", "ms"]
    assert list(edited) == ["min", "s", "h", "d"]


def test_restrict_keeps_table_order():
    table = make_table()

    assert list(table.restrict(["ms", "h"])) == ["h", "ms"]
    assert table.restrict(None) is table


def test_sorted_desc():
    assert [unit for unit, _ in make_table().sorted_desc()] == ["h", "min", "s", "ms"]


def test_sorted_desc_ties_keep_table_order():
    table = ExchangeRateTable.of([("a", 1), ("b", 2), ("c", 1)])
    assert [unit for unit, _ in table.sorted_desc()] == ["b", "a", "c"]


def test_base_unit():
    assert make_table().base_unit() == "s"

    with pytest.raises(NoBaseUnitFound, match="No base unit"):
        make_table().without("s").base_unit()


def test_tables_are_hashable_values():
    assert make_table() == make_table()
    assert hash(make_table()) == hash(make_table())
    assert make_table() != make_table().with_rate("min", 61)
