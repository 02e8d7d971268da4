# This test file validates display ordering of units by a single sort column.
# It exists to keep header-click cycling and natural text ordering deterministic across renders.

from __future__ import annotations

import pytest

from src.rent_optimizer.sorting import SortSpec, natural_sort_key, sort_units
from tests.rent_optimizer.support import make_unit


def _ids(units: list) -> list[str]:
    return [unit.id for unit in units]


def test_inactive_spec_keeps_input_order() -> None:
    units = [make_unit("b"), make_unit("a")]
    assert _ids(sort_units(units=units, prices={}, spec=SortSpec())) == ["b", "a"]


def test_natural_text_ordering() -> None:
    units = [
        make_unit("x", unit_number="Unit 10"),
        make_unit("y", unit_number="unit 9"),
        make_unit("z", unit_number="Unit 100"),
    ]
    asc = sort_units(units=units, prices={}, spec=SortSpec(column="unit_number", direction="asc"))
    desc = sort_units(units=units, prices={}, spec=SortSpec(column="unit_number", direction="desc"))

    assert _ids(asc) == ["y", "x", "z"]
    assert _ids(desc) == ["z", "x", "y"]
    assert natural_sort_key("Unit 9") < natural_sort_key("unit 10")


def test_missing_numeric_values_sort_last_in_both_directions() -> None:
    units = [
        make_unit("a", market_average=1200),
        make_unit("b"),
        make_unit("c", market_average=900),
    ]
    for direction, expected in (("asc", ["c", "a", "b"]), ("desc", ["a", "c", "b"])):
        ordered = sort_units(units=units, prices={}, spec=SortSpec(column="market_average", direction=direction))
        assert _ids(ordered) == expected


def test_missing_text_values_sort_last() -> None:
    units = [make_unit("a", tag=None), make_unit("b", tag="premium"), make_unit("c", tag="corner")]
    ordered = sort_units(units=units, prices={}, spec=SortSpec(column="tag", direction="desc"))
    assert _ids(ordered) == ["b", "c", "a"]


def test_derived_change_and_annual_columns() -> None:
    units = [
        make_unit("a", current_rent=1000),
        make_unit("b", current_rent=1000),
        make_unit("c", current_rent=1000),
    ]
    prices = {"a": 1010.0, "b": 950.0, "c": 1100.0}

    by_change = sort_units(units=units, prices=prices, spec=SortSpec(column="change", direction="desc"))
    by_annual = sort_units(units=units, prices=prices, spec=SortSpec(column="annual_impact", direction="asc"))

    assert _ids(by_change) == ["c", "a", "b"]
    assert _ids(by_annual) == ["b", "a", "c"]


def test_equal_values_keep_input_order() -> None:
    units = [make_unit(unit_id, current_rent=1000) for unit_id in ("d", "a", "c", "b")]
    for direction in ("asc", "desc"):
        ordered = sort_units(units=units, prices={}, spec=SortSpec(column="current_rent", direction=direction))
        assert _ids(ordered) == ["d", "a", "c", "b"]


def test_toggle_cycles_back_to_no_sort() -> None:
    spec = SortSpec()
    spec = spec.toggle("proposed_rent")
    assert spec == SortSpec(column="proposed_rent", direction="asc")
    spec = spec.toggle("proposed_rent")
    assert spec.as_text == "proposed_rent:desc"
    spec = spec.toggle("proposed_rent")
    assert not spec.active

    units = [make_unit("b", current_rent=2), make_unit("a", current_rent=1)]
    assert _ids(sort_units(units=units, prices={}, spec=spec)) == ["b", "a"]


def test_toggle_to_new_column_starts_ascending() -> None:
    spec = SortSpec(column="change", direction="desc").toggle("tag")
    assert spec == SortSpec(column="tag", direction="asc")


def test_toggle_rejects_unknown_column() -> None:
    with pytest.raises(ValueError, match="Unsupported sort column"):
        SortSpec().toggle("floor")  # type: ignore[arg-type]
