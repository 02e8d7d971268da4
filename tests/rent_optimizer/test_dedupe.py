# This test file validates merging per-property unit lists into one canonical unit set.
# It exists to pin the last-occurrence-wins merge and its logging.
# Idempotence is checked directly because sessions may be rebuilt from already merged data.

from __future__ import annotations

import logging

import pytest

from src.rent_optimizer.dedupe import dedupe_units, find_duplicate_ids, flatten_portfolio
from tests.rent_optimizer.support import make_unit


def test_last_occurrence_wins_and_keeps_first_position() -> None:
    first = [make_unit("a", current_rent=1000), make_unit("b", current_rent=1100)]
    second = [make_unit("c", current_rent=1200), make_unit("a", current_rent=1300, tag="refetched")]

    merged = dedupe_units(first, second)

    assert [unit.id for unit in merged] == ["a", "b", "c"]
    assert merged[0].current_rent_amount == 1300.0
    assert merged[0].tag == "refetched"


def test_dedupe_is_idempotent() -> None:
    units = [make_unit("a"), make_unit("b"), make_unit("a", current_rent=999)]
    once = dedupe_units(units)
    twice = dedupe_units(once)
    assert twice == once


def test_duplicates_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="rent_optimizer"):
        dedupe_units([make_unit("a")], [make_unit("a")])
    assert "Duplicate units detected: 2 records collapsed into 1 unique unit ids" in caplog.text


def test_no_warning_without_duplicates(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="rent_optimizer"):
        dedupe_units([make_unit("a"), make_unit("b")])
    assert caplog.records == []


def test_flatten_portfolio_and_find_duplicates() -> None:
    portfolio = {
        "Maple Court": [make_unit("a"), make_unit("b")],
        "Oak Row": [make_unit("b"), make_unit("c")],
    }
    flattened = flatten_portfolio(portfolio)

    assert [unit.id for unit in flattened] == ["a", "b", "b", "c"]
    assert find_duplicate_ids(flattened) == ["b"]
    assert [unit.id for unit in dedupe_units(flattened)] == ["a", "b", "c"]


def test_empty_input() -> None:
    assert dedupe_units() == []
    assert dedupe_units([]) == []
