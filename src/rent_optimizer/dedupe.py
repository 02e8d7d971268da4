# This module merges unit lists from one or more properties into a single canonical unit set.
# It exists because portfolio views concatenate per-property lists that can repeat the same unit id.
# The merge is last-occurrence-wins; the surviving record keeps the id's first position.
# Duplicates are logged so data-layer re-fetch issues stay visible to operators.

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from src.rent_optimizer.units import Unit

LOGGER = logging.getLogger("rent_optimizer")


def flatten_portfolio(portfolio: Mapping[str, Sequence[Unit]]) -> list[Unit]:
    flattened: list[Unit] = []
    for property_units in portfolio.values():
        flattened.extend(property_units)
    return flattened


def find_duplicate_ids(units: Iterable[Unit]) -> list[str]:
    counts = Counter(unit.id for unit in units)
    return [unit_id for unit_id, count in counts.items() if count > 1]


def dedupe_units(*unit_lists: Iterable[Unit]) -> list[Unit]:
    """Merge unit lists in concatenation order so each id appears exactly once."""

    merged: dict[str, Unit] = {}
    seen = 0
    for units in unit_lists:
        for unit in units:
            seen += 1
            merged[unit.id] = unit

    if seen != len(merged):
        LOGGER.warning(
            "Duplicate units detected: %d records collapsed into %d unique unit ids",
            seen,
            len(merged),
        )
    return list(merged.values())
