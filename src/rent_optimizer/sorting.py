# This module orders the deduplicated unit set for display from a single active sort column.
# It exists so repeated renders produce the same order: ties always fall back to input order.
# Text columns compare case-insensitively with numeric runs compared as numbers ("Unit 9" < "Unit 10").
# Missing values sort after all present values in both directions.

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from src.rent_optimizer.price_store import proposed_price
from src.rent_optimizer.units import Unit, parse_rent

SortColumn = Literal[
    "unit_number",
    "unit_type",
    "tag",
    "property_name",
    "status",
    "bedrooms",
    "bathrooms",
    "square_footage",
    "current_rent",
    "recommended_rent",
    "market_average",
    "proposed_rent",
    "pricing_power_score",
    "change",
    "annual_impact",
]
SortDirection = Literal["asc", "desc"]

TEXT_SORT_COLUMNS = {"unit_number", "unit_type", "tag", "property_name", "status"}
NUMERIC_SORT_COLUMNS = {
    "bedrooms",
    "bathrooms",
    "square_footage",
    "current_rent",
    "recommended_rent",
    "market_average",
    "proposed_rent",
    "pricing_power_score",
    "change",
    "annual_impact",
}
VALID_SORT_COLUMNS = TEXT_SORT_COLUMNS | NUMERIC_SORT_COLUMNS
VALID_SORT_DIRECTIONS = {"asc", "desc"}

_DIGITS_RE = re.compile(r"([0-9]+)")


@dataclass(frozen=True)
class SortSpec:
    column: SortColumn | None = None
    direction: SortDirection | None = None

    @property
    def active(self) -> bool:
        return self.column is not None and self.direction is not None

    @property
    def as_text(self) -> str | None:
        if not self.active:
            return None
        return f"{self.column}:{self.direction}"

    def toggle(self, column: SortColumn) -> SortSpec:
        """Header click: asc on a new column, then desc, then back to input order."""

        if column not in VALID_SORT_COLUMNS:
            supported = ", ".join(sorted(VALID_SORT_COLUMNS))
            raise ValueError(f"Unsupported sort column '{column}'. Supported columns: {supported}")
        if column != self.column or self.direction is None:
            return SortSpec(column=column, direction="asc")
        if self.direction == "asc":
            return SortSpec(column=column, direction="desc")
        return SortSpec()


def natural_sort_key(value: str) -> tuple[tuple[int, int, str], ...]:
    parts: list[tuple[int, int, str]] = []
    for token in _DIGITS_RE.split(value.strip()):
        if not token:
            continue
        if _DIGITS_RE.fullmatch(token):
            parts.append((0, int(token), ""))
        else:
            parts.append((1, 0, token.casefold()))
    return tuple(parts)


def _text_value(value: str | None) -> str | None:
    if value is None or value.strip() == "":
        return None
    return value


def sort_value(
    unit: Unit,
    prices: Mapping[str, float],
    column: str,
    *,
    annualization_factor: int = 12,
) -> Any:
    if column == "unit_number":
        return _text_value(unit.unit_number)
    if column == "unit_type":
        return _text_value(unit.unit_type)
    if column == "tag":
        return _text_value(unit.tag)
    if column == "property_name":
        return _text_value(unit.property_name)
    if column == "status":
        return unit.status
    if column == "bedrooms":
        return unit.bedrooms
    if column == "bathrooms":
        return unit.bathrooms_amount
    if column == "square_footage":
        return unit.square_footage
    if column == "current_rent":
        return parse_rent(unit.current_rent)
    if column == "recommended_rent":
        return unit.recommended_rent_amount
    if column == "market_average":
        return unit.market_average_amount
    if column == "proposed_rent":
        return proposed_price(unit, prices)
    if column == "pricing_power_score":
        return unit.pricing_power_score
    if column in {"change", "annual_impact"}:
        change = proposed_price(unit, prices) - unit.current_rent_amount
        return change * annualization_factor if column == "annual_impact" else change
    supported = ", ".join(sorted(VALID_SORT_COLUMNS))
    raise ValueError(f"Unsupported sort column '{column}'. Supported columns: {supported}")


def sort_units(
    *,
    units: Sequence[Unit],
    prices: Mapping[str, float],
    spec: SortSpec,
    annualization_factor: int = 12,
) -> list[Unit]:
    if not spec.active or spec.column is None:
        return list(units)

    column = spec.column
    present: list[tuple[Any, Unit]] = []
    missing: list[Unit] = []
    for unit in units:
        value = sort_value(unit, prices, column, annualization_factor=annualization_factor)
        if value is None:
            missing.append(unit)
        elif column in TEXT_SORT_COLUMNS:
            present.append((natural_sort_key(str(value)), unit))
        else:
            present.append((float(value), unit))

    present.sort(key=lambda item: item[0], reverse=spec.direction == "desc")
    return [unit for _, unit in present] + missing
