# This module defines the unit and baseline report records consumed by the pricing engine.
# It exists so the data layer's camelCase payloads are validated once at the session boundary.
# Rent fields keep their raw form; numeric interpretation always goes through parse_rent.
# Records are frozen so snapshots and sorted views can share them.

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

UnitStatus = Literal["vacant", "occupied", "notice_given", "available"]
RawRent = str | int | float | Decimal


def parse_rent(value: Any) -> float | None:
    """Parse a rent-like value, returning None when it is missing or not numeric."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if cleaned.startswith("$"):
            cleaned = cleaned[1:].strip()
        if cleaned == "":
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_rent(value: Any) -> float:
    parsed = parse_rent(value)
    return parsed if parsed is not None else 0.0


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Unit(_CamelModel):
    id: str
    unit_number: str
    unit_type: str
    bedrooms: int | None = None
    bathrooms: RawRent | None = None
    square_footage: int | None = None
    current_rent: RawRent
    recommended_rent: RawRent | None = None
    market_average: RawRent | None = None
    status: UnitStatus = "occupied"
    availability_date: str | None = None
    tag: str | None = None
    property_name: str | None = None
    pricing_power_score: float | None = Field(default=None, ge=0, le=100)

    @field_validator("id", "unit_number", "unit_type", mode="before")
    @classmethod
    def _stringify_identifiers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("availability_date", mode="before")
    @classmethod
    def _isoformat_dates(cls, value: Any) -> Any:
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return value

    @property
    def current_rent_amount(self) -> float:
        return coerce_rent(self.current_rent)

    @property
    def recommended_rent_amount(self) -> float | None:
        return parse_rent(self.recommended_rent)

    @property
    def market_average_amount(self) -> float | None:
        return parse_rent(self.market_average)

    @property
    def bathrooms_amount(self) -> float | None:
        return parse_rent(self.bathrooms)


class BaselineReport(_CamelModel):
    """Aggregate figures from the recommendation run, shown next to the live impact."""

    total_increase: RawRent = 0
    affected_units: int = 0
    avg_increase: RawRent = 0
    risk_level: str = "unknown"
    goal: str | None = None

    @property
    def total_increase_amount(self) -> float:
        return coerce_rent(self.total_increase)

    @property
    def avg_increase_amount(self) -> float:
        return coerce_rent(self.avg_increase)
