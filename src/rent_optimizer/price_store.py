# This module seeds and reads proposed prices for the unit pricing engine.
# It exists so every component resolves the recommended/current fallback chain the same way.
# A price map always holds exactly one entry per unit in the deduplicated set.

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from src.rent_optimizer.units import Unit

PriceMap = dict[str, float]


def round_rent(value: float) -> float:
    """Round half up, so 1050.5 becomes 1051 and -2.5 becomes -2."""

    return float(math.floor(value + 0.5))


def initial_price(unit: Unit) -> float:
    recommended = unit.recommended_rent_amount
    if recommended is not None:
        return recommended
    return unit.current_rent_amount


def initialize_prices(units: Iterable[Unit]) -> PriceMap:
    return {unit.id: initial_price(unit) for unit in units}


def proposed_price(unit: Unit, prices: Mapping[str, float]) -> float:
    value = prices.get(unit.id)
    if value is None:
        return unit.current_rent_amount
    return float(value)
