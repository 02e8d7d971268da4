# This module applies bulk price transformations to a scoped subset of units.
# It exists so percentage, fixed-amount, market, and reset operations share one scoping rule.
# Scopes and operations are tagged variants; unknown variants fail loudly instead of matching nothing.
# Percentage and fixed operations compound when reapplied; only the reset operation is idempotent.

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from src.rent_optimizer.price_store import PriceMap, initial_price, proposed_price, round_rent
from src.rent_optimizer.units import Unit


@dataclass(frozen=True)
class AllUnits:
    pass


@dataclass(frozen=True)
class ByUnitType:
    unit_type: str


BulkScope = AllUnits | ByUnitType


@dataclass(frozen=True)
class Percentage:
    percent: float


@dataclass(frozen=True)
class FixedAdd:
    amount: float


@dataclass(frozen=True)
class FixedSubtract:
    amount: float


@dataclass(frozen=True)
class SetToMarket:
    multiplier: float = 1.0


@dataclass(frozen=True)
class ResetToRecommendation:
    pass


BulkOperation = Percentage | FixedAdd | FixedSubtract | SetToMarket | ResetToRecommendation


def unit_types(units: Iterable[Unit]) -> list[str]:
    return sorted({unit.unit_type for unit in units})


def units_in_scope(units: Sequence[Unit], scope: BulkScope) -> list[Unit]:
    if isinstance(scope, AllUnits):
        return list(units)
    if isinstance(scope, ByUnitType):
        return [unit for unit in units if unit.unit_type == scope.unit_type]
    raise TypeError(f"Unsupported bulk scope: {scope!r}")


def _transform(unit: Unit, current: float, operation: BulkOperation) -> float:
    if isinstance(operation, Percentage):
        return round_rent(current * (1 + operation.percent / 100))
    if isinstance(operation, FixedAdd):
        return max(0.0, current + operation.amount)
    if isinstance(operation, FixedSubtract):
        return max(0.0, current - operation.amount)
    if isinstance(operation, SetToMarket):
        market = unit.market_average_amount
        base = market if market is not None else unit.current_rent_amount
        return round_rent(base * operation.multiplier)
    if isinstance(operation, ResetToRecommendation):
        return initial_price(unit)
    raise TypeError(f"Unsupported bulk operation: {operation!r}")


def apply_bulk_operation(
    *,
    units: Sequence[Unit],
    prices: Mapping[str, float],
    scope: BulkScope,
    operation: BulkOperation,
) -> PriceMap:
    if isinstance(operation, ResetToRecommendation):
        scope = AllUnits()

    updated: PriceMap = dict(prices)
    for unit in units_in_scope(units, scope):
        updated[unit.id] = _transform(unit, proposed_price(unit, prices), operation)
    return updated
