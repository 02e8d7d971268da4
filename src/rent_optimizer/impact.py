# This module derives portfolio-level impact statistics from a price snapshot.
# It exists so the live impact cards and the apply confirmation agree on the same numbers.
# The calculation is a pure O(n) pass over the pricing frame and is recomputed on every change.
# A zero rent roll yields a zero average change rather than a division error.

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from src.rent_optimizer.pricing_frame import build_pricing_frame
from src.rent_optimizer.units import Unit


@dataclass(frozen=True)
class ImpactSummary:
    total_monthly_delta: float
    total_annual_delta: float
    affected_unit_count: int
    increased_count: int
    decreased_count: int
    avg_percent_change: float
    unaffected_count: int
    total_current_rent: float
    total_proposed_rent: float

    @property
    def total_unit_count(self) -> int:
        return self.affected_unit_count + self.unaffected_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_monthly_delta": self.total_monthly_delta,
            "total_annual_delta": self.total_annual_delta,
            "affected_unit_count": self.affected_unit_count,
            "increased_count": self.increased_count,
            "decreased_count": self.decreased_count,
            "unaffected_count": self.unaffected_count,
            "avg_percent_change": self.avg_percent_change,
            "total_current_rent": self.total_current_rent,
            "total_proposed_rent": self.total_proposed_rent,
        }


def compute_impact(
    *,
    units: Sequence[Unit],
    prices: Mapping[str, float],
    annualization_factor: int = 12,
) -> ImpactSummary:
    frame = build_pricing_frame(units=units, prices=prices, annualization_factor=annualization_factor)

    change = frame["change"]
    total_current = float(frame["current_rent"].sum())
    total_delta = float(change.sum())
    increased = int((change > 0).sum())
    decreased = int((change < 0).sum())

    avg_percent_change = 0.0
    if total_current != 0:
        avg_percent_change = total_delta / total_current * 100

    return ImpactSummary(
        total_monthly_delta=total_delta,
        total_annual_delta=total_delta * annualization_factor,
        affected_unit_count=increased + decreased,
        increased_count=increased,
        decreased_count=decreased,
        avg_percent_change=avg_percent_change,
        unaffected_count=int(len(frame)) - increased - decreased,
        total_current_rent=total_current,
        total_proposed_rent=float(frame["proposed_rent"].sum()),
    )
