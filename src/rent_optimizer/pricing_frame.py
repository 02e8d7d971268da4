# This module builds the per-unit pricing frame shared by impact statistics and the export view.
# It exists so change and annual-impact columns are derived once, with the same fallbacks everywhere.
# The export helpers shape that frame into the rows and summary block the spreadsheet collaborator renders.
# Nothing here writes files; the export writer lives outside the engine.

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import pandas as pd

from src.rent_optimizer.price_store import proposed_price
from src.rent_optimizer.units import BaselineReport, Unit

if TYPE_CHECKING:
    from src.rent_optimizer.impact import ImpactSummary

PRICING_FRAME_COLUMNS = [
    "unit_id",
    "unit_number",
    "unit_type",
    "property_name",
    "status",
    "current_rent",
    "recommended_rent",
    "market_average",
    "proposed_rent",
    "change",
    "annual_impact",
]

EXPORT_COLUMNS = [
    "unit_number",
    "unit_type",
    "current_rent",
    "recommended_rent",
    "proposed_rent",
    "change",
    "annual_impact",
    "status",
]


def build_pricing_frame(
    *,
    units: Sequence[Unit],
    prices: Mapping[str, float],
    annualization_factor: int = 12,
) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for unit in units:
        current = unit.current_rent_amount
        proposed = proposed_price(unit, prices)
        change = proposed - current
        rows.append(
            {
                "unit_id": unit.id,
                "unit_number": unit.unit_number,
                "unit_type": unit.unit_type,
                "property_name": unit.property_name,
                "status": unit.status,
                "current_rent": current,
                "recommended_rent": unit.recommended_rent_amount,
                "market_average": unit.market_average_amount,
                "proposed_rent": proposed,
                "change": change,
                "annual_impact": change * annualization_factor,
            }
        )

    frame = pd.DataFrame(rows, columns=PRICING_FRAME_COLUMNS)
    for column in ("current_rent", "proposed_rent", "change", "annual_impact"):
        frame[column] = frame[column].astype(float)
    return frame


def build_export_frame(
    *,
    units: Sequence[Unit],
    prices: Mapping[str, float],
    annualization_factor: int = 12,
) -> pd.DataFrame:
    frame = build_pricing_frame(units=units, prices=prices, annualization_factor=annualization_factor)
    return frame[EXPORT_COLUMNS].copy()


def build_export_summary(
    *,
    impact: ImpactSummary,
    baseline_report: BaselineReport | None,
) -> dict[str, Any]:
    return {
        "total_increase": impact.total_annual_delta,
        "affected_units": impact.affected_unit_count,
        "avg_increase": round(impact.avg_percent_change, 2),
        "risk_level": baseline_report.risk_level if baseline_report is not None else "unknown",
    }
