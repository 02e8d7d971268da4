# This support module builds unit records and sessions for the rent optimizer tests.
# It exists so individual test files only state the fields that matter to each case.
# Sessions run on the manual scheduler so debounce behavior is driven explicitly.

from __future__ import annotations

from typing import Any

from src.rent_optimizer.engine import PricingSession
from src.rent_optimizer.optimizer_config import OptimizerConfig
from src.rent_optimizer.scheduler import ManualScheduler
from src.rent_optimizer.units import BaselineReport, Unit


def make_unit(unit_id: str, **overrides: Any) -> Unit:
    fields: dict[str, Any] = {
        "id": unit_id,
        "unit_number": f"Unit {unit_id}",
        "unit_type": "1BR",
        "current_rent": 1000,
    }
    fields.update(overrides)
    return Unit.model_validate(fields)


def scenario_units() -> list[Unit]:
    return [
        make_unit("u1", unit_type="1BR", current_rent=950, recommended_rent=1000, market_average=1020),
        make_unit("u2", unit_type="2BR", current_rent=1150, recommended_rent=1200, market_average=1180),
        make_unit("u3", unit_type="1BR", current_rent=900),
    ]


def build_session(
    units: list[Unit] | None = None,
    *,
    window_ms: int = 300,
    baseline_report: BaselineReport | None = None,
) -> tuple[PricingSession, ManualScheduler]:
    scheduler = ManualScheduler()
    session = PricingSession(
        units=units if units is not None else scenario_units(),
        config=OptimizerConfig(debounce_window_ms=window_ms),
        scheduler=scheduler,
        baseline_report=baseline_report,
    )
    return session, scheduler
