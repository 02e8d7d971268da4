# This module replays a recorded pricing session against a unit file for debugging and demos.
# It exists so operators can reproduce an editing sequence deterministically without a UI or real timers.
# Actions are read from YAML and driven through PricingSession on a manual clock.
# Adjust and bulk actions can name a configured preset by index instead of a literal value.
# The final price map, impact summary, and history position are printed as JSON.

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from src.common.logging import configure_logging
from src.common.settings import get_settings
from src.rent_optimizer.bulk_ops import (
    AllUnits,
    BulkOperation,
    BulkScope,
    ByUnitType,
    FixedAdd,
    FixedSubtract,
    Percentage,
    ResetToRecommendation,
    SetToMarket,
)
from src.rent_optimizer.dedupe import find_duplicate_ids, flatten_portfolio
from src.rent_optimizer.engine import PricingSession
from src.rent_optimizer.optimizer_config import OptimizerConfig, load_optimizer_config
from src.rent_optimizer.scheduler import ManualScheduler
from src.rent_optimizer.sorting import VALID_SORT_DIRECTIONS, SortSpec
from src.rent_optimizer.units import BaselineReport, Unit

LOGGER = logging.getLogger("rent_optimizer")

ACTION_TYPES = {"set_price", "adjust", "bulk", "reset", "undo", "redo", "advance", "flush"}


class ReplayError(ValueError):
    """Raised when a units file or action log cannot be replayed."""


def load_units_payload(path: str) -> tuple[list[Unit], BaselineReport | None]:
    """Read units from JSON: a plain list, or an object with `units` or per-property `properties`."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    baseline_report: BaselineReport | None = None

    if isinstance(payload, list):
        return [Unit.model_validate(item) for item in payload], None
    if not isinstance(payload, dict):
        raise ReplayError(f"Units file {path} must hold a list or an object, got: {type(payload).__name__}")

    if payload.get("baseline_report") is not None:
        baseline_report = BaselineReport.model_validate(payload["baseline_report"])

    if "properties" in payload:
        properties = payload["properties"]
        if not isinstance(properties, dict):
            raise ReplayError("`properties` must map a property name to a list of units")
        portfolio = {
            str(name): [Unit.model_validate(item) for item in items] for name, items in properties.items()
        }
        return flatten_portfolio(portfolio), baseline_report

    units = payload.get("units")
    if not isinstance(units, list):
        raise ReplayError(f"Units file {path} must contain a `units` list or a `properties` mapping")
    return [Unit.model_validate(item) for item in units], baseline_report


def load_actions(path: str) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or []
    if isinstance(loaded, dict):
        loaded = loaded.get("actions") or []
    if not isinstance(loaded, list):
        raise ReplayError(f"Actions file {path} must hold a list of actions")

    actions: list[dict[str, Any]] = []
    for position, item in enumerate(loaded):
        if not isinstance(item, dict) or item.get("type") not in ACTION_TYPES:
            raise ReplayError(f"Action #{position} must be a mapping with type in {sorted(ACTION_TYPES)}")
        actions.append(dict(item))
    return actions


def parse_scope(raw: Any) -> BulkScope:
    if raw is None or raw == "all":
        return AllUnits()
    if isinstance(raw, Mapping) and raw.get("unit_type") is not None:
        return ByUnitType(unit_type=str(raw["unit_type"]))
    raise ReplayError(f"Unsupported bulk scope: {raw!r}")


def _preset(raw: Mapping[str, Any], presets: Sequence[float], *, fallback: float | None = None) -> float:
    """Resolve `value`, or `preset` as an index into a configured preset list."""

    if raw.get("value") is not None:
        return float(raw["value"])
    if raw.get("preset") is not None:
        position = int(raw["preset"])
        if not 0 <= position < len(presets):
            raise ReplayError(f"Preset index {position} is out of range for presets {list(presets)}")
        return float(presets[position])
    if fallback is not None:
        return fallback
    raise ReplayError(f"Action needs a `value` or a `preset`: {dict(raw)!r}")


def parse_operation(raw: Mapping[str, Any], config: OptimizerConfig | None = None) -> BulkOperation:
    config = config or OptimizerConfig()
    op = raw.get("op")
    if op == "percentage":
        return Percentage(percent=_preset(raw, config.bulk_percentage_presets))
    if op == "fixed_add":
        return FixedAdd(amount=float(raw["value"]))
    if op == "fixed_subtract":
        return FixedSubtract(amount=float(raw["value"]))
    if op == "set_to_market":
        market_presets = config.market_multiplier_presets
        default_multiplier = float(market_presets[0]) if market_presets else 1.0
        return SetToMarket(multiplier=_preset(raw, market_presets, fallback=default_multiplier))
    if op == "reset":
        return ResetToRecommendation()
    raise ReplayError(f"Unsupported bulk op: {op!r}")


def _apply_action(session: PricingSession, scheduler: ManualScheduler, action: Mapping[str, Any]) -> None:
    action_type = action["type"]
    if action_type == "set_price":
        session.set_price(str(action["unit_id"]), action.get("value"))
    elif action_type == "adjust":
        if action.get("delta") is not None:
            delta = float(action["delta"])
        else:
            delta = _preset({"preset": action.get("step")}, session.config.quick_adjust_steps)
        session.adjust(str(action["unit_id"]), delta)
    elif action_type == "bulk":
        session.apply_bulk(parse_scope(action.get("scope")), parse_operation(action, session.config))
    elif action_type == "reset":
        session.reset_to_recommendation()
    elif action_type == "undo":
        session.undo()
    elif action_type == "redo":
        session.redo()
    elif action_type == "advance":
        scheduler.advance(int(action.get("ms", session.config.debounce_window_ms)))
    elif action_type == "flush":
        session.flush_pending()


def replay_session(
    *,
    units: Sequence[Unit],
    actions: Sequence[Mapping[str, Any]],
    config: OptimizerConfig,
    baseline_report: BaselineReport | None = None,
    sort_spec: SortSpec | None = None,
) -> dict[str, Any]:
    scheduler = ManualScheduler()
    duplicate_ids = find_duplicate_ids(units)
    with PricingSession(
        units=units,
        config=config,
        scheduler=scheduler,
        baseline_report=baseline_report,
    ) as session:
        for action in actions:
            _apply_action(session, scheduler, action)
        pending_edit = session.has_pending_edit
        prices = session.get_snapshot()
        ordered = session.sorted_units(sort_spec)

        result = {
            "unit_count": len(session.units),
            "duplicate_unit_ids": duplicate_ids,
            "actions_replayed": len(actions),
            "pending_edit": pending_edit,
            "history_index": session.history_index,
            "history_length": session.history_length,
            "prices": {unit.id: prices[unit.id] for unit in ordered},
            "impact": session.impact().to_dict(),
            "export_summary": session.export_summary(),
        }
    LOGGER.info(
        "Replayed %d actions over %d units (history %d/%d)",
        len(actions),
        result["unit_count"],
        result["history_index"],
        result["history_length"],
    )
    return result


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a recorded unit pricing session")
    parser.add_argument("--units", type=str, required=True, help="JSON file with units or per-property units")
    parser.add_argument("--actions", type=str, required=True, help="YAML file with the recorded action log")
    parser.add_argument("--config", type=str, default=None, help="Optimizer policy YAML (defaults to settings)")
    parser.add_argument("--sort", type=str, default=None, help="Output order as column:direction, e.g. change:desc")
    return parser.parse_args()


def parse_sort(raw: str | None) -> SortSpec | None:
    if raw is None:
        return None
    column, _, direction = raw.partition(":")
    direction = direction or "asc"
    if direction not in VALID_SORT_DIRECTIONS:
        raise ReplayError(f"Unsupported sort direction '{direction}'. Supported directions: asc, desc")
    spec = SortSpec().toggle(column)  # type: ignore[arg-type]
    if direction == "desc":
        spec = spec.toggle(column)  # type: ignore[arg-type]
    return spec


def main() -> None:
    args = parse_args()
    configure_logging()
    config_path = args.config or get_settings().OPTIMIZER_CONFIG_PATH
    config = load_optimizer_config(config_path=config_path)
    units, baseline_report = load_units_payload(args.units)
    result = replay_session(
        units=units,
        actions=load_actions(args.actions),
        config=config,
        baseline_report=baseline_report,
        sort_spec=parse_sort(args.sort),
    )
    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
