# This module defines runtime configuration for the unit pricing optimization engine.
# It exists so the debounce window and the operator presets come from one policy surface.
# Preset lists drive quick-adjust and bulk controls, including the replay tool; sessions read only the window and sort.
# The loader merges YAML defaults with OPTIMIZER_* environment overrides and validates the result.
# Sessions receive the resolved config explicitly and never read the environment themselves.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from src.rent_optimizer.sorting import VALID_SORT_COLUMNS, VALID_SORT_DIRECTIONS

DEFAULT_CONFIG_PATH = "configs/optimizer_policy.yaml"


class OptimizerConfigError(ValueError):
    """Raised when optimizer configuration values are invalid."""


def _load_yaml(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise OptimizerConfigError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value


def _env_int(name: str, default: int | None = None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float_list(name: str, default: list[float]) -> list[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return [float(item) for item in value.split(",") if item.strip()]


def _as_float_list(value: Any, field_name: str) -> list[float]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise OptimizerConfigError(f"{field_name} must be a list of numbers")
    return [float(item) for item in value]


@dataclass(frozen=True)
class OptimizerConfig:
    debounce_window_ms: int = 300
    annualization_factor: int = 12
    quick_adjust_steps: list[float] = field(default_factory=lambda: [-10.0, -5.0, 5.0, 10.0])
    bulk_percentage_presets: list[float] = field(default_factory=lambda: [-5.0, -2.0, 2.0, 5.0])
    market_multiplier_presets: list[float] = field(default_factory=lambda: [1.0, 1.05])
    default_sort_column: str | None = None
    default_sort_direction: str = "asc"

    def to_dict(self) -> dict[str, Any]:
        return {
            "debounce_window_ms": self.debounce_window_ms,
            "annualization_factor": self.annualization_factor,
            "quick_adjust_steps": list(self.quick_adjust_steps),
            "bulk_percentage_presets": list(self.bulk_percentage_presets),
            "market_multiplier_presets": list(self.market_multiplier_presets),
            "default_sort_column": self.default_sort_column,
            "default_sort_direction": self.default_sort_direction,
        }


def validate_optimizer_config(config: OptimizerConfig) -> None:
    if config.debounce_window_ms < 0:
        raise OptimizerConfigError("debounce_window_ms must be nonnegative")
    if config.annualization_factor <= 0:
        raise OptimizerConfigError("annualization_factor must be > 0")
    if any(multiplier <= 0 for multiplier in config.market_multiplier_presets):
        raise OptimizerConfigError("market_multiplier_presets must all be > 0")
    if config.default_sort_column is not None and config.default_sort_column not in VALID_SORT_COLUMNS:
        raise OptimizerConfigError(
            f"default_sort_column must be one of {sorted(VALID_SORT_COLUMNS)}, got {config.default_sort_column!r}"
        )
    if config.default_sort_direction not in VALID_SORT_DIRECTIONS:
        raise OptimizerConfigError(
            f"default_sort_direction must be one of {sorted(VALID_SORT_DIRECTIONS)}, got {config.default_sort_direction!r}"
        )


def load_optimizer_config(*, config_path: str | None = DEFAULT_CONFIG_PATH) -> OptimizerConfig:
    cfg = _load_yaml(config_path) if config_path is not None else {}
    defaults = OptimizerConfig()
    sort_cfg = dict(cfg.get("default_sort") or {})

    debounce_window_ms = int(
        _env_int("OPTIMIZER_DEBOUNCE_WINDOW_MS", int(cfg.get("debounce_window_ms", defaults.debounce_window_ms)))
        or 0
    )
    annualization_factor = int(
        _env_int("OPTIMIZER_ANNUALIZATION_FACTOR", int(cfg.get("annualization_factor", defaults.annualization_factor)))
        or 0
    )

    quick_adjust_steps = _env_float_list(
        "OPTIMIZER_QUICK_ADJUST_STEPS",
        _as_float_list(cfg.get("quick_adjust_steps", defaults.quick_adjust_steps), "quick_adjust_steps"),
    )
    bulk_percentage_presets = _env_float_list(
        "OPTIMIZER_BULK_PERCENTAGE_PRESETS",
        _as_float_list(cfg.get("bulk_percentage_presets", defaults.bulk_percentage_presets), "bulk_percentage_presets"),
    )
    market_multiplier_presets = _env_float_list(
        "OPTIMIZER_MARKET_MULTIPLIER_PRESETS",
        _as_float_list(
            cfg.get("market_multiplier_presets", defaults.market_multiplier_presets), "market_multiplier_presets"
        ),
    )

    raw_sort_column = sort_cfg.get("column")
    default_sort_column = _env_str(
        "OPTIMIZER_DEFAULT_SORT_COLUMN",
        str(raw_sort_column) if raw_sort_column is not None else None,
    )
    raw_sort_direction = sort_cfg.get("direction")
    if raw_sort_direction is None:
        raw_sort_direction = defaults.default_sort_direction
    default_sort_direction = str(
        _env_str("OPTIMIZER_DEFAULT_SORT_DIRECTION", str(raw_sort_direction))
    ).lower()

    config = OptimizerConfig(
        debounce_window_ms=debounce_window_ms,
        annualization_factor=annualization_factor,
        quick_adjust_steps=quick_adjust_steps,
        bulk_percentage_presets=bulk_percentage_presets,
        market_multiplier_presets=market_multiplier_presets,
        default_sort_column=default_sort_column,
        default_sort_direction=default_sort_direction,
    )
    validate_optimizer_config(config)
    return config
