# This test file validates loading and validation of the optimizer policy config.
# It exists to ensure YAML defaults, environment overrides, and invalid values behave predictably.
# Temporary YAML files keep each case independent of the checked-in policy.

from __future__ import annotations

from pathlib import Path

import pytest

from src.rent_optimizer.optimizer_config import (
    OptimizerConfig,
    OptimizerConfigError,
    load_optimizer_config,
    validate_optimizer_config,
)

ROOT_DIR = Path(__file__).resolve().parents[2]


def test_checked_in_policy_loads() -> None:
    config = load_optimizer_config(config_path=str(ROOT_DIR / "configs" / "optimizer_policy.yaml"))

    assert config == OptimizerConfig()
    assert config.to_dict()["quick_adjust_steps"] == [-10.0, -5.0, 5.0, 10.0]


def test_missing_path_uses_defaults() -> None:
    assert load_optimizer_config(config_path=None) == OptimizerConfig()


def test_yaml_values_are_applied(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text(
        "debounce_window_ms: 150\n"
        "annualization_factor: 6\n"
        "bulk_percentage_presets: [1, 3]\n"
        "default_sort:\n"
        "  column: change\n"
        "  direction: DESC\n",
        encoding="utf-8",
    )

    config = load_optimizer_config(config_path=str(path))

    assert config.debounce_window_ms == 150
    assert config.annualization_factor == 6
    assert config.bulk_percentage_presets == [1.0, 3.0]
    assert config.default_sort_column == "change"
    assert config.default_sort_direction == "desc"


def test_env_overrides_take_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text("debounce_window_ms: 150\n", encoding="utf-8")
    monkeypatch.setenv("OPTIMIZER_DEBOUNCE_WINDOW_MS", "500")
    monkeypatch.setenv("OPTIMIZER_QUICK_ADJUST_STEPS", "-25, 25")
    monkeypatch.setenv("OPTIMIZER_DEFAULT_SORT_COLUMN", "unit_number")

    config = load_optimizer_config(config_path=str(path))

    assert config.debounce_window_ms == 500
    assert config.quick_adjust_steps == [-25.0, 25.0]
    assert config.default_sort_column == "unit_number"


def test_null_sort_direction_uses_default(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text("default_sort:\n  column: tag\n  direction: null\n", encoding="utf-8")

    config = load_optimizer_config(config_path=str(path))

    assert config.default_sort_column == "tag"
    assert config.default_sort_direction == "asc"


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(OptimizerConfigError, match="must be a mapping"):
        load_optimizer_config(config_path=str(path))


@pytest.mark.parametrize(
    ("config", "message"),
    [
        (OptimizerConfig(debounce_window_ms=-1), "debounce_window_ms"),
        (OptimizerConfig(annualization_factor=0), "annualization_factor"),
        (OptimizerConfig(market_multiplier_presets=[1.0, 0.0]), "market_multiplier_presets"),
        (OptimizerConfig(default_sort_column="floor"), "default_sort_column"),
        (OptimizerConfig(default_sort_direction="up"), "default_sort_direction"),
    ],
)
def test_invalid_values_are_rejected(config: OptimizerConfig, message: str) -> None:
    with pytest.raises(OptimizerConfigError, match=message):
        validate_optimizer_config(config)


def test_config_error_is_a_value_error() -> None:
    assert issubclass(OptimizerConfigError, ValueError)
