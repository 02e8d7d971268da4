# This module is the stateful entrypoint of the unit pricing optimization engine.
# It exists to hold the working price map and its history behind explicit operations and subscriber events.
# Typed price edits are debounced into one commit; quick adjusts, bulk operations, undo, and redo are immediate.
# A pending typed edit is flushed before any discrete action so every logical edit stays undoable.

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol

import pandas as pd

from src.rent_optimizer.bulk_ops import (
    AllUnits,
    BulkOperation,
    BulkScope,
    ResetToRecommendation,
    apply_bulk_operation,
    unit_types,
    units_in_scope,
)
from src.rent_optimizer.debounce import DebounceCoordinator
from src.rent_optimizer.dedupe import dedupe_units
from src.rent_optimizer.history import HistoryManager
from src.rent_optimizer.impact import ImpactSummary, compute_impact
from src.rent_optimizer.optimizer_config import OptimizerConfig
from src.rent_optimizer.price_store import PriceMap, initialize_prices
from src.rent_optimizer.pricing_frame import build_export_frame, build_export_summary
from src.rent_optimizer.scheduler import DebounceScheduler
from src.rent_optimizer.sorting import SortSpec, sort_units
from src.rent_optimizer.units import BaselineReport, Unit, coerce_rent

LOGGER = logging.getLogger("rent_optimizer")

EventKind = Literal["edit", "commit", "undo", "redo"]


class SessionClosedError(RuntimeError):
    """Raised when a closed pricing session is asked to change state."""


@dataclass(frozen=True)
class SessionEvent:
    kind: EventKind
    snapshot: PriceMap
    history_index: int
    history_length: int


Subscriber = Callable[[SessionEvent], None]


class PriceApplier(Protocol):
    def apply_prices(self, unit_prices: dict[str, float]) -> Any: ...


class PricingSession:
    """Single-editor pricing session over a deduplicated unit set."""

    def __init__(
        self,
        *,
        units: Iterable[Unit],
        config: OptimizerConfig,
        scheduler: DebounceScheduler,
        baseline_report: BaselineReport | None = None,
    ) -> None:
        self._units: list[Unit] = dedupe_units(units)
        self._unit_ids = {unit.id for unit in self._units}
        self._config = config
        self._baseline_report = baseline_report
        self._history = HistoryManager(initialize_prices(self._units))
        self._working: PriceMap = self._history.current()
        self._debouncer = DebounceCoordinator(scheduler=scheduler, window_ms=config.debounce_window_ms)
        self._subscribers: list[Subscriber] = []
        self._closed = False
        LOGGER.debug("Pricing session opened with %d units", len(self._units))

    @classmethod
    def from_unit_lists(
        cls,
        unit_lists: Iterable[Iterable[Unit]],
        *,
        config: OptimizerConfig,
        scheduler: DebounceScheduler,
        baseline_report: BaselineReport | None = None,
    ) -> PricingSession:
        return cls(
            units=dedupe_units(*unit_lists),
            config=config,
            scheduler=scheduler,
            baseline_report=baseline_report,
        )

    def __enter__(self) -> PricingSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def units(self) -> list[Unit]:
        return list(self._units)

    @property
    def unit_types(self) -> list[str]:
        return unit_types(self._units)

    @property
    def baseline_report(self) -> BaselineReport | None:
        return self._baseline_report

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_edit(self) -> bool:
        return self._debouncer.pending

    @property
    def history_index(self) -> int:
        return self._history.index

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo or self._debouncer.pending

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo and not self._debouncer.pending

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def get_snapshot(self) -> PriceMap:
        return dict(self._working)

    def committed_prices(self) -> PriceMap:
        return self._history.current()

    def commit(self, snapshot: Mapping[str, Any]) -> int:
        """Commit a full price map as a new history entry; unknown ids are dropped."""

        self._ensure_open()
        self._debouncer.cancel()
        merged = dict(self._working)
        for unit_id, value in snapshot.items():
            if unit_id in self._unit_ids:
                merged[unit_id] = coerce_rent(value)
        self._working = merged
        return self._commit_working()

    def set_price(self, unit_id: str, raw_value: Any) -> None:
        self._ensure_open()
        if unit_id not in self._unit_ids:
            LOGGER.warning("Ignoring price edit for unknown unit_id=%s", unit_id)
            return
        self._working[unit_id] = coerce_rent(raw_value)
        self._notify("edit")
        self._debouncer.schedule(self._commit_working)

    def adjust(self, unit_id: str, delta: float) -> None:
        self._ensure_open()
        if unit_id not in self._unit_ids:
            LOGGER.warning("Ignoring quick adjust for unknown unit_id=%s", unit_id)
            return
        self._debouncer.flush()
        self._working[unit_id] = max(0.0, self._working[unit_id] + float(delta))
        self._commit_working()

    def apply_bulk(self, scope: BulkScope, operation: BulkOperation) -> PriceMap:
        self._ensure_open()
        self._debouncer.flush()
        if isinstance(operation, ResetToRecommendation):
            scope = AllUnits()
        if not units_in_scope(self._units, scope):
            LOGGER.info("Bulk operation %r matched no units for scope %r", operation, scope)
            return self.get_snapshot()

        self._working = apply_bulk_operation(
            units=self._units,
            prices=self._working,
            scope=scope,
            operation=operation,
        )
        self._commit_working()
        LOGGER.info("Applied bulk operation %r to scope %r", operation, scope)
        return self.get_snapshot()

    def reset_to_recommendation(self) -> PriceMap:
        return self.apply_bulk(AllUnits(), ResetToRecommendation())

    def undo(self) -> bool:
        self._ensure_open()
        self._debouncer.flush()
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._working = snapshot
        self._notify("undo")
        return True

    def redo(self) -> bool:
        self._ensure_open()
        self._debouncer.flush()
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._working = snapshot
        self._notify("redo")
        return True

    def flush_pending(self) -> bool:
        self._ensure_open()
        return self._debouncer.flush()

    def impact(self) -> ImpactSummary:
        return compute_impact(
            units=self._units,
            prices=self._working,
            annualization_factor=self._config.annualization_factor,
        )

    def sorted_units(self, spec: SortSpec | None = None) -> list[Unit]:
        if spec is None:
            spec = self.default_sort_spec()
        return sort_units(
            units=self._units,
            prices=self._working,
            spec=spec,
            annualization_factor=self._config.annualization_factor,
        )

    def default_sort_spec(self) -> SortSpec:
        if self._config.default_sort_column is None:
            return SortSpec()
        return SortSpec(
            column=self._config.default_sort_column,  # type: ignore[arg-type]
            direction=self._config.default_sort_direction,  # type: ignore[arg-type]
        )

    def export_frame(self) -> pd.DataFrame:
        return build_export_frame(
            units=self._units,
            prices=self._working,
            annualization_factor=self._config.annualization_factor,
        )

    def export_summary(self) -> dict[str, Any]:
        return build_export_summary(impact=self.impact(), baseline_report=self._baseline_report)

    def apply_changes(self, applier: PriceApplier) -> Any:
        self._ensure_open()
        self._debouncer.flush()
        prices = self.committed_prices()
        LOGGER.info("Handing %d unit prices to the apply collaborator", len(prices))
        return applier.apply_prices(prices)

    def close(self) -> None:
        if self._closed:
            return
        if self._debouncer.pending:
            LOGGER.info("Closing pricing session with an uncommitted price edit; the edit is discarded")
        self._debouncer.cancel()
        self._subscribers.clear()
        self._closed = True

    def _commit_working(self) -> int:
        index = self._history.push(self._working)
        LOGGER.debug("Committed price snapshot index=%d length=%d", index, len(self._history))
        self._notify("commit")
        return index

    def _notify(self, kind: EventKind) -> None:
        event = SessionEvent(
            kind=kind,
            snapshot=dict(self._working),
            history_index=self._history.index,
            history_length=len(self._history),
        )
        for callback in list(self._subscribers):
            callback(event)

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Pricing session is closed")
