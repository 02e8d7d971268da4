# This module keeps the linear undo/redo history of committed price snapshots.
# It exists so pointer movement and branch truncation follow one set of rules for every edit source.
# Snapshots are copied on the way in and on the way out; callers never share a mutable map with it.
# Boundary moves are no-ops that return None instead of raising.

from __future__ import annotations

from collections.abc import Mapping

from src.rent_optimizer.price_store import PriceMap


class HistoryManager:
    """Linear snapshot history with a current pointer; new commits discard the redo branch."""

    def __init__(self, initial_snapshot: Mapping[str, float]) -> None:
        self._snapshots: list[PriceMap] = [dict(initial_snapshot)]
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def current(self) -> PriceMap:
        return dict(self._snapshots[self._index])

    def push(self, snapshot: Mapping[str, float]) -> int:
        del self._snapshots[self._index + 1 :]
        self._snapshots.append(dict(snapshot))
        self._index = len(self._snapshots) - 1
        return self._index

    def undo(self) -> PriceMap | None:
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current()

    def redo(self) -> PriceMap | None:
        if not self.can_redo:
            return None
        self._index += 1
        return self.current()
