"""Per-area completion under the threshold and full-claim policies."""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, FrozenSet, Set

from arealock.core.types import AreaStatus, CompletionMode
from arealock.data import state_keys
from arealock.data.state_codec import decode_points_map, encode_points_map, join_ids, split_ids
from arealock.data.state_store import StateStore
from arealock.services.area_graph import AreaGraph
from arealock.services.points_ledger import PointsLedger

if TYPE_CHECKING:
    from arealock.services.task_grid import TaskGrid

logger = logging.getLogger(__name__)


class AreaProgressCoordinator:
    """Combines the area graph, points ledger and task grid into area completion.

    THRESHOLD: an area is complete once the points earned in it reach its
    threshold. Completions are persisted and never revoked.
    FULL_CLAIM: an area is complete when every tile of its grid is claimed;
    nothing is persisted, the answer is recomputed from the grid.
    """

    def __init__(
        self,
        *,
        area_graph: AreaGraph,
        ledger: PointsLedger,
        store: StateStore,
        mode: CompletionMode = CompletionMode.FULL_CLAIM,
    ) -> None:
        self._area_graph = area_graph
        self._ledger = ledger
        self._store = store
        self._mode = mode
        self._task_grid: TaskGrid | None = None
        self._lock = threading.RLock()
        self._earned_in_area: Dict[str, int] = {}
        self._completed: Set[str] = set()

    @property
    def mode(self) -> CompletionMode:
        return self._mode

    def bind_task_grid(self, task_grid: "TaskGrid") -> None:
        self._task_grid = task_grid

    def load(self) -> None:
        """Read per-area points and completions, then add areas that now meet their threshold."""
        with self._lock:
            self._earned_in_area = decode_points_map(
                self._store.get(state_keys.POINTS_EARNED_PER_AREA)
            )
            self._completed = split_ids(self._store.get(state_keys.COMPLETED_AREAS))
            if self._mode is CompletionMode.THRESHOLD:
                for area_id, earned in self._earned_in_area.items():
                    if self._meets_threshold(area_id, earned):
                        self._completed.add(area_id)
            self._persist_completed()

    def earned_in_area(self, area_id: str) -> int:
        with self._lock:
            return self._earned_in_area.get(area_id, 0)

    def earned_by_area(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._earned_in_area)

    def points_to_complete(self, area_id: str) -> int:
        return self._area_graph.points_to_complete(area_id)

    def completed_ids(self) -> FrozenSet[str]:
        """The persisted threshold completions."""
        with self._lock:
            return frozenset(self._completed)

    def effective_completed_ids(self) -> FrozenSet[str]:
        """Completed areas used to gate further unlocks under the active mode."""
        if self._mode is CompletionMode.FULL_CLAIM:
            grid = self._require_task_grid()
            return frozenset(
                area_id
                for area_id in self._area_graph.unlocked_ids()
                if grid.is_fully_claimed(area_id)
            )
        return self.completed_ids()

    def is_complete(self, area_id: str) -> bool:
        if self._mode is CompletionMode.FULL_CLAIM:
            return self._require_task_grid().is_fully_claimed(area_id)
        with self._lock:
            return area_id in self._completed

    def get_area_status(self, area_id: str) -> AreaStatus:
        if area_id not in self._area_graph.unlocked_ids():
            return AreaStatus.LOCKED
        return AreaStatus.COMPLETE if self.is_complete(area_id) else AreaStatus.UNLOCKED

    def add_earned_in_area(self, area_id: str, amount: int) -> None:
        """Credit points earned in an area to both the area tally and the global ledger."""
        if amount <= 0:
            return
        with self._lock:
            total = self._earned_in_area.get(area_id, 0) + amount
            self._earned_in_area[area_id] = total
            self._ledger.add_earned(amount)
            self._store.set(
                state_keys.POINTS_EARNED_PER_AREA, encode_points_map(self._earned_in_area)
            )
            if self._mode is not CompletionMode.THRESHOLD:
                return
            if area_id in self._completed or not self._meets_threshold(area_id, total):
                return
            self._completed.add(area_id)
            self._persist_completed()
        logger.info(
            "Area '%s' completed (%d / %d points)",
            area_id,
            total,
            self.points_to_complete(area_id),
        )

    def clear(self) -> None:
        """Forget per-area points and completions."""
        with self._lock:
            self._earned_in_area = {}
            self._completed = set()
            self._store.set(state_keys.POINTS_EARNED_PER_AREA, "")
            self._persist_completed()

    def _meets_threshold(self, area_id: str, earned: int) -> bool:
        threshold = self.points_to_complete(area_id)
        return threshold > 0 and earned >= threshold

    def _persist_completed(self) -> None:
        self._store.set(state_keys.COMPLETED_AREAS, join_ids(self._completed))

    def _require_task_grid(self) -> "TaskGrid":
        if self._task_grid is None:
            raise RuntimeError("Full-claim completion needs a task grid; call bind_task_grid first.")
        return self._task_grid
