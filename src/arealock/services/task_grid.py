"""Per-area task grids and their reveal/claim state machine."""
from __future__ import annotations

import logging
import threading
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

from arealock.core.rng import RNG
from arealock.core.types import TaskMode, TaskState
from arealock.data import state_keys
from arealock.data.state_codec import TILE_LIST_SEPARATOR, join_ids, parse_int, split_ids
from arealock.data.state_store import StateStore
from arealock.domain.task_tile import (
    GRID_RADIUS,
    TaskTile,
    derive_tile_state,
    iter_lattice,
    parse_tile_id,
    tier_of,
    tile_id,
)
from arealock.services.area_graph import AreaGraph
from arealock.services.area_progress import AreaProgressCoordinator
from arealock.services.task_catalog import TaskCatalog
from arealock.services.task_layout import PLACEHOLDER_NAME, assign_tasks, tasks_for_area

logger = logging.getLogger(__name__)

DEFAULT_TIER_POINTS: Dict[int, int] = {1: 1, 2: 2, 3: 3, 4: 4, 5: 5}
CENTER_NAME = "Free"


class TaskGrid:
    """Derives tile state from the persisted claimed/completed id sets of each area.

    The lattice is fixed by the radius; only the two id sets are stored. Claiming
    a tile reveals its cardinal neighbours on the next query with no extra step.
    """

    def __init__(
        self,
        *,
        catalog: TaskCatalog,
        area_graph: AreaGraph,
        coordinator: AreaProgressCoordinator,
        store: StateStore,
        tier_points: Mapping[int, int] | None = None,
        task_mode: TaskMode = TaskMode.MEMBERS,
        radius: int = GRID_RADIUS,
    ) -> None:
        self._catalog = catalog
        self._area_graph = area_graph
        self._coordinator = coordinator
        self._store = store
        self._tier_points = dict(DEFAULT_TIER_POINTS if tier_points is None else tier_points)
        self._task_mode = task_mode
        self._radius = radius
        self._lock = threading.RLock()
        self._claimed: Dict[str, FrozenSet[str]] = {}
        self._completed: Dict[str, FrozenSet[str]] = {}
        self._grids: Dict[str, Tuple[TaskTile, ...]] = {}
        self._grid_stamp: Tuple[int, int] = (-1, -1)

    @property
    def radius(self) -> int:
        return self._radius

    def points_for_tier(self, tier: int) -> int:
        """Points for claiming a tile of ``tier``; the centre is worth nothing."""
        if tier <= 0:
            return 0
        if tier in self._tier_points:
            return self._tier_points[tier]
        return self._tier_points.get(max(self._tier_points, default=0), 0)

    def _lattice_coords(self, value: str) -> Tuple[int, int] | None:
        parsed = parse_tile_id(value)
        if parsed is None or tier_of(*parsed) > self._radius:
            return None
        return parsed

    def _tile_coords(self, area_id: str, value: str) -> Tuple[int, int] | None:
        if self._area_graph.area(area_id) is None:
            return None
        return self._lattice_coords(value)

    # ------------------------------------------------------------------
    # Grid layout
    # ------------------------------------------------------------------
    def grid_for_area(self, area_id: str) -> Tuple[TaskTile, ...]:
        """Tiles of the area's grid: centre first, then ring by ring."""
        with self._lock:
            stamp = (self._catalog.revision, self.grid_reset_counter())
            if stamp != self._grid_stamp:
                self._grids.clear()
                self._grid_stamp = stamp
            grid = self._grids.get(area_id)
            if grid is None:
                grid = self._build_grid(area_id, stamp[1])
                self._grids[area_id] = grid
            return grid

    def _build_grid(self, area_id: str, reset_counter: int) -> Tuple[TaskTile, ...]:
        pool = tasks_for_area(
            self._catalog.effective_tasks(),
            area_id,
            known_area_ids=[area.id for area in self._area_graph.areas()],
            task_mode=self._task_mode,
        )
        assigned = assign_tasks(pool, area_id, RNG.for_key(area_id, reset_counter), self._radius)
        tiles: List[TaskTile] = [TaskTile(row=0, col=0, points=0, display_name=CENTER_NAME)]
        for row, col in iter_lattice(self._radius):
            if row == 0 and col == 0:
                continue
            task = assigned[(row, col)]
            points = self.points_for_tier(tier_of(row, col))
            if task is None:
                tiles.append(TaskTile(row=row, col=col, points=points, display_name=PLACEHOLDER_NAME))
                continue
            tiles.append(
                TaskTile(
                    row=row,
                    col=col,
                    points=points,
                    display_name=task.display_name,
                    task_type=task.task_type,
                    required_area_ids=task.area_ids,
                    require_all_areas=task.area_requirement != "any",
                    requirements=task.requirements,
                )
            )
        logger.debug("Built task grid for '%s' (%d tiles)", area_id, len(tiles))
        return tuple(tiles)

    def tile(self, area_id: str, value: str) -> TaskTile | None:
        coords = self._lattice_coords(value)
        if coords is None:
            return None
        normalized = tile_id(*coords)
        for tile in self.grid_for_area(area_id):
            if tile.id == normalized:
                return tile
        return None

    def is_mystery(self, tile: TaskTile) -> bool:
        """True while the tile's task needs areas that are not unlocked."""
        return tile.is_mystery(self._area_graph.unlocked_ids())

    def invalidate(self) -> None:
        """Drop cached layouts, e.g. after the active area set changed."""
        with self._lock:
            self._grids.clear()

    # ------------------------------------------------------------------
    # Persisted progress
    # ------------------------------------------------------------------
    def claimed_ids(self, area_id: str) -> FrozenSet[str]:
        with self._lock:
            return self._load_set(area_id, self._claimed, state_keys.claimed_tiles_key(area_id))

    def completed_ids(self, area_id: str) -> FrozenSet[str]:
        with self._lock:
            return self._load_set(area_id, self._completed, state_keys.completed_tiles_key(area_id))

    def _load_set(self, area_id: str, cache: Dict[str, FrozenSet[str]], key: str) -> FrozenSet[str]:
        cached = cache.get(area_id)
        if cached is None:
            cached = frozenset(split_ids(self._store.get(key), TILE_LIST_SEPARATOR))
            cache[area_id] = cached
        return cached

    def _save_set(
        self,
        area_id: str,
        cache: Dict[str, FrozenSet[str]],
        key: str,
        values: FrozenSet[str],
    ) -> None:
        cache[area_id] = values
        self._store.set(key, join_ids(values, TILE_LIST_SEPARATOR))

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------
    def state(self, area_id: str, value: str) -> TaskState | None:
        """Derived state of one tile, or None for an unknown area or an off-lattice id."""
        coords = self._tile_coords(area_id, value)
        if coords is None:
            return None
        row, col = coords
        with self._lock:
            return derive_tile_state(row, col, self.claimed_ids(area_id), self.completed_ids(area_id))

    def tile_states(self, area_id: str) -> Dict[str, TaskState]:
        with self._lock:
            claimed = self.claimed_ids(area_id)
            completed = self.completed_ids(area_id)
        return {
            tile_id(row, col): derive_tile_state(row, col, claimed, completed)
            for row, col in iter_lattice(self._radius)
        }

    def revealed_tiles(self, area_id: str) -> List[TaskTile]:
        """Non-centre tiles that are currently revealed but not completed or claimed."""
        states = self.tile_states(area_id)
        return [
            tile
            for tile in self.grid_for_area(area_id)
            if not tile.is_center and states[tile.id] is TaskState.REVEALED
        ]

    def is_fully_claimed(self, area_id: str) -> bool:
        claimed = self.claimed_ids(area_id)
        return all(tile_id(row, col) in claimed for row, col in iter_lattice(self._radius))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_completed(self, area_id: str, value: str) -> bool:
        """Mark a tile's task as done. Returns False for unknown areas and off-lattice ids."""
        coords = self._tile_coords(area_id, value)
        if coords is None:
            return False
        normalized = tile_id(*coords)
        with self._lock:
            completed = self.completed_ids(area_id)
            if normalized not in completed:
                self._save_set(
                    area_id,
                    self._completed,
                    state_keys.completed_tiles_key(area_id),
                    completed | {normalized},
                )
                logger.debug("Task %s completed in '%s'", normalized, area_id)
        return True

    def claim(self, area_id: str, value: str) -> int:
        """Bank a tile. Returns the points awarded; repeated or unknown claims award nothing."""
        coords = self._tile_coords(area_id, value)
        if coords is None:
            return 0
        normalized = tile_id(*coords)
        with self._lock:
            claimed = self.claimed_ids(area_id)
            if normalized in claimed:
                return 0
            self._save_set(
                area_id,
                self._claimed,
                state_keys.claimed_tiles_key(area_id),
                claimed | {normalized},
            )
            points = self.points_for_tier(tier_of(*coords))
            if points > 0:
                self._coordinator.add_earned_in_area(area_id, points)
        logger.debug("Task %s claimed in '%s', +%d points", normalized, area_id, points)
        return points

    def clear_progress(self, area_ids: Iterable[str] | None = None) -> None:
        """Forget claimed/completed tiles for the given areas, or for every area."""
        with self._lock:
            if area_ids is None:
                self._store.unset_prefix(state_keys.TASK_PROGRESS_PREFIX)
                self._claimed.clear()
                self._completed.clear()
                return
            for area_id in area_ids:
                self._store.unset(state_keys.claimed_tiles_key(area_id))
                self._store.unset(state_keys.completed_tiles_key(area_id))
                self._claimed.pop(area_id, None)
                self._completed.pop(area_id, None)

    def grid_reset_counter(self) -> int:
        return parse_int(self._store.get(state_keys.TASK_GRID_RESET_COUNTER))

    def increment_grid_reset_counter(self) -> int:
        """Reshuffle every grid's task placement; progress sets are untouched."""
        with self._lock:
            counter = self.grid_reset_counter() + 1
            self._store.set(state_keys.TASK_GRID_RESET_COUNTER, str(counter))
            self._grids.clear()
        return counter
