"""Context object wiring the progression services together."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from arealock.core.geometry import Position
from arealock.core.types import AreaStatus, CompletionMode, TaskMode, TaskState
from arealock.data.repositories import AreasRepository, TasksRepository
from arealock.data.state_store import StateStore
from arealock.domain.defs import AreaDef
from arealock.services.area_graph import AreaGraph
from arealock.services.area_progress import AreaProgressCoordinator
from arealock.services.lock_query import LockQuery
from arealock.services.points_ledger import PointsLedger
from arealock.services.task_catalog import TaskCatalog
from arealock.services.task_grid import DEFAULT_TIER_POINTS, TaskGrid

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProgressionSettings:
    """Game-mode options that shape a progression session."""

    completion_mode: CompletionMode = CompletionMode.FULL_CLAIM
    starting_area: str = "lumbridge"
    starting_points: int = 0
    tier_points: Dict[int, int] = field(default_factory=lambda: dict(DEFAULT_TIER_POINTS))
    task_mode: TaskMode = TaskMode.MEMBERS
    tasks_file_path: str = ""


@dataclass(slots=True)
class UnlockDecision:
    allowed: bool
    reason: str | None = None
    cost: int = 0


@dataclass(slots=True)
class ClaimResult:
    claimed: bool
    points: int = 0
    reason: str | None = None


@dataclass(slots=True)
class PointsView:
    earned: int
    spent: int
    spendable: int


@dataclass(slots=True)
class AreaSummaryView:
    """One row of the area overview."""

    id: str
    display_name: str
    status: AreaStatus
    unlock_cost: int
    earned_in_area: int
    points_to_complete: int
    claimed_tiles: int
    total_tiles: int


@dataclass(slots=True)
class PositionView:
    """Result of a position update from the game."""

    position: Position
    permitted: bool
    area_id: str | None
    area_name: str | None


class ProgressionService:
    """Holds the area graph, ledger, task grid, coordinator and lock query for one session."""

    def __init__(
        self,
        *,
        settings: ProgressionSettings,
        store: StateStore,
        area_graph: AreaGraph,
        ledger: PointsLedger,
        coordinator: AreaProgressCoordinator,
        task_grid: TaskGrid,
        catalog: TaskCatalog,
        lock_query: LockQuery,
    ) -> None:
        self.settings = settings
        self.store = store
        self.area_graph = area_graph
        self.ledger = ledger
        self.coordinator = coordinator
        self.task_grid = task_grid
        self.catalog = catalog
        self.lock_query = lock_query

    @classmethod
    def build(
        cls,
        settings: ProgressionSettings,
        store: StateStore,
        *,
        definitions_path: Path | str | None = None,
    ) -> "ProgressionService":
        """Construct every service against one store and wire their collaborations."""
        area_graph = AreaGraph(areas_repo=AreasRepository(definitions_path), store=store)
        ledger = PointsLedger(store=store)
        coordinator = AreaProgressCoordinator(
            area_graph=area_graph,
            ledger=ledger,
            store=store,
            mode=settings.completion_mode,
        )
        catalog = TaskCatalog(
            store=store,
            tasks_repo=TasksRepository(definitions_path),
            tasks_file_path=settings.tasks_file_path or None,
        )
        task_grid = TaskGrid(
            catalog=catalog,
            area_graph=area_graph,
            coordinator=coordinator,
            store=store,
            tier_points=settings.tier_points,
            task_mode=settings.task_mode,
        )
        coordinator.bind_task_grid(task_grid)
        return cls(
            settings=settings,
            store=store,
            area_graph=area_graph,
            ledger=ledger,
            coordinator=coordinator,
            task_grid=task_grid,
            catalog=catalog,
            lock_query=LockQuery(area_graph=area_graph),
        )

    def start(self) -> None:
        """Load persisted state, applying starting points and area on first run."""
        self.area_graph.load()
        self.ledger.load()
        self.coordinator.load()
        if self.ledger.earned_total == 0 and self.ledger.spent_total == 0:
            self.ledger.set_starting(self.settings.starting_points)
        if not self.area_graph.unlocked_ids():
            self.area_graph.set_unlocked({self.settings.starting_area})
        logger.info(
            "Progression started: %d areas unlocked, %d points spendable",
            len(self.area_graph.unlocked_ids()),
            self.ledger.spendable(),
        )

    # ------------------------------------------------------------------
    # Unlocking
    # ------------------------------------------------------------------
    def unlock_candidates(self) -> List[AreaDef]:
        """Areas that may be bought next, sorted by display name.

        In threshold mode only neighbours of completed areas qualify, falling back
        to all unlocked areas while nothing is complete yet.
        """
        if self.coordinator.mode is CompletionMode.THRESHOLD:
            candidates = self.area_graph.unlockable_neighbors(
                self.coordinator.effective_completed_ids()
            )
        else:
            candidates = self.area_graph.unlockable_neighbors()
        return sorted(candidates, key=lambda area: (area.display_name.lower(), area.id))

    def can_unlock(self, area_id: str) -> UnlockDecision:
        area = self.area_graph.area(area_id)
        if area is None:
            return UnlockDecision(False, f"Unknown area '{area_id}'.")
        if area_id in self.area_graph.unlocked_ids():
            return UnlockDecision(False, f"{area.display_name} is already unlocked.", area.unlock_cost)
        if area_id not in {candidate.id for candidate in self.unlock_candidates()}:
            return UnlockDecision(
                False, f"{area.display_name} does not border an eligible area.", area.unlock_cost
            )
        if area.unlock_cost > self.ledger.spendable():
            return UnlockDecision(
                False,
                f"{area.display_name} costs {area.unlock_cost} points; "
                f"you have {self.ledger.spendable()}.",
                area.unlock_cost,
            )
        return UnlockDecision(True, cost=area.unlock_cost)

    def unlock_area(self, area_id: str) -> UnlockDecision:
        """Spend the unlock cost and add the area to the unlocked set."""
        decision = self.can_unlock(area_id)
        if not decision.allowed:
            return decision
        if decision.cost > 0 and not self.ledger.spend(decision.cost):
            return UnlockDecision(False, "Not enough points.", decision.cost)
        self.area_graph.add_unlocked(area_id)
        return decision

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def complete_task(self, area_id: str, tile_id: str) -> bool:
        """Entry point for the event matcher: a tile's in-game condition was met."""
        return self.task_grid.set_completed(area_id, tile_id)

    def claim_task(self, area_id: str, tile_id: str) -> ClaimResult:
        """Claim a completed tile (or the free centre tile) of an unlocked area."""
        if self.area_graph.area(area_id) is None:
            return ClaimResult(False, reason=f"No area '{area_id}'.")
        if area_id not in self.area_graph.unlocked_ids():
            return ClaimResult(False, reason="Area is locked.")
        state = self.task_grid.state(area_id, tile_id)
        if state is None:
            return ClaimResult(False, reason=f"No tile '{tile_id}'.")
        if state is TaskState.CLAIMED:
            return ClaimResult(False, reason="Already claimed.")
        tile = self.task_grid.tile(area_id, tile_id)
        is_center = tile is not None and tile.is_center
        if state is not TaskState.COMPLETED_UNCLAIMED and not is_center:
            return ClaimResult(False, reason="Task is not completed yet.")
        return ClaimResult(True, points=self.task_grid.claim(area_id, tile_id))

    # ------------------------------------------------------------------
    # Events and views
    # ------------------------------------------------------------------
    def on_position_changed(self, position: Position) -> PositionView:
        area = self.area_graph.area_at(position)
        return PositionView(
            position=position,
            permitted=self.lock_query.is_permitted(position),
            area_id=area.id if area is not None else None,
            area_name=area.display_name if area is not None else None,
        )

    def points_view(self) -> PointsView:
        return PointsView(
            earned=self.ledger.earned_total,
            spent=self.ledger.spent_total,
            spendable=self.ledger.spendable(),
        )

    def area_summaries(self) -> List[AreaSummaryView]:
        total_tiles = (2 * self.task_grid.radius + 1) ** 2
        summaries: List[AreaSummaryView] = []
        for area in self.area_graph.areas():
            summaries.append(
                AreaSummaryView(
                    id=area.id,
                    display_name=area.display_name,
                    status=self.coordinator.get_area_status(area.id),
                    unlock_cost=area.unlock_cost,
                    earned_in_area=self.coordinator.earned_in_area(area.id),
                    points_to_complete=area.completion_threshold,
                    claimed_tiles=len(self.task_grid.claimed_ids(area.id)),
                    total_tiles=total_tiles,
                )
            )
        return summaries

    # ------------------------------------------------------------------
    # Editing and reset
    # ------------------------------------------------------------------
    def import_areas(self, payload: str | Sequence[object]) -> int:
        count = self.area_graph.import_custom_areas(payload)
        self.task_grid.invalidate()
        return count

    def remove_area(self, area_id: str) -> None:
        self.area_graph.remove_area(area_id)
        self.task_grid.invalidate()

    def restore_area(self, area_id: str) -> None:
        self.area_graph.restore_area(area_id)
        self.task_grid.invalidate()

    def reset_progress(self) -> Tuple[int, str]:
        """Return to a first-run state. Returns the starting points and starting area."""
        self.ledger.set_starting(self.settings.starting_points)
        self.area_graph.set_unlocked({self.settings.starting_area})
        self.coordinator.clear()
        self.task_grid.clear_progress()
        self.task_grid.increment_grid_reset_counter()
        logger.info("Progress reset")
        return self.settings.starting_points, self.settings.starting_area
