from __future__ import annotations

from typing import Dict, List, Sequence

from arealock.core.types import CompletionMode
from arealock.data.repositories import AreasRepository, TasksRepository
from arealock.data.state_store import InMemoryStateStore
from arealock.services import (
    AreaGraph,
    AreaProgressCoordinator,
    PointsLedger,
    ProgressionService,
    ProgressionSettings,
    TaskCatalog,
    TaskGrid,
)


def rect(x0: int, y0: int, x1: int, y1: int, plane: int = 0) -> List[List[int]]:
    return [[x0, y0, plane], [x1, y0, plane], [x1, y1, plane], [x0, y1, plane]]


def area_record(
    area_id: str,
    polygon: Sequence[Sequence[int]] | None = None,
    *,
    neighbors: Sequence[str] = (),
    cost: int = 0,
    points_to_complete: int | None = None,
    includes: Sequence[int] | None = None,
) -> Dict[str, object]:
    record: Dict[str, object] = {
        "id": area_id,
        "displayName": area_id.title(),
        "polygon": [list(vertex) for vertex in polygon] if polygon else [],
        "neighbors": list(neighbors),
        "unlockCost": cost,
    }
    if includes is not None:
        record["includes"] = list(includes)
    if points_to_complete is not None:
        record["pointsToComplete"] = points_to_complete
    return record


def starter_records() -> List[Dict[str, object]]:
    """Two adjacent rectangles: a free start area and a 50 point neighbour."""
    return [
        area_record("start", rect(0, 0, 10, 10), neighbors=["east"], cost=0, includes=[]),
        area_record("east", rect(10, 0, 20, 10), neighbors=["start"], cost=50, includes=[]),
    ]


def make_graph(
    records: Sequence[Dict[str, object]] | None = None,
    store: InMemoryStateStore | None = None,
) -> AreaGraph:
    graph = AreaGraph(areas_repo=AreasRepository(), store=store or InMemoryStateStore())
    graph.load(definitions=list(records) if records is not None else starter_records())
    return graph


def make_engine(
    records: Sequence[Dict[str, object]] | None = None,
    *,
    mode: CompletionMode = CompletionMode.FULL_CLAIM,
    tier_points: Dict[int, int] | None = None,
    store: InMemoryStateStore | None = None,
):
    """Wire graph, ledger, coordinator and grid against one in-memory store."""
    store = store or InMemoryStateStore()
    graph = make_graph(records, store)
    ledger = PointsLedger(store=store)
    ledger.load()
    coordinator = AreaProgressCoordinator(area_graph=graph, ledger=ledger, store=store, mode=mode)
    coordinator.load()
    catalog = TaskCatalog(store=store, tasks_repo=TasksRepository())
    grid = TaskGrid(
        catalog=catalog,
        area_graph=graph,
        coordinator=coordinator,
        store=store,
        tier_points=tier_points,
    )
    coordinator.bind_task_grid(grid)
    return store, graph, ledger, coordinator, grid


def make_service(
    settings: ProgressionSettings | None = None,
    store: InMemoryStateStore | None = None,
) -> ProgressionService:
    service = ProgressionService.build(settings or ProgressionSettings(), store or InMemoryStateStore())
    service.start()
    return service
