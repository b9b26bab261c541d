"""Service layer exports."""

from .area_graph import AreaGraph
from .area_progress import AreaProgressCoordinator
from .lock_query import LockQuery
from .points_ledger import PointsLedger
from .progression_service import (
    AreaSummaryView,
    ClaimResult,
    PointsView,
    PositionView,
    ProgressionService,
    ProgressionSettings,
    UnlockDecision,
)
from .task_authoring import AuthoringDefaults, TaskAuthoringService, tasks_from_titles
from .task_catalog import TaskCatalog
from .task_grid import TaskGrid

__all__ = [
    "AreaGraph",
    "AreaProgressCoordinator",
    "AreaSummaryView",
    "AuthoringDefaults",
    "ClaimResult",
    "LockQuery",
    "PointsLedger",
    "PointsView",
    "PositionView",
    "ProgressionService",
    "ProgressionSettings",
    "TaskAuthoringService",
    "TaskCatalog",
    "TaskGrid",
    "UnlockDecision",
    "tasks_from_titles",
]
