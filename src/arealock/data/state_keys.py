"""Names of the entries kept in the progression state store."""
from __future__ import annotations

UNLOCKED_AREAS = "unlockedAreas"
POINTS_EARNED_TOTAL = "pointsEarnedTotal"
POINTS_SPENT_TOTAL = "pointsSpentTotal"
POINTS_EARNED_PER_AREA = "pointsEarnedPerArea"
COMPLETED_AREAS = "completedAreas"
TASK_PROGRESS_PREFIX = "taskProgress_"
TASK_GRID_RESET_COUNTER = "taskGridResetCounter"
CUSTOM_AREAS = "customAreas"
REMOVED_AREAS = "removedAreas"
TASKS_OVERRIDE = "tasksOverride"
CUSTOM_TASKS = "customTasks"


def claimed_tiles_key(area_id: str) -> str:
    return f"{TASK_PROGRESS_PREFIX}{area_id}_claimed"


def completed_tiles_key(area_id: str) -> str:
    return f"{TASK_PROGRESS_PREFIX}{area_id}_completed"
