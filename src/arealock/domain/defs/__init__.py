"""Domain definition exports."""

from .area_def import AreaDef
from .task_def import TaskDef, TasksDef, clamp_difficulty
from .task_source_def import TASK_SOURCES, TaskSourceDef

__all__ = [
    "AreaDef",
    "TASK_SOURCES",
    "TaskDef",
    "TaskSourceDef",
    "TasksDef",
    "clamp_difficulty",
]
