"""Repository exports."""

from .areas_repo import AreasRepository
from .tasks_repo import TasksRepository

__all__ = [
    "AreasRepository",
    "TasksRepository",
]
