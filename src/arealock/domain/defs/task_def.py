"""Task definition data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple

AreaRequirement = Literal["all", "any"]

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


def clamp_difficulty(value: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value))


@dataclass(frozen=True, slots=True)
class TaskDef:
    """A single task that can be placed on an area's grid."""

    display_name: str
    task_type: str | None = None
    difficulty: int = 1
    area_ids: Tuple[str, ...] = ()
    f2p: bool = False
    requirements: str | None = None
    area_requirement: AreaRequirement = "all"
    once_only: bool = False

    def applies_to_area(self, area_id: str) -> bool:
        """Tasks without area ids are usable everywhere."""
        return not self.area_ids or area_id in self.area_ids


@dataclass(slots=True)
class TasksDef:
    """Default task list plus optional per-area replacement lists."""

    default_tasks: Tuple[TaskDef, ...] = ()
    area_tasks: Dict[str, Tuple[TaskDef, ...]] = field(default_factory=dict)

    def tasks_for_area(self, area_id: str) -> Tuple[TaskDef, ...]:
        return self.area_tasks.get(area_id, self.default_tasks)
