"""Deterministic placement of catalog tasks onto an area's grid."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from arealock.core.rng import RNG
from arealock.core.types import TaskMode
from arealock.domain.defs import TaskDef, TasksDef
from arealock.domain.defs.task_def import MAX_DIFFICULTY
from arealock.domain.task_tile import iter_lattice, tier_of

MAX_TASKS_PER_AREA = 400
PLACEHOLDER_NAME = "(no task)"


def task_key(task: TaskDef) -> str:
    """Tasks with the same name (case-insensitive) count as the same task."""
    return task.display_name.strip().lower()


def once_only_assignments(tasks: Iterable[TaskDef], area_ids: Sequence[str]) -> Dict[str, str]:
    """Map each once-only task to the first eligible area id in sorted order."""
    ordered = sorted(area_ids)
    assignments: Dict[str, str] = {}
    for task in tasks:
        if not task.once_only:
            continue
        for area_id in ordered:
            if task.applies_to_area(area_id):
                assignments[task_key(task)] = area_id
                break
    return assignments


def tasks_for_area(
    tasks: TasksDef,
    area_id: str,
    *,
    known_area_ids: Sequence[str],
    task_mode: TaskMode = TaskMode.MEMBERS,
) -> List[TaskDef]:
    """Eligible tasks for one area: area-specific first, then filler, deduplicated and capped."""
    once_only = once_only_assignments(tasks.default_tasks, known_area_ids)
    eligible = [
        task
        for task in tasks.tasks_for_area(area_id)
        if task.applies_to_area(area_id)
        and (not task.once_only or once_only.get(task_key(task)) == area_id)
        and (task_mode is not TaskMode.FREE_TO_PLAY or task.f2p)
    ]
    area_specific = [task for task in eligible if task.area_ids]
    filler = [task for task in eligible if not task.area_ids]
    seen: set[str] = set()
    pool: List[TaskDef] = []
    for task in area_specific + filler:
        key = task_key(task)
        if key in seen:
            continue
        seen.add(key)
        pool.append(task)
    return pool[:MAX_TASKS_PER_AREA]


def assign_tasks(
    pool: Sequence[TaskDef],
    area_id: str,
    rng: RNG,
    radius: int,
) -> Dict[Tuple[int, int], TaskDef | None]:
    """Give every non-centre cell a task; ``None`` marks a cell left without one.

    A ring at tier ``t`` draws from difficulty ``min(t, 5)`` first, then easier
    difficulties, then anything unused. No task is placed twice.
    """
    by_difficulty: Dict[int, List[TaskDef]] = {}
    for difficulty in range(1, MAX_DIFFICULTY + 1):
        matching = [task for task in pool if task.difficulty == difficulty]
        area_specific = [task for task in matching if area_id in task.area_ids]
        filler = [task for task in matching if area_id not in task.area_ids]
        rng.shuffle(area_specific)
        rng.shuffle(filler)
        by_difficulty[difficulty] = area_specific + filler
    fallback = list(pool)
    rng.shuffle(fallback)

    used: set[str] = set()

    def take(candidates: Iterable[TaskDef]) -> TaskDef | None:
        for task in candidates:
            key = task_key(task)
            if key not in used:
                used.add(key)
                return task
        return None

    assigned: Dict[Tuple[int, int], TaskDef | None] = {}
    for row, col in iter_lattice(radius):
        if row == 0 and col == 0:
            continue
        target = min(tier_of(row, col), MAX_DIFFICULTY)
        chosen = None
        for difficulty in range(target, 0, -1):
            chosen = take(by_difficulty[difficulty])
            if chosen is not None:
                break
        if chosen is None:
            chosen = take(fallback)
        assigned[(row, col)] = chosen
    return assigned
