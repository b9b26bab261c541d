"""Parsing and serialisation of task lists.

A task document is either a bare list of tasks or an object of the form
``{"defaultTasks": [...], "areas": {"<area id>": {"tasks": [...]}}}``.
A task's ``area`` may be a comma-separated string or a list of area ids.
"""
from __future__ import annotations

import json
from typing import Dict, Iterable, Tuple

from arealock.domain.defs import TaskDef, TasksDef, clamp_difficulty

from .errors import DataValidationError
from .validation import (
    require_bool,
    require_int,
    require_list,
    require_mapping,
    require_str,
)


def _parse_area_ids(raw: object, context: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts = raw.split(",")
    else:
        parts = [
            require_str(entry, f"{context}[{index}]")
            for index, entry in enumerate(require_list(raw, context))
        ]
    return tuple(part.strip() for part in parts if part.strip())


def parse_task_record(raw: object, context: str) -> TaskDef:
    record = require_mapping(raw, context)
    display_name = require_str(record.get("displayName"), f"{context}.displayName").strip()
    if not display_name:
        raise DataValidationError(f"{context}.displayName must not be empty.")
    task_type = record.get("taskType")
    if task_type is not None:
        task_type = require_str(task_type, f"{context}.taskType")
    difficulty = clamp_difficulty(require_int(record.get("difficulty", 1), f"{context}.difficulty"))
    requirements = record.get("requirements")
    if requirements is not None:
        requirements = require_str(requirements, f"{context}.requirements").strip() or None
    area_requirement = record.get("areaRequirement", "all")
    area_requirement = "any" if str(area_requirement).strip().lower() == "any" else "all"
    return TaskDef(
        display_name=display_name,
        task_type=task_type,
        difficulty=difficulty,
        area_ids=_parse_area_ids(record.get("area"), f"{context}.area"),
        f2p=require_bool(record.get("f2p", False), f"{context}.f2p"),
        requirements=requirements,
        area_requirement=area_requirement,
        once_only=require_bool(record.get("onceOnly", False), f"{context}.onceOnly"),
    )


def parse_task_list(raw: object, context: str) -> Tuple[TaskDef, ...]:
    return tuple(
        parse_task_record(entry, f"{context}[{index}]")
        for index, entry in enumerate(require_list(raw, context))
    )


def parse_tasks_document(raw: object, context: str) -> TasksDef:
    """Build a ``TasksDef`` from a decoded task document."""
    if isinstance(raw, list):
        return TasksDef(default_tasks=parse_task_list(raw, context))
    document = require_mapping(raw, context)
    if "defaultTasks" not in document:
        raise DataValidationError(f"{context} needs a 'defaultTasks' list.")
    default_tasks = parse_task_list(document["defaultTasks"], f"{context}.defaultTasks")
    area_tasks: Dict[str, Tuple[TaskDef, ...]] = {}
    areas = require_mapping(document.get("areas", {}), f"{context}.areas")
    for area_id, entry in areas.items():
        area_context = f"{context}.areas.{area_id}"
        area_entry = require_mapping(entry, area_context)
        tasks = parse_task_list(area_entry.get("tasks", []), f"{area_context}.tasks")
        if tasks:
            area_tasks[area_id] = tasks
    return TasksDef(default_tasks=default_tasks, area_tasks=area_tasks)


def task_to_record(task: TaskDef) -> Dict[str, object]:
    record: Dict[str, object] = {"displayName": task.display_name}
    if task.task_type is not None:
        record["taskType"] = task.task_type
    record["difficulty"] = task.difficulty
    if task.area_ids:
        record["area"] = ", ".join(task.area_ids)
    record["f2p"] = task.f2p
    if task.requirements:
        record["requirements"] = task.requirements
    if task.area_requirement == "any":
        record["areaRequirement"] = "any"
    if task.once_only:
        record["onceOnly"] = True
    return record


def dump_task_list(tasks: Iterable[TaskDef]) -> str:
    return json.dumps([task_to_record(task) for task in tasks], indent=2)


def dump_tasks_document(tasks: Iterable[TaskDef]) -> str:
    """Serialise tasks as a document whose ``defaultTasks`` holds every task."""
    payload: Dict[str, object] = {
        "defaultTasks": [task_to_record(task) for task in tasks],
        "areas": {},
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "dump_task_list",
    "dump_tasks_document",
    "parse_task_list",
    "parse_task_record",
    "parse_tasks_document",
    "task_to_record",
]
