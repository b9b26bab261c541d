"""Effective task list: base document, user override and custom tasks."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import List, Sequence

from arealock.data import state_keys
from arealock.data.errors import DataError
from arealock.data.json_loader import parse_json_text
from arealock.data.repositories import TasksRepository
from arealock.data.state_store import StateStore
from arealock.data.task_codec import (
    dump_task_list,
    dump_tasks_document,
    parse_task_list,
    parse_tasks_document,
)
from arealock.domain.defs import TaskDef, TasksDef

logger = logging.getLogger(__name__)


class TaskCatalog:
    """Resolves which tasks feed the grids.

    The base document is the stored override if present, else the configured
    tasks file if it loads, else the built-in document. Custom tasks are
    appended to the base default list.
    """

    def __init__(
        self,
        *,
        store: StateStore,
        tasks_repo: TasksRepository,
        tasks_file_path: Path | str | None = None,
    ) -> None:
        self._store = store
        self._tasks_repo = tasks_repo
        self._tasks_file_path = Path(tasks_file_path) if tasks_file_path else None
        self._lock = threading.RLock()
        self._effective: TasksDef | None = None
        self._revision = 0

    @property
    def revision(self) -> int:
        """Incremented whenever the effective task set may have changed."""
        return self._revision

    def invalidate(self) -> None:
        with self._lock:
            self._effective = None
            self._revision += 1

    def effective_tasks(self) -> TasksDef:
        with self._lock:
            if self._effective is None:
                base = self._load_base()
                self._effective = TasksDef(
                    default_tasks=base.default_tasks + tuple(self.custom_tasks()),
                    area_tasks=dict(base.area_tasks),
                )
            return self._effective

    def _load_base(self) -> TasksDef:
        override = self._store.get(state_keys.TASKS_OVERRIDE)
        if override and override.strip():
            try:
                return parse_tasks_document(json.loads(override), "tasks override")
            except (ValueError, DataError) as exc:
                logger.warning("Ignoring invalid tasks override: %s", exc)
        if self._tasks_file_path is not None:
            try:
                tasks = TasksRepository(file_path=self._tasks_file_path).load()
                logger.info("Tasks loaded from %s", self._tasks_file_path)
                return tasks
            except DataError as exc:
                logger.warning("Failed to load tasks from %s: %s", self._tasks_file_path, exc)
        try:
            return self._tasks_repo.load()
        except DataError as exc:
            logger.warning("Failed to load built-in tasks: %s", exc)
        return TasksDef()

    # ------------------------------------------------------------------
    # Override
    # ------------------------------------------------------------------
    def has_override(self) -> bool:
        value = self._store.get(state_keys.TASKS_OVERRIDE)
        return bool(value and value.strip())

    def set_override(self, tasks_json: str) -> None:
        """Replace the base document with ``tasks_json``; blank text clears the override.

        Raises ``DataValidationError`` when the document is malformed.
        """
        if not tasks_json or not tasks_json.strip():
            self.clear_override()
            return
        parse_tasks_document(parse_json_text(tasks_json, "Tasks import"), "Tasks import")
        self._store.set(state_keys.TASKS_OVERRIDE, tasks_json.strip())
        self.invalidate()
        logger.info("Tasks override set")

    def clear_override(self) -> None:
        self._store.unset(state_keys.TASKS_OVERRIDE)
        self.invalidate()

    # ------------------------------------------------------------------
    # Custom tasks
    # ------------------------------------------------------------------
    def custom_tasks(self) -> List[TaskDef]:
        raw = self._store.get(state_keys.CUSTOM_TASKS)
        if not raw or not raw.strip():
            return []
        try:
            return list(parse_task_list(json.loads(raw), "custom tasks"))
        except (ValueError, DataError) as exc:
            logger.warning("Ignoring invalid custom tasks: %s", exc)
            return []

    def add_custom_task(self, task: TaskDef) -> None:
        self.add_custom_tasks([task])

    def add_custom_tasks(self, tasks: Sequence[TaskDef]) -> None:
        if not tasks:
            return
        with self._lock:
            self._save_custom(self.custom_tasks() + list(tasks))

    def update_custom_task(self, index: int, task: TaskDef) -> bool:
        with self._lock:
            tasks = self.custom_tasks()
            if not 0 <= index < len(tasks):
                return False
            tasks[index] = task
            self._save_custom(tasks)
            return True

    def remove_custom_task(self, index: int) -> bool:
        with self._lock:
            tasks = self.custom_tasks()
            if not 0 <= index < len(tasks):
                return False
            del tasks[index]
            self._save_custom(tasks)
            return True

    def _save_custom(self, tasks: List[TaskDef]) -> None:
        self._store.set(state_keys.CUSTOM_TASKS, dump_task_list(tasks))
        self.invalidate()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_tasks_json(self, tasks: Sequence[TaskDef] | None = None) -> str:
        """Export ``tasks`` (default: the effective default list) as a task document."""
        if tasks is None:
            tasks = self.effective_tasks().default_tasks
        return dump_tasks_document(tasks)
