"""Repository for task list documents."""
from __future__ import annotations

from pathlib import Path

from arealock.data.repositories.base import RepositoryBase
from arealock.data.task_codec import parse_tasks_document
from arealock.domain.defs import TasksDef


class TasksRepository(RepositoryBase[TasksDef]):
    """Loads a task document, either the built-in one or a user supplied file."""

    def __init__(
        self,
        base_path: Path | str | None = None,
        *,
        file_path: Path | str | None = None,
    ) -> None:
        super().__init__("tasks.json", base_path, file_path=file_path)

    def _parse(self, raw: object) -> TasksDef:
        return parse_tasks_document(raw, self.file_path.name)

    def load(self) -> TasksDef:
        """Return the parsed document, raising DataLoadError/DataValidationError on failure."""
        return self._load_document()
