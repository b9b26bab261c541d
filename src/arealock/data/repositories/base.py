"""Base repository for JSON definition documents."""
from __future__ import annotations

from pathlib import Path
from typing import Generic, TypeVar

from arealock.data import paths
from arealock.data.json_loader import load_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Loads one document from the definitions directory and caches the parsed result.

    ``file_path`` points at an explicit file and takes precedence over
    ``base_path``/``filename``.
    """

    def __init__(
        self,
        filename: str,
        base_path: Path | str | None = None,
        *,
        file_path: Path | str | None = None,
    ) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._file_path = Path(file_path) if file_path is not None else None
        self._document: T | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is not None:
            return self._file_path
        return paths.get_definitions_path(self._base_path) / self._filename

    def _parse(self, raw: object) -> T:
        """Convert the decoded JSON into typed definitions."""
        raise NotImplementedError

    def _load_document(self) -> T:
        """Parse on first use; raises DataLoadError/DataValidationError on failure."""
        if self._document is None:
            self._document = self._parse(load_json(self.file_path))
        return self._document
