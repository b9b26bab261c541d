"""Repository for built-in area definitions."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from arealock.data.area_codec import parse_area_list
from arealock.data.repositories.base import RepositoryBase
from arealock.data.validation import require_mapping
from arealock.domain.defs import AreaDef


class AreasRepository(RepositoryBase[Dict[str, AreaDef]]):
    """Loads and validates the shipped area definitions.

    A repeated id is not an error here: the later entry replaces the earlier one.
    """

    def __init__(self, base_path: Path | str | None = None) -> None:
        super().__init__("areas.json", base_path)

    def _parse(self, raw: object) -> Dict[str, AreaDef]:
        container = require_mapping(raw, self._filename)
        areas = parse_area_list(
            container.get("areas"), f"{self._filename}.areas", reject_duplicates=False
        )
        return {area.id: area for area in areas}

    def get(self, area_id: str) -> AreaDef:
        """Return a definition by id; raises KeyError when unknown."""
        return self._load_document()[area_id]

    def all(self) -> List[AreaDef]:
        """Return all definitions sorted by id."""
        areas = self._load_document()
        return [areas[area_id] for area_id in sorted(areas)]
