"""Area definitions, the unlocked set and spatial containment queries."""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import replace
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

from arealock.core.geometry import Position, compute_region_ids, tiles_in_shape
from arealock.data import state_keys
from arealock.data.area_codec import area_to_record, parse_area_list
from arealock.data.errors import DataError, DataValidationError
from arealock.data.json_loader import parse_json_text
from arealock.data.repositories import AreasRepository
from arealock.data.state_codec import join_ids, split_ids
from arealock.data.state_store import StateStore
from arealock.data.validation import require_str_list
from arealock.domain.defs import AreaDef

logger = logging.getLogger(__name__)


class AreaGraph:
    """Owns the active area set (built-ins, hidden ids, custom layer) and the unlocked ids.

    Reads return snapshots, so a UI thread may query while the simulation thread mutates.
    """

    def __init__(self, *, areas_repo: AreasRepository, store: StateStore) -> None:
        self._areas_repo = areas_repo
        self._store = store
        self._lock = threading.RLock()
        self._built_in: Dict[str, AreaDef] = {}
        self._custom: Dict[str, AreaDef] = {}
        self._removed: Set[str] = set()
        self._areas: Dict[str, AreaDef] = {}
        self._unlocked: FrozenSet[str] = frozenset()
        self._area_tiles_cache: Dict[Tuple[str, int], FrozenSet[Position]] = {}
        self._locked_tiles_cache: Dict[int, FrozenSet[Position]] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, definitions: Sequence[object] | None = None) -> None:
        """Load built-in areas plus the persisted custom layer, hidden ids and unlocked set.

        ``definitions`` replaces the shipped area file with a list of transfer-format
        records. Repeated ids resolve to the later record; degenerate polygons raise
        ``DataValidationError``.
        """
        if definitions is None:
            built_in = self._areas_repo.all()
        else:
            built_in = parse_area_list(list(definitions), "definitions", reject_duplicates=False)
        with self._lock:
            self._built_in = {area.id: area for area in built_in}
            self._custom = {area.id: area for area in self._read_custom_layer()}
            self._removed = self._read_removed_ids()
            self._unlocked = frozenset(split_ids(self._store.get(state_keys.UNLOCKED_AREAS)))
            self.reload()

    def reload(self) -> None:
        """Rebuild the active set from built-ins, hidden ids and the custom layer."""
        with self._lock:
            areas = {
                area_id: area
                for area_id, area in self._built_in.items()
                if area_id not in self._removed
            }
            areas.update(self._custom)
            self._areas = areas
            self._area_tiles_cache.clear()
            self._locked_tiles_cache.clear()
        logger.debug("Area graph reloaded with %d active areas", len(areas))

    def _read_custom_layer(self) -> List[AreaDef]:
        raw = self._store.get(state_keys.CUSTOM_AREAS)
        if not raw:
            return []
        try:
            return parse_area_list(json.loads(raw), "customAreas", reject_duplicates=False)
        except (ValueError, DataError) as exc:
            logger.warning("Ignoring unreadable custom areas: %s", exc)
            return []

    def _read_removed_ids(self) -> Set[str]:
        raw = self._store.get(state_keys.REMOVED_AREAS)
        if not raw:
            return set()
        try:
            return set(require_str_list(json.loads(raw), "removedAreas"))
        except (ValueError, DataError) as exc:
            logger.warning("Ignoring unreadable removed area ids: %s", exc)
            return set()

    # ------------------------------------------------------------------
    # Unlocked set
    # ------------------------------------------------------------------
    def unlocked_ids(self) -> FrozenSet[str]:
        with self._lock:
            return self._unlocked

    def set_unlocked(self, area_ids: Iterable[str]) -> None:
        with self._lock:
            self._unlocked = frozenset(area_ids)
            self._locked_tiles_cache.clear()
            self._store.set(state_keys.UNLOCKED_AREAS, join_ids(self._unlocked))

    def add_unlocked(self, area_id: str) -> None:
        with self._lock:
            if area_id in self._unlocked:
                return
            self.set_unlocked(self._unlocked | {area_id})
        logger.info("Area '%s' unlocked", area_id)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def area(self, area_id: str) -> AreaDef | None:
        with self._lock:
            return self._areas.get(area_id)

    def areas(self) -> List[AreaDef]:
        """Active areas sorted by id."""
        with self._lock:
            return [self._areas[area_id] for area_id in sorted(self._areas)]

    def cost(self, area_id: str) -> int:
        area = self.area(area_id)
        return area.unlock_cost if area is not None else 0

    def points_to_complete(self, area_id: str) -> int:
        area = self.area(area_id)
        return area.completion_threshold if area is not None else 0

    def unlockable_neighbors(self, source_ids: Iterable[str] | None = None) -> Set[AreaDef]:
        """Neighbors of unlocked areas that are known and not yet unlocked.

        When ``source_ids`` is non-empty only unlocked areas among them act as sources.
        """
        with self._lock:
            unlocked = self._unlocked
            sources = set(source_ids) if source_ids is not None else set()
            sources = unlocked & sources if sources else set(unlocked)
            result: Set[AreaDef] = set()
            for source_id in sources:
                source = self._areas.get(source_id)
                if source is None:
                    continue
                for neighbor_id in source.neighbors:
                    neighbor = self._areas.get(neighbor_id)
                    if neighbor is not None and neighbor_id not in unlocked:
                        result.add(neighbor)
            return result

    # ------------------------------------------------------------------
    # Spatial queries
    # ------------------------------------------------------------------
    def contains_position(self, position: Position) -> AreaDef | None:
        """Return the first unlocked area (by id) containing ``position``."""
        with self._lock:
            for area_id in sorted(self._unlocked):
                area = self._areas.get(area_id)
                if area is not None and area.contains(position):
                    return area
        return None

    def is_unlocked(self, position: Position) -> bool:
        return self.contains_position(position) is not None

    def area_at(self, position: Position) -> AreaDef | None:
        """Return the first active area (by id) containing ``position``, locked or not."""
        with self._lock:
            for area_id in sorted(self._areas):
                area = self._areas[area_id]
                if area.contains(position):
                    return area
        return None

    def tiles_in_area(self, area: AreaDef, plane: int) -> FrozenSet[Position]:
        """Integer positions on ``plane`` inside the area's polygons minus its holes."""
        key = (area.id, plane)
        with self._lock:
            cached = self._area_tiles_cache.get(key)
            if cached is None:
                cached = frozenset(tiles_in_shape(area.polygons, area.holes, plane))
                self._area_tiles_cache[key] = cached
            return cached

    def tiles_in_locked_areas(self, plane: int) -> FrozenSet[Position]:
        """Polygon tiles of locked areas on ``plane`` that ``is_unlocked`` does not grant."""
        with self._lock:
            cached = self._locked_tiles_cache.get(plane)
            if cached is not None:
                return cached
            candidates: Set[Position] = set()
            for area_id, area in self._areas.items():
                if area_id in self._unlocked:
                    continue
                candidates.update(self.tiles_in_area(area, plane))
            locked = frozenset(tile for tile in candidates if not self.is_unlocked(tile))
            self._locked_tiles_cache[plane] = locked
            return locked

    # ------------------------------------------------------------------
    # Editor operations
    # ------------------------------------------------------------------
    def is_built_in(self, area_id: str) -> bool:
        with self._lock:
            return area_id in self._built_in

    def removed_ids(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._removed)

    def custom_areas(self) -> List[AreaDef]:
        with self._lock:
            return [self._custom[area_id] for area_id in sorted(self._custom)]

    def add_or_replace_custom_area(self, area: AreaDef) -> None:
        """Save a custom area; region ids are always recomputed from its polygon."""
        with self._lock:
            self._custom[area.id] = _with_computed_includes(area, force=True)
            self._persist_custom_layer()
            self.reload()
        logger.info("Saved custom area '%s'", area.id)

    def remove_area(self, area_id: str) -> None:
        """Drop a custom area, or hide a built-in one so it can be restored later."""
        with self._lock:
            if area_id in self._custom:
                del self._custom[area_id]
                self._persist_custom_layer()
            elif area_id in self._built_in:
                self._removed.add(area_id)
                self._persist_removed_ids()
            else:
                return
            self.reload()
        logger.info("Removed area '%s'", area_id)

    def restore_area(self, area_id: str) -> None:
        with self._lock:
            if area_id not in self._removed:
                return
            self._removed.discard(area_id)
            self._persist_removed_ids()
            self.reload()
        logger.info("Restored built-in area '%s'", area_id)

    def import_custom_areas(self, payload: str | Sequence[object]) -> int:
        """Replace the custom layer with ``payload``; all-or-nothing.

        Raises ``DataValidationError`` naming the first malformed record, in which
        case nothing changes. Records without an ``includes`` key get region ids
        computed from their first polygon. Returns the number of imported areas.
        """
        if isinstance(payload, str):
            payload = parse_json_text(payload, "Area import")
        if not isinstance(payload, list):
            raise DataValidationError("Area import must be a JSON array of areas.")
        parsed = parse_area_list(payload, "areas", reject_duplicates=True)
        # records that carry an explicit includes list (even empty) keep it as-is
        imported = [
            area if "includes" in record else _with_computed_includes(area)
            for record, area in zip(payload, parsed)
        ]
        with self._lock:
            self._custom = {area.id: area for area in imported}
            self._persist_custom_layer()
            self.reload()
        logger.info("Imported %d custom areas", len(imported))
        return len(imported)

    def export_areas(self) -> List[Dict[str, object]]:
        """Active areas in the transfer format, sorted by id."""
        return [area_to_record(area) for area in self.areas()]

    def export_areas_json(self) -> str:
        return json.dumps(self.export_areas(), indent=2)

    def _persist_custom_layer(self) -> None:
        records = [area_to_record(self._custom[area_id]) for area_id in sorted(self._custom)]
        self._store.set(state_keys.CUSTOM_AREAS, json.dumps(records))

    def _persist_removed_ids(self) -> None:
        self._store.set(state_keys.REMOVED_AREAS, json.dumps(sorted(self._removed)))


def _with_computed_includes(area: AreaDef, *, force: bool = False) -> AreaDef:
    if not area.polygon or (area.includes and not force):
        return area
    return replace(area, includes=frozenset(compute_region_ids(area.polygon)))
