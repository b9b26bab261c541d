"""Conversion between area records in the transfer format and ``AreaDef``.

Records look like::

    {"id": "varrock", "displayName": "Varrock",
     "polygon": [[3200, 3400, 0], ...], "includes": [12853],
     "neighbors": ["lumbridge"], "unlockCost": 50, "pointsToComplete": 100}

``polygons`` (a list of polygons) and ``holes`` are accepted as well; when
both ``polygons`` and ``polygon`` are present the former wins.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from arealock.core.geometry import Polygon, Vertex
from arealock.domain.defs import AreaDef

from .errors import DataValidationError
from .state_codec import AREA_LIST_SEPARATOR, POINTS_PAIR_SEPARATOR, TILE_LIST_SEPARATOR
from .validation import (
    require_int,
    require_list,
    require_mapping,
    require_str,
    require_str_list,
)

MAX_PLANE = 3
_RESERVED_ID_CHARS = (AREA_LIST_SEPARATOR, POINTS_PAIR_SEPARATOR, TILE_LIST_SEPARATOR)


def _parse_vertex(raw: object, context: str) -> Vertex:
    point = require_list(raw, context)
    if len(point) != 3:
        raise DataValidationError(f"{context} must be [x, y, plane].")
    x = require_int(point[0], f"{context}.x")
    y = require_int(point[1], f"{context}.y")
    plane = require_int(point[2], f"{context}.plane", minimum=0)
    if plane > MAX_PLANE:
        raise DataValidationError(f"{context}.plane must be between 0 and {MAX_PLANE}.")
    return x, y, plane


def _parse_polygon(raw: object, context: str) -> Polygon:
    points = require_list(raw, context)
    if 0 < len(points) < 3:
        raise DataValidationError(
            f"{context} has {len(points)} point(s); a polygon needs 0 or at least 3."
        )
    return tuple(_parse_vertex(point, f"{context}[{index}]") for index, point in enumerate(points))


def _parse_polygon_list(raw: object, context: str) -> Tuple[Polygon, ...]:
    polygons = (
        _parse_polygon(entry, f"{context}[{index}]")
        for index, entry in enumerate(require_list(raw, context))
    )
    return tuple(polygon for polygon in polygons if polygon)


def parse_area_record(raw: object, context: str) -> AreaDef:
    """Validate one record and build the corresponding ``AreaDef``."""
    record = require_mapping(raw, context)
    raw_id = record.get("id")
    if raw_id is None:
        raise DataValidationError(f"{context} is missing 'id'.")
    area_id = require_str(raw_id, f"{context}.id").strip()
    if not area_id:
        raise DataValidationError(f"{context}.id must not be empty.")
    if any(char in area_id for char in _RESERVED_ID_CHARS):
        raise DataValidationError(
            f"{context}.id '{area_id}' must not contain any of: {' '.join(_RESERVED_ID_CHARS)}."
        )
    context = f"{context} ('{area_id}')"

    display_name = record.get("displayName")
    if display_name is None or (isinstance(display_name, str) and not display_name.strip()):
        display_name = area_id
    display_name = require_str(display_name, f"{context}.displayName")

    description = record.get("description")
    if description is not None:
        description = require_str(description, f"{context}.description")

    if "polygons" in record:
        polygons = _parse_polygon_list(record["polygons"], f"{context}.polygons")
    elif "polygon" in record:
        single = _parse_polygon(record["polygon"], f"{context}.polygon")
        polygons = (single,) if single else ()
    else:
        polygons = ()
    holes = _parse_polygon_list(record.get("holes", []), f"{context}.holes")

    includes = frozenset(
        require_int(entry, f"{context}.includes[{index}]")
        for index, entry in enumerate(require_list(record.get("includes", []), f"{context}.includes"))
    )
    neighbors = tuple(require_str_list(record.get("neighbors", []), f"{context}.neighbors"))
    unlock_cost = require_int(record.get("unlockCost", 0), f"{context}.unlockCost", minimum=0)
    points_to_complete = record.get("pointsToComplete")
    if points_to_complete is not None:
        points_to_complete = require_int(
            points_to_complete, f"{context}.pointsToComplete", minimum=0
        )

    return AreaDef(
        id=area_id,
        display_name=display_name,
        description=description,
        polygons=polygons,
        holes=holes,
        includes=includes,
        neighbors=neighbors,
        unlock_cost=unlock_cost,
        points_to_complete=points_to_complete,
    )


def parse_area_list(payload: object, context: str, *, reject_duplicates: bool) -> List[AreaDef]:
    """Parse a list of records; the first malformed record raises ``DataValidationError``.

    With ``reject_duplicates`` off, a repeated id replaces the earlier record in place.
    """
    records = require_list(payload, context)
    parsed: Dict[str, AreaDef] = {}
    for index, raw in enumerate(records):
        area = parse_area_record(raw, f"{context}[{index}]")
        if area.id in parsed:
            if reject_duplicates:
                raise DataValidationError(f"{context}[{index}]: duplicate area id '{area.id}'.")
            del parsed[area.id]
        parsed[area.id] = area
    return list(parsed.values())


def _polygon_to_json(polygon: Polygon) -> List[List[int]]:
    return [list(vertex) for vertex in polygon]


def area_to_record(area: AreaDef) -> Dict[str, object]:
    record: Dict[str, object] = {"id": area.id, "displayName": area.display_name}
    if area.description is not None:
        record["description"] = area.description
    record["polygon"] = _polygon_to_json(area.polygon)
    if len(area.polygons) > 1:
        record["polygons"] = [_polygon_to_json(polygon) for polygon in area.polygons]
    if area.holes:
        record["holes"] = [_polygon_to_json(hole) for hole in area.holes]
    record["includes"] = sorted(area.includes)
    record["neighbors"] = list(area.neighbors)
    record["unlockCost"] = area.unlock_cost
    if area.points_to_complete is not None:
        record["pointsToComplete"] = area.points_to_complete
    return record
