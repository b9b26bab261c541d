"""World positions, region ids and integer point-in-polygon tests.

Polygons are sequences of ``(x, y, plane)`` vertices. The plane of a polygon is
the plane of its first vertex; a position on any other plane is never inside.

Containment uses even-odd ray casting evaluated with exact integer arithmetic.
Points lying exactly on an edge follow a half-open rule: an edge bounding the
polygon from the minimum-x or minimum-y side contains its points, an edge on
the maximum-x or maximum-y side does not. For an axis-aligned rectangle with
corners ``(x0, y0)`` and ``(x1, y1)`` the contained tiles are therefore
``x0 <= x < x1`` and ``y0 <= y < y1``, so two rectangles sharing an edge never
both claim the same tile.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Set, Tuple

Vertex = Tuple[int, int, int]
Polygon = Tuple[Vertex, ...]

REGION_SIZE = 64
_REGION_SHIFT = 6


@dataclass(frozen=True, slots=True)
class Position:
    """Integer world tile coordinate."""

    x: int
    y: int
    plane: int = 0


def region_id_for(x: int, y: int) -> int:
    """Return the coarse 64x64 region id containing ``(x, y)``."""
    return (x >> _REGION_SHIFT) << 8 | (y >> _REGION_SHIFT)


def polygon_plane(polygon: Sequence[Vertex]) -> int:
    return polygon[0][2] if polygon else 0


def point_in_polygon_xy(x: int, y: int, polygon: Sequence[Vertex]) -> bool:
    """Even-odd test ignoring planes. Degenerate polygons contain nothing."""
    count = len(polygon)
    if count < 3:
        return False
    inside = False
    j = count - 1
    for i in range(count):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        j = i
        if yi == yj:
            continue
        if (yi > y) == (yj > y):
            continue
        # x < xi + (xj - xi) * (y - yi) / (yj - yi), without division
        dy = yj - yi
        lhs = (x - xi) * dy
        rhs = (xj - xi) * (y - yi)
        crosses = lhs < rhs if dy > 0 else lhs > rhs
        if crosses:
            inside = not inside
    return inside


def point_in_polygon(position: Position, polygon: Sequence[Vertex]) -> bool:
    """Return True when ``position`` lies inside ``polygon`` on the polygon's plane."""
    if len(polygon) < 3 or position.plane != polygon_plane(polygon):
        return False
    return point_in_polygon_xy(position.x, position.y, polygon)


def point_in_shape(
    position: Position,
    polygons: Iterable[Sequence[Vertex]],
    holes: Iterable[Sequence[Vertex]] = (),
) -> bool:
    """True if the position is inside any polygon and outside every hole."""
    if not any(point_in_polygon(position, polygon) for polygon in polygons):
        return False
    return not any(point_in_polygon(position, hole) for hole in holes)


def _bounds(polygon: Sequence[Vertex]) -> Tuple[int, int, int, int]:
    xs = [vertex[0] for vertex in polygon]
    ys = [vertex[1] for vertex in polygon]
    return min(xs), max(xs), min(ys), max(ys)


def tiles_in_shape(
    polygons: Iterable[Sequence[Vertex]],
    holes: Iterable[Sequence[Vertex]],
    plane: int,
) -> Set[Position]:
    """Rasterise every polygon on ``plane`` into tiles, then subtract holes."""
    tiles: Set[Position] = set()
    for polygon in polygons:
        if len(polygon) < 3 or polygon_plane(polygon) != plane:
            continue
        min_x, max_x, min_y, max_y = _bounds(polygon)
        for x in range(min_x, max_x + 1):
            for y in range(min_y, max_y + 1):
                if point_in_polygon_xy(x, y, polygon):
                    tiles.add(Position(x, y, plane))
    for hole in holes:
        if len(hole) < 3 or polygon_plane(hole) != plane:
            continue
        tiles = {tile for tile in tiles if not point_in_polygon_xy(tile.x, tile.y, hole)}
    return tiles


def compute_region_ids(polygon: Sequence[Vertex]) -> Set[int]:
    """Sample region centres inside the polygon and add every vertex's region."""
    if not polygon:
        return set()
    region_ids: Set[int] = set()
    min_x, max_x, min_y, max_y = _bounds(polygon)
    start_x = (min_x >> _REGION_SHIFT) << _REGION_SHIFT
    start_y = (min_y >> _REGION_SHIFT) << _REGION_SHIFT
    half = REGION_SIZE // 2
    for region_x in range(start_x, max_x + 1, REGION_SIZE):
        for region_y in range(start_y, max_y + 1, REGION_SIZE):
            centre_x, centre_y = region_x + half, region_y + half
            if point_in_polygon_xy(centre_x, centre_y, polygon):
                region_ids.add(region_id_for(centre_x, centre_y))
    for vertex in polygon:
        region_ids.add(region_id_for(vertex[0], vertex[1]))
    return region_ids


__all__ = [
    "Polygon",
    "Position",
    "REGION_SIZE",
    "Vertex",
    "compute_region_ids",
    "point_in_polygon",
    "point_in_polygon_xy",
    "point_in_shape",
    "polygon_plane",
    "region_id_for",
    "tiles_in_shape",
]
