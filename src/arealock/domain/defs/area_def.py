"""Area definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from arealock.core.geometry import Polygon, Position, point_in_shape, region_id_for


@dataclass(frozen=True, slots=True)
class AreaDef:
    """An unlockable map region: polygons and/or coarse region ids, plus graph data."""

    id: str
    display_name: str
    polygons: Tuple[Polygon, ...] = ()
    holes: Tuple[Polygon, ...] = ()
    includes: FrozenSet[int] = frozenset()
    neighbors: Tuple[str, ...] = ()
    unlock_cost: int = 0
    points_to_complete: int | None = None
    description: str | None = None

    @property
    def polygon(self) -> Polygon:
        """First polygon, or an empty tuple when the area is region-only."""
        return self.polygons[0] if self.polygons else ()

    @property
    def completion_threshold(self) -> int:
        if self.points_to_complete is not None:
            return self.points_to_complete
        return self.unlock_cost

    def contains(self, position: Position) -> bool:
        """Region-id membership or polygon containment on the position's plane."""
        if region_id_for(position.x, position.y) in self.includes:
            return True
        return point_in_shape(position, self.polygons, self.holes)
