"""Movement and interaction gating."""
from __future__ import annotations

from arealock.core.geometry import Position
from arealock.services.area_graph import AreaGraph


class LockQuery:
    """Answers whether the player may act at a position; evaluated fresh on every call."""

    def __init__(self, *, area_graph: AreaGraph) -> None:
        self._area_graph = area_graph

    def is_permitted(self, position: Position) -> bool:
        return self._area_graph.is_unlocked(position)

    def is_in_locked_tile(self, position: Position) -> bool:
        """True if the position is one of the tiles a renderer would shade as locked."""
        return position in self._area_graph.tiles_in_locked_areas(position.plane)
