"""Task-grid tiles and the pure derivation of their state."""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterator, Tuple

from arealock.core.types import TaskState

GRID_RADIUS = 5

_CARDINAL_OFFSETS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def tile_id(row: int, col: int) -> str:
    return f"{row},{col}"


def parse_tile_id(value: str) -> Tuple[int, int] | None:
    """Return ``(row, col)`` for a ``"row,col"`` id, or None when malformed."""
    row_text, sep, col_text = value.partition(",")
    if not sep:
        return None
    try:
        return int(row_text.strip()), int(col_text.strip())
    except ValueError:
        return None


def tier_of(row: int, col: int) -> int:
    """Chebyshev distance from the centre tile."""
    return max(abs(row), abs(col))


def iter_lattice(radius: int = GRID_RADIUS) -> Iterator[Tuple[int, int]]:
    """Yield every ``(row, col)`` of the lattice: centre first, then by tier, row, col."""
    yield 0, 0
    for tier in range(1, radius + 1):
        for row in range(-tier, tier + 1):
            for col in range(-tier, tier + 1):
                if tier_of(row, col) == tier:
                    yield row, col


def derive_tile_state(
    row: int,
    col: int,
    claimed: AbstractSet[str],
    completed: AbstractSet[str],
) -> TaskState:
    """Compute a tile's state from the persisted claimed/completed id sets.

    Claimed wins over completed; a tile next to a claimed tile (or the centre
    itself) is revealed; everything else stays locked.
    """
    own_id = tile_id(row, col)
    if own_id in claimed:
        return TaskState.CLAIMED
    if own_id in completed:
        return TaskState.COMPLETED_UNCLAIMED
    if row == 0 and col == 0:
        return TaskState.REVEALED
    for d_row, d_col in _CARDINAL_OFFSETS:
        if tile_id(row + d_row, col + d_col) in claimed:
            return TaskState.REVEALED
    return TaskState.LOCKED


@dataclass(frozen=True, slots=True)
class TaskTile:
    """One cell of an area's grid together with its assigned task."""

    row: int
    col: int
    points: int
    display_name: str
    task_type: str | None = None
    required_area_ids: Tuple[str, ...] = ()
    require_all_areas: bool = True
    requirements: str | None = None

    @property
    def id(self) -> str:
        return tile_id(self.row, self.col)

    @property
    def tier(self) -> int:
        return tier_of(self.row, self.col)

    @property
    def is_center(self) -> bool:
        return self.row == 0 and self.col == 0

    def is_mystery(self, unlocked_area_ids: AbstractSet[str]) -> bool:
        """True while the task's area requirement is not met by the unlocked set."""
        if not self.required_area_ids:
            return False
        if self.require_all_areas:
            return not all(area_id in unlocked_area_ids for area_id in self.required_area_ids)
        return not any(area_id in unlocked_area_ids for area_id in self.required_area_ids)
