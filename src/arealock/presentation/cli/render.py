"""Shared CLI rendering helpers."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence

from arealock.core.types import AreaStatus, TaskState
from arealock.domain.task_tile import TaskTile, tile_id
from arealock.services import AreaSummaryView, PointsView

_STATE_GLYPHS: Dict[TaskState, str] = {
    TaskState.CLAIMED: "[x]",
    TaskState.COMPLETED_UNCLAIMED: "[!]",
    TaskState.REVEALED: "[ ]",
    TaskState.LOCKED: " # ",
}
_STATUS_LABELS: Dict[AreaStatus, str] = {
    AreaStatus.LOCKED: "locked",
    AreaStatus.UNLOCKED: "unlocked",
    AreaStatus.COMPLETE: "complete",
}


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def format_points(view: PointsView) -> str:
    return f"Points: {view.spendable} spendable ({view.earned} earned, {view.spent} spent)"


def format_area_rows(summaries: Iterable[AreaSummaryView]) -> List[str]:
    rows: List[str] = []
    for summary in summaries:
        rows.append(
            f"{summary.display_name:<20} {_STATUS_LABELS[summary.status]:<9} "
            f"cost {summary.unlock_cost:>4}  "
            f"earned {summary.earned_in_area}/{summary.points_to_complete}  "
            f"tiles {summary.claimed_tiles}/{summary.total_tiles}"
        )
    return rows


def format_grid(
    radius: int,
    states: Dict[str, TaskState],
    is_mystery: Callable[[str], bool] = lambda _tile_id: False,
) -> List[str]:
    """Draw the grid row by row; revealed mystery tiles show as ``[?]``."""
    lines: List[str] = []
    for row in range(-radius, radius + 1):
        cells: List[str] = []
        for col in range(-radius, radius + 1):
            current = tile_id(row, col)
            state = states[current]
            if state is TaskState.REVEALED and is_mystery(current):
                cells.append("[?]")
            else:
                cells.append(_STATE_GLYPHS[state])
        lines.append("".join(cells))
    return lines


def format_tiles(tiles: Sequence[TaskTile], is_mystery: Callable[[TaskTile], bool]) -> List[str]:
    lines: List[str] = []
    for tile in tiles:
        name = "???" if is_mystery(tile) else tile.display_name
        suffix = f" ({tile.task_type})" if tile.task_type and not is_mystery(tile) else ""
        lines.append(f"{tile.id:>6}  tier {tile.tier}  {tile.points:>3} pts  {name}{suffix}")
    return lines


def render_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)
