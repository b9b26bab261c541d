"""Tests for CLI rendering utilities."""
from arealock.core.types import AreaStatus, TaskState
from arealock.domain.task_tile import TaskTile, iter_lattice, tile_id
from arealock.presentation.cli.render import (
    format_area_rows,
    format_grid,
    format_points,
    format_tiles,
)
from arealock.services import AreaSummaryView, PointsView


def test_format_points() -> None:
    line = format_points(PointsView(earned=60, spent=50, spendable=10))
    assert line == "Points: 10 spendable (60 earned, 50 spent)"


def test_format_grid_draws_each_state() -> None:
    states = {tile_id(row, col): TaskState.LOCKED for row, col in iter_lattice(1)}
    states["0,0"] = TaskState.CLAIMED
    states["1,0"] = TaskState.COMPLETED_UNCLAIMED
    states["0,1"] = TaskState.REVEALED
    states["-1,0"] = TaskState.REVEALED

    lines = format_grid(1, states, lambda current: current == "-1,0")

    assert lines == [
        " # [?] # ",
        " # [x][ ]",
        " # [!] # ",
    ]


def test_format_tiles_hides_mystery_names() -> None:
    tiles = [
        TaskTile(row=1, col=0, points=1, display_name="Kill a Cow", task_type="Combat"),
        TaskTile(row=0, col=1, points=1, display_name="Kill Obor", required_area_ids=("varrock",)),
    ]

    lines = format_tiles(tiles, lambda tile: tile.is_mystery({"lumbridge"}))

    assert "Kill a Cow (Combat)" in lines[0]
    assert "???" in lines[1]
    assert "Obor" not in lines[1]


def test_format_area_rows() -> None:
    rows = format_area_rows(
        [
            AreaSummaryView(
                id="varrock",
                display_name="Varrock",
                status=AreaStatus.LOCKED,
                unlock_cost=50,
                earned_in_area=0,
                points_to_complete=100,
                claimed_tiles=0,
                total_tiles=121,
            )
        ]
    )

    assert len(rows) == 1
    assert "Varrock" in rows[0]
    assert "locked" in rows[0]
    assert "tiles 0/121" in rows[0]
