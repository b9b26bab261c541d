from itertools import combinations

from arealock.core.types import TaskState
from arealock.domain.task_tile import (
    GRID_RADIUS,
    TaskTile,
    derive_tile_state,
    iter_lattice,
    parse_tile_id,
    tier_of,
    tile_id,
)


def test_lattice_has_121_tiles_centre_first() -> None:
    coords = list(iter_lattice(GRID_RADIUS))
    assert len(coords) == 121
    assert len(set(coords)) == 121
    assert coords[0] == (0, 0)
    tiers = [tier_of(row, col) for row, col in coords]
    assert tiers == sorted(tiers)


def test_tile_id_round_trip_and_malformed_ids() -> None:
    assert tile_id(-2, 3) == "-2,3"
    assert parse_tile_id("-2,3") == (-2, 3)
    assert parse_tile_id(" 1 , 0 ") == (1, 0)
    assert parse_tile_id("1;0") is None
    assert parse_tile_id("a,b") is None
    assert parse_tile_id("") is None


def test_centre_is_never_locked() -> None:
    assert derive_tile_state(0, 0, set(), set()) is TaskState.REVEALED
    assert derive_tile_state(0, 0, set(), {"0,0"}) is TaskState.COMPLETED_UNCLAIMED
    assert derive_tile_state(0, 0, {"0,0"}, {"0,0"}) is TaskState.CLAIMED


def test_claimed_wins_over_completed() -> None:
    assert derive_tile_state(1, 0, {"1,0"}, {"1,0"}) is TaskState.CLAIMED


def test_only_cardinal_neighbours_reveal() -> None:
    claimed = {"0,0"}
    assert derive_tile_state(1, 0, claimed, set()) is TaskState.REVEALED
    assert derive_tile_state(-1, 0, claimed, set()) is TaskState.REVEALED
    assert derive_tile_state(0, 1, claimed, set()) is TaskState.REVEALED
    assert derive_tile_state(0, -1, claimed, set()) is TaskState.REVEALED
    assert derive_tile_state(1, 1, claimed, set()) is TaskState.LOCKED
    assert derive_tile_state(2, 0, claimed, set()) is TaskState.LOCKED


def test_derived_state_matches_rule_for_every_small_claim_set() -> None:
    coords = list(iter_lattice(1))
    ids = [tile_id(row, col) for row, col in coords]
    for size in range(0, 3):
        for claimed_ids in combinations(ids, size):
            claimed = set(claimed_ids)
            completed = {"1,1"} - claimed
            for row, col in coords:
                own = tile_id(row, col)
                state = derive_tile_state(row, col, claimed, completed)
                if own in claimed:
                    expected = TaskState.CLAIMED
                elif own in completed:
                    expected = TaskState.COMPLETED_UNCLAIMED
                elif (row, col) == (0, 0) or any(
                    tile_id(row + dr, col + dc) in claimed
                    for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1))
                ):
                    expected = TaskState.REVEALED
                else:
                    expected = TaskState.LOCKED
                assert state is expected
                if (row, col) == (0, 0):
                    assert state is not TaskState.LOCKED


def test_task_tile_mystery_requirements() -> None:
    all_areas = TaskTile(row=1, col=0, points=1, display_name="x", required_area_ids=("a", "b"))
    any_area = TaskTile(
        row=1,
        col=0,
        points=1,
        display_name="x",
        required_area_ids=("a", "b"),
        require_all_areas=False,
    )
    anywhere = TaskTile(row=1, col=0, points=1, display_name="x")

    assert all_areas.is_mystery({"a"})
    assert not all_areas.is_mystery({"a", "b"})
    assert not any_area.is_mystery({"b"})
    assert any_area.is_mystery(set())
    assert not anywhere.is_mystery(set())
    assert all_areas.id == "1,0"
    assert all_areas.tier == 1
    assert not all_areas.is_center
