"""Console-driven UI loop for the progression engine."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Sequence

from arealock.core.geometry import Position
from arealock.data.errors import DataError
from arealock.data.state_store import JsonFileStateStore
from arealock.presentation.cli import config as cli_config
from arealock.presentation.cli.render import (
    format_area_rows,
    format_grid,
    format_points,
    format_tiles,
    render_heading,
    render_lines,
)
from arealock.services import ProgressionService

MenuAction = Literal[
    "areas",
    "unlock",
    "grid",
    "complete",
    "claim",
    "position",
    "import",
    "export",
    "reset",
    "quit",
]

_MENU: Sequence[tuple[MenuAction, str]] = (
    ("areas", "Show areas"),
    ("unlock", "Unlock an area"),
    ("grid", "View a task grid"),
    ("complete", "Mark a task completed"),
    ("claim", "Claim a task"),
    ("position", "Check a position"),
    ("import", "Import custom areas"),
    ("export", "Export areas"),
    ("reset", "Reset progress"),
    ("quit", "Quit"),
)


def main() -> None:
    """Start the interactive CLI session."""
    app_config = cli_config.load_config()
    logging.basicConfig(
        level=cli_config.resolve_log_level(app_config),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = JsonFileStateStore(cli_config.get_state_path())
    service = ProgressionService.build(app_config.to_settings(), store)
    service.start()
    print("=== Area Lock ===")
    running = True
    while running:
        action = _main_menu_loop(service)
        if action == "quit":
            running = False
            continue
        _handle_action(service, action)
    print("Goodbye!")


def _main_menu_loop(service: ProgressionService) -> MenuAction:
    while True:
        print()
        print(format_points(service.points_view()))
        print("Main Menu")
        for idx, (_, label) in enumerate(_MENU, start=1):
            print(f"{idx}. {label}")
        choice = input("Select an option: ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(_MENU):
            return _MENU[int(choice) - 1][0]
        print(f"Invalid selection. Please enter 1-{len(_MENU)}.")


def _handle_action(service: ProgressionService, action: MenuAction) -> None:
    if action == "areas":
        render_heading("Areas")
        render_lines(format_area_rows(service.area_summaries()))
    elif action == "unlock":
        _unlock_flow(service)
    elif action == "grid":
        _grid_flow(service)
    elif action == "complete":
        area_id = _prompt_unlocked_area(service)
        if area_id is None:
            return
        tile = input("Tile id (row,col): ").strip()
        if service.complete_task(area_id, tile):
            print(f"Tile {tile} marked completed.")
        else:
            print("Unknown tile.")
    elif action == "claim":
        area_id = _prompt_unlocked_area(service)
        if area_id is None:
            return
        result = service.claim_task(area_id, input("Tile id (row,col): ").strip())
        if result.claimed:
            print(f"Claimed for {result.points} points.")
        else:
            print(result.reason)
    elif action == "position":
        _position_flow(service)
    elif action == "import":
        _import_flow(service)
    elif action == "export":
        _export_flow(service)
    elif action == "reset":
        confirm = input("Reset all progress? This cannot be undone. Type 'reset': ").strip()
        if confirm == "reset":
            points, area_id = service.reset_progress()
            print(f"Progress reset. Starting in {area_id} with {points} points.")


def _unlock_flow(service: ProgressionService) -> None:
    candidates = service.unlock_candidates()
    if not candidates:
        print("No areas can be unlocked right now.")
        return
    render_heading("Unlockable areas")
    spendable = service.ledger.spendable()
    for idx, area in enumerate(candidates, start=1):
        marker = "" if area.unlock_cost <= spendable else " (cannot afford)"
        print(f"{idx}. {area.display_name} - {area.unlock_cost} pts{marker}")
    choice = _prompt_index(len(candidates))
    if choice is None:
        return
    decision = service.unlock_area(candidates[choice].id)
    if decision.allowed:
        print(f"Unlocked {candidates[choice].display_name}.")
    else:
        print(decision.reason)


def _grid_flow(service: ProgressionService) -> None:
    area_id = _prompt_unlocked_area(service)
    if area_id is None:
        return
    grid = service.task_grid
    tiles = {tile.id: tile for tile in grid.grid_for_area(area_id)}
    render_heading(f"Tasks: {area_id}")
    render_lines(
        format_grid(
            grid.radius,
            grid.tile_states(area_id),
            lambda current: grid.is_mystery(tiles[current]),
        )
    )
    print("\nRevealed tasks:")
    render_lines(format_tiles(grid.revealed_tiles(area_id), grid.is_mystery))


def _position_flow(service: ProgressionService) -> None:
    raw = input("Position as 'x y plane': ").split()
    try:
        x, y, plane = (int(part) for part in raw)
    except ValueError:
        print("Please enter three integers.")
        return
    view = service.on_position_changed(Position(x, y, plane))
    where = view.area_name or "unmapped territory"
    print(f"{where}: {'permitted' if view.permitted else 'LOCKED'}")


def _import_flow(service: ProgressionService) -> None:
    path = Path(input("Path to area JSON: ").strip())
    try:
        count = service.import_areas(path.read_text(encoding="utf-8"))
    except OSError as exc:
        print(f"Could not read {path}: {exc}")
        return
    except DataError as exc:
        print(f"Import failed: {exc}")
        return
    print(f"Imported {count} areas.")


def _export_flow(service: ProgressionService) -> None:
    path = Path(input("Export to path: ").strip())
    try:
        path.write_text(service.area_graph.export_areas_json(), encoding="utf-8")
    except OSError as exc:
        print(f"Could not write {path}: {exc}")
        return
    print(f"Exported {len(service.area_graph.areas())} areas to {path}.")


def _prompt_unlocked_area(service: ProgressionService) -> str | None:
    unlocked: List[str] = sorted(service.area_graph.unlocked_ids())
    for idx, area_id in enumerate(unlocked, start=1):
        area = service.area_graph.area(area_id)
        print(f"{idx}. {area.display_name if area is not None else area_id}")
    choice = _prompt_index(len(unlocked))
    return unlocked[choice] if choice is not None else None


def _prompt_index(count: int) -> int | None:
    """Return a zero-based index, or None on blank input."""
    while True:
        raw = input("Select (blank to cancel): ").strip()
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= count:
            return int(raw) - 1
        print(f"Please enter a value between 1 and {count}.")
