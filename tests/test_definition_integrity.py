from arealock.core.geometry import Position
from arealock.data.repositories import AreasRepository, TasksRepository


def test_built_in_neighbors_exist_and_are_symmetric() -> None:
    areas = {area.id: area for area in AreasRepository().all()}

    assert "lumbridge" in areas
    assert areas["lumbridge"].unlock_cost == 0
    for area in areas.values():
        for neighbor_id in area.neighbors:
            assert neighbor_id in areas, f"{area.id} -> {neighbor_id}"
            assert area.id in areas[neighbor_id].neighbors, f"{neighbor_id} !-> {area.id}"


def test_built_in_areas_are_locatable() -> None:
    for area in AreasRepository().all():
        assert area.polygons or area.includes, area.id


def test_lumbridge_spawn_is_inside_lumbridge() -> None:
    areas = {area.id: area for area in AreasRepository().all()}

    assert areas["lumbridge"].contains(Position(3222, 3218, 0))
    assert not areas["varrock"].contains(Position(3222, 3218, 0))


def test_built_in_tasks_reference_known_areas() -> None:
    area_ids = {area.id for area in AreasRepository().all()}
    tasks = TasksRepository().load()

    assert len(tasks.default_tasks) >= 30
    for task in tasks.default_tasks:
        assert set(task.area_ids) <= area_ids, task.display_name
    names = [task.display_name.lower() for task in tasks.default_tasks]
    assert len(names) == len(set(names))
