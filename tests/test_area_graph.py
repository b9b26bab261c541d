import json
from dataclasses import replace

import pytest

from arealock.core.geometry import Position
from arealock.data import state_keys
from arealock.data.errors import DataValidationError
from arealock.data.state_store import InMemoryStateStore
from arealock.domain.defs import AreaDef
from tests.helpers.area_fixtures import area_record, make_graph, rect


def test_unlockable_neighbors_and_persistence() -> None:
    store = InMemoryStateStore()
    graph = make_graph(store=store)
    graph.set_unlocked({"start"})

    assert {area.id for area in graph.unlockable_neighbors()} == {"east"}
    assert store.get(state_keys.UNLOCKED_AREAS) == "start"

    graph.add_unlocked("east")
    assert graph.unlockable_neighbors() == set()
    assert store.get(state_keys.UNLOCKED_AREAS) == "east,start"


def test_unlockable_neighbors_limited_to_sources() -> None:
    records = [
        area_record("hub", neighbors=["a", "b"]),
        area_record("a", neighbors=["hub", "c"]),
        area_record("b", neighbors=["hub"]),
        area_record("c", neighbors=["a"]),
    ]
    graph = make_graph(records)
    graph.set_unlocked({"hub", "a"})

    assert {area.id for area in graph.unlockable_neighbors()} == {"b", "c"}
    assert {area.id for area in graph.unlockable_neighbors({"a"})} == {"c"}
    assert graph.unlockable_neighbors({"unknown"}) == set()


def test_unknown_neighbor_ids_are_ignored() -> None:
    graph = make_graph([area_record("solo", neighbors=["ghost"])])
    graph.set_unlocked({"solo"})

    assert graph.unlockable_neighbors() == set()


def test_is_unlocked_uses_polygons_and_region_ids() -> None:
    records = [
        area_record("start", rect(0, 0, 10, 10), includes=[]),
        area_record("caves", includes=[12950]),
    ]
    graph = make_graph(records)
    graph.set_unlocked({"start", "caves"})

    assert graph.is_unlocked(Position(5, 5))
    assert not graph.is_unlocked(Position(10, 5))
    assert not graph.is_unlocked(Position(5, 5, 1))
    assert graph.is_unlocked(Position(3210, 9610, 0))
    assert graph.contains_position(Position(3210, 9610, 2)).id == "caves"


def test_area_at_reports_locked_areas_too() -> None:
    graph = make_graph()
    graph.set_unlocked({"start"})

    assert graph.area_at(Position(15, 5)).id == "east"
    assert graph.contains_position(Position(15, 5)) is None
    assert graph.area_at(Position(50, 50)) is None


def test_locked_tiles_agree_with_is_unlocked() -> None:
    records = [
        area_record("start", rect(0, 0, 10, 10), neighbors=["east"], includes=[]),
        area_record("east", rect(5, 0, 20, 10), neighbors=["start"], cost=5, includes=[]),
    ]
    graph = make_graph(records)
    graph.set_unlocked({"start"})

    locked = graph.tiles_in_locked_areas(0)

    assert Position(12, 3, 0) in locked
    assert Position(7, 3, 0) not in locked
    assert all(not graph.is_unlocked(tile) for tile in locked)
    east = graph.area("east")
    for tile in graph.tiles_in_area(east, 0):
        assert (tile in locked) == (not graph.is_unlocked(tile))

    graph.add_unlocked("east")
    assert graph.tiles_in_locked_areas(0) == frozenset()


def test_load_restores_unlocked_set_from_store() -> None:
    store = InMemoryStateStore({state_keys.UNLOCKED_AREAS: "start, east"})
    graph = make_graph(store=store)

    assert graph.unlocked_ids() == frozenset({"start", "east"})


def test_custom_area_replaces_built_in_and_remove_restores() -> None:
    store = InMemoryStateStore()
    graph = make_graph(store=store)
    custom = AreaDef(id="east", display_name="Custom East", unlock_cost=7)

    graph.add_or_replace_custom_area(custom)
    assert graph.area("east").display_name == "Custom East"
    assert json.loads(store.get(state_keys.CUSTOM_AREAS))[0]["id"] == "east"

    graph.remove_area("east")
    assert graph.area("east").display_name == "East"

    graph.remove_area("east")
    assert graph.area("east") is None
    assert graph.removed_ids() == frozenset({"east"})
    assert json.loads(store.get(state_keys.REMOVED_AREAS)) == ["east"]

    graph.restore_area("east")
    assert graph.area("east").unlock_cost == 50


def test_custom_area_gets_region_ids_from_polygon() -> None:
    graph = make_graph()
    polygon = ((3200, 3200, 0), (3220, 3200, 0), (3220, 3220, 0), (3200, 3220, 0))
    graph.add_or_replace_custom_area(AreaDef(id="yard", display_name="Yard", polygons=(polygon,)))

    assert graph.area("yard").includes == frozenset({12850})


def test_editing_custom_polygon_recomputes_region_ids() -> None:
    graph = make_graph()
    lumbridge = ((3200, 3200, 0), (3220, 3200, 0), (3220, 3220, 0), (3200, 3220, 0))
    varrock = ((3200, 3400, 0), (3220, 3400, 0), (3220, 3420, 0), (3200, 3420, 0))
    graph.add_or_replace_custom_area(AreaDef(id="yard", display_name="Yard", polygons=(lumbridge,)))

    edited = replace(graph.area("yard"), polygons=(varrock,))
    graph.add_or_replace_custom_area(edited)

    assert graph.area("yard").includes == frozenset({12853})


def test_custom_layer_survives_reload() -> None:
    store = InMemoryStateStore()
    make_graph(store=store).add_or_replace_custom_area(AreaDef(id="extra", display_name="Extra"))

    assert make_graph(store=store).area("extra") is not None


def test_corrupt_custom_layer_is_ignored() -> None:
    store = InMemoryStateStore({state_keys.CUSTOM_AREAS: "{broken", state_keys.REMOVED_AREAS: "7"})
    graph = make_graph(store=store)

    assert [area.id for area in graph.areas()] == ["east", "start"]


def test_import_replaces_custom_layer_and_counts() -> None:
    graph = make_graph()
    payload = json.dumps([area_record("north", rect(0, 10, 10, 20), neighbors=["start"], cost=5)])

    assert graph.import_custom_areas(payload) == 1
    assert graph.area("north").unlock_cost == 5
    assert graph.import_custom_areas([]) == 0
    assert graph.area("north") is None


@pytest.mark.parametrize(
    "bad_record",
    [
        {"displayName": "Missing id"},
        {"id": "two_points", "polygon": [[0, 0, 0], [5, 5, 0]]},
        {"id": "high", "polygon": [[0, 0, 4], [5, 0, 4], [5, 5, 4]]},
        {"id": "a,b", "polygon": [[0, 0, 0], [5, 0, 0], [5, 5, 0]]},
        {"id": "start"},
    ],
)
def test_import_is_all_or_nothing(bad_record: dict) -> None:
    store = InMemoryStateStore()
    graph = make_graph(store=store)
    graph.import_custom_areas([area_record("keep", rect(0, 0, 3, 3))])
    before = store.get(state_keys.CUSTOM_AREAS)
    payload = [area_record("start", rect(0, 0, 5, 5)), bad_record]

    with pytest.raises(DataValidationError):
        graph.import_custom_areas(payload)

    assert store.get(state_keys.CUSTOM_AREAS) == before
    assert graph.area("keep") is not None
    assert graph.area("start").display_name == "Start"


def test_import_rejects_non_list_and_bad_json() -> None:
    graph = make_graph()

    with pytest.raises(DataValidationError):
        graph.import_custom_areas('{"id": "a"}')
    with pytest.raises(DataValidationError):
        graph.import_custom_areas("[not json")
    with pytest.raises(DataValidationError):
        graph.import_custom_areas("   ")


def test_import_computes_includes_only_when_absent() -> None:
    graph = make_graph()
    polygon = rect(3200, 3200, 3220, 3220)
    records = [
        area_record("computed", polygon),
        area_record("explicit", polygon, includes=[]),
    ]
    graph.import_custom_areas(records)

    assert graph.area("computed").includes == frozenset({12850})
    assert graph.area("explicit").includes == frozenset()


def test_export_then_import_preserves_containment() -> None:
    records = [
        area_record("start", rect(0, 0, 10, 10), neighbors=["east"], includes=[]),
        area_record("east", rect(10, 0, 20, 10), neighbors=["start"], cost=50, includes=[]),
        area_record("caves", includes=[12950], cost=3),
    ]
    source = make_graph(records)
    exported = source.export_areas_json()

    target = make_graph([area_record("other", rect(100, 100, 110, 110))])
    assert target.import_custom_areas(exported) == 3

    samples = [Position(0, 0), Position(9, 9), Position(10, 0), Position(19, 5), Position(3210, 9610)]
    for area in source.areas():
        imported = target.area(area.id)
        assert imported is not None
        assert imported.neighbors == area.neighbors
        assert imported.unlock_cost == area.unlock_cost
        for position in samples:
            assert imported.contains(position) == area.contains(position)


def test_areas_sorted_by_id() -> None:
    graph = make_graph([area_record("b"), area_record("a"), area_record("c")])

    assert [area.id for area in graph.areas()] == ["a", "b", "c"]
    assert graph.cost("missing") == 0
    assert graph.points_to_complete("missing") == 0


def test_editor_queries_distinguish_layers() -> None:
    graph = make_graph()
    graph.add_or_replace_custom_area(AreaDef(id="extra", display_name="Extra"))

    assert graph.is_built_in("start")
    assert not graph.is_built_in("extra")
    assert [area.id for area in graph.custom_areas()] == ["extra"]
    assert graph.removed_ids() == frozenset()
    assert [record["id"] for record in graph.export_areas()] == ["east", "extra", "start"]
