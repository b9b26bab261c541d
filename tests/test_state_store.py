import json
from pathlib import Path

import pytest

from arealock.data.errors import StateStoreError
from arealock.data.state_store import InMemoryStateStore, JsonFileStateStore


def test_in_memory_store_basic_operations() -> None:
    store = InMemoryStateStore({"a": "1"})
    store.set("b", "2")
    store.set_many({"taskProgress_x_claimed": "0,0", "taskProgress_y_claimed": "1,0"})
    store.unset("a")
    store.unset("missing")

    assert store.get("a") is None
    assert store.get("b") == "2"
    assert store.keys() == ["b", "taskProgress_x_claimed", "taskProgress_y_claimed"]

    store.unset_prefix("taskProgress_")
    assert store.snapshot() == {"b": "2"}


def test_json_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    store = JsonFileStateStore(path)
    store.set("unlockedAreas", "lumbridge")
    store.set_many({"pointsEarnedTotal": "10", "pointsSpentTotal": "0"})

    reopened = JsonFileStateStore(path)
    assert reopened.get("unlockedAreas") == "lumbridge"
    assert reopened.get("pointsEarnedTotal") == "10"
    assert json.loads(path.read_text(encoding="utf-8"))["pointsSpentTotal"] == "0"
    assert list(path.parent.glob("*.tmp")) == []


def test_json_store_unset_prefix(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    store = JsonFileStateStore(path)
    store.set("taskProgress_a_claimed", "0,0")
    store.set("keep", "yes")
    store.unset_prefix("taskProgress_")

    assert JsonFileStateStore(path).keys() == ["keep"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", ""])
def test_json_store_ignores_unreadable_file(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")

    store = JsonFileStateStore(path)

    assert store.keys() == []
    store.set("unlockedAreas", "lumbridge")
    assert JsonFileStateStore(path).get("unlockedAreas") == "lumbridge"


def test_json_store_drops_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"a": "1", "b": 2, "c": None}), encoding="utf-8")

    assert JsonFileStateStore(path).keys() == ["a"]


def test_json_store_write_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = JsonFileStateStore(blocker / "state.json")

    with pytest.raises(StateStoreError):
        store.set("unlockedAreas", "lumbridge")
