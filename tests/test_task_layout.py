from arealock.core.rng import RNG
from arealock.core.types import TaskMode
from arealock.domain.defs import TaskDef, TasksDef
from arealock.services.task_layout import (
    MAX_TASKS_PER_AREA,
    assign_tasks,
    once_only_assignments,
    tasks_for_area,
)


def _make_tasks() -> TasksDef:
    return TasksDef(
        default_tasks=(
            TaskDef("Chop a Log", difficulty=1, f2p=True),
            TaskDef("chop a log", difficulty=2, f2p=True),
            TaskDef("Kill a Cow", difficulty=1, area_ids=("lumbridge",), f2p=True),
            TaskDef("Buy a Kebab", difficulty=2, area_ids=("al_kharid",), f2p=True),
            TaskDef("Catch a Lobster", difficulty=3, f2p=False),
            TaskDef("Dragon Slayer", difficulty=5, once_only=True, f2p=True),
        )
    )


def test_tasks_for_area_filters_and_orders() -> None:
    pool = tasks_for_area(
        _make_tasks(), "lumbridge", known_area_ids=["varrock", "lumbridge", "al_kharid"]
    )
    names = [task.display_name for task in pool]

    assert names[0] == "Kill a Cow"
    assert "Buy a Kebab" not in names
    assert names.count("Chop a Log") + names.count("chop a log") == 1
    assert "Catch a Lobster" in names
    # once-only tasks go to the first eligible area in sorted order
    assert "Dragon Slayer" not in names


def test_once_only_assignment_goes_to_first_sorted_area() -> None:
    assignments = once_only_assignments(_make_tasks().default_tasks, ["varrock", "al_kharid"])

    assert assignments == {"dragon slayer": "al_kharid"}
    pool = tasks_for_area(_make_tasks(), "al_kharid", known_area_ids=["varrock", "al_kharid"])
    assert "Dragon Slayer" in [task.display_name for task in pool]


def test_free_to_play_mode_drops_members_tasks() -> None:
    pool = tasks_for_area(
        _make_tasks(), "lumbridge", known_area_ids=["lumbridge"], task_mode=TaskMode.FREE_TO_PLAY
    )

    assert "Catch a Lobster" not in [task.display_name for task in pool]


def test_per_area_list_replaces_default_list() -> None:
    tasks = TasksDef(
        default_tasks=(TaskDef("Default", difficulty=1),),
        area_tasks={"varrock": (TaskDef("Local", difficulty=1),)},
    )

    assert [task.display_name for task in tasks_for_area(tasks, "varrock", known_area_ids=["varrock"])] == [
        "Local"
    ]


def test_pool_is_capped() -> None:
    tasks = TasksDef(default_tasks=tuple(TaskDef(f"Task {i}") for i in range(MAX_TASKS_PER_AREA + 50)))

    assert len(tasks_for_area(tasks, "a", known_area_ids=["a"])) == MAX_TASKS_PER_AREA


def test_assign_tasks_prefers_ring_difficulty_and_never_repeats() -> None:
    pool = [TaskDef(f"Tier {difficulty} #{i}", difficulty=difficulty) for difficulty in range(1, 6) for i in range(8)]

    first = assign_tasks(pool, "a", RNG.for_key("a"), radius=1)
    second = assign_tasks(pool, "a", RNG.for_key("a"), radius=1)

    assert first == second
    assert len(first) == 8
    assert all(task is not None and task.difficulty == 1 for task in first.values())


def test_assign_tasks_falls_back_then_leaves_blanks() -> None:
    pool = [TaskDef("Hard", difficulty=5), TaskDef("Medium", difficulty=3)]

    assigned = assign_tasks(pool, "a", RNG.for_key("a"), radius=1)
    placed = [task.display_name for task in assigned.values() if task is not None]

    assert sorted(placed) == ["Hard", "Medium"]
    assert sum(task is None for task in assigned.values()) == 6
