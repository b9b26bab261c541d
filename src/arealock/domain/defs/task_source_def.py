"""Table of external task sources used when authoring task lists."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class TaskSourceDef:
    """One category of authoring source and the defaults applied to its tasks."""

    id: str
    display_name: str
    category_name: str
    default_task_type: str
    display_name_prefix: str = ""
    list_page_titles: Tuple[str, ...] = ()

    @property
    def has_list_pages(self) -> bool:
        return bool(self.list_page_titles)


TASK_SOURCES: Dict[str, TaskSourceDef] = {
    source.id: source
    for source in (
        TaskSourceDef("quests", "Quests", "Quests", "Quest", "Complete "),
        TaskSourceDef("miniquests", "Miniquests", "Miniquests", "Quest", "Complete "),
        TaskSourceDef("bosses", "Bosses", "Bosses", "Combat", "Defeat "),
        TaskSourceDef("npcs", "NPCs", "NPCs", "Combat", "Defeat "),
        TaskSourceDef("minigames", "Minigames", "Minigames", "Activity", "Complete "),
        TaskSourceDef("clue_scrolls", "Clue scrolls", "Clue scrolls", "Clue Scroll", "Complete "),
        TaskSourceDef(
            "combat_achievements",
            "Combat achievements",
            "Combat Achievements",
            "Combat",
            "Complete ",
        ),
        TaskSourceDef(
            "achievement_diary",
            "Achievement diary",
            "Achievement Diary",
            "Achievement Diary",
            list_page_titles=(
                "Achievement Diary/Lumbridge & Draynor",
                "Achievement Diary/Varrock",
                "Achievement Diary/Desert",
            ),
        ),
        TaskSourceDef(
            "league_tasks",
            "League tasks",
            "Trailblazer Reloaded League tasks",
            "Activity",
            list_page_titles=("Leagues 4 task list",),
        ),
    )
}
