"""Shared enums for the core and domain layers."""
from __future__ import annotations

from enum import Enum


class CompletionMode(str, Enum):
    """Policy deciding when an unlocked area counts as complete."""

    THRESHOLD = "threshold"
    FULL_CLAIM = "full_claim"


class TaskMode(str, Enum):
    """Which tasks are eligible for grid assignment."""

    MEMBERS = "members"
    FREE_TO_PLAY = "free_to_play"


class AreaStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETE = "complete"


class TaskState(str, Enum):
    """Derived state of a single task-grid tile."""

    LOCKED = "locked"
    REVEALED = "revealed"
    COMPLETED_UNCLAIMED = "completed_unclaimed"
    CLAIMED = "claimed"


__all__ = [
    "AreaStatus",
    "CompletionMode",
    "TaskMode",
    "TaskState",
]
