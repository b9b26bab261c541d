"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict

from arealock.core.types import CompletionMode, TaskMode
from arealock.services import ProgressionSettings
from arealock.services.task_grid import DEFAULT_TIER_POINTS

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_DEFAULT_LOG_LEVEL = "WARNING"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "AreaLock"
        return Path.home() / "AreaLock"
    return Path.home() / ".config" / "arealock"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_state_path() -> Path:
    """Return the file holding persisted progression state."""
    return get_user_data_dir() / "state.json"


@dataclass(slots=True)
class AppConfig:
    """User options; every field falls back to its default when invalid."""

    completion_mode: str = CompletionMode.FULL_CLAIM.value
    starting_area: str = "lumbridge"
    starting_points: int = 0
    tier_points: Dict[int, int] = field(default_factory=lambda: dict(DEFAULT_TIER_POINTS))
    task_mode: str = TaskMode.MEMBERS.value
    tasks_file_path: str = ""
    log_level: str = _DEFAULT_LOG_LEVEL

    def to_settings(self) -> ProgressionSettings:
        return ProgressionSettings(
            completion_mode=CompletionMode(self.completion_mode),
            starting_area=self.starting_area,
            starting_points=self.starting_points,
            tier_points=dict(self.tier_points),
            task_mode=TaskMode(self.task_mode),
            tasks_file_path=self.tasks_file_path,
        )


def _normalize_choice(value: object, allowed: tuple[str, ...], default: str) -> str:
    return value if isinstance(value, str) and value in allowed else default


def _normalize_non_negative(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _normalize_tier_points(value: object) -> Dict[int, int]:
    points = dict(DEFAULT_TIER_POINTS)
    if not isinstance(value, dict):
        return points
    for raw_tier, raw_points in value.items():
        try:
            tier = int(raw_tier)
        except (TypeError, ValueError):
            continue
        if tier in points:
            points[tier] = _normalize_non_negative(raw_points, points[tier])
    return points


def _normalize(raw: dict[str, object]) -> AppConfig:
    defaults = AppConfig()
    starting_area = raw.get("starting_area")
    tasks_file_path = raw.get("tasks_file_path")
    log_level = raw.get("log_level")
    return AppConfig(
        completion_mode=_normalize_choice(
            raw.get("completion_mode"),
            tuple(mode.value for mode in CompletionMode),
            defaults.completion_mode,
        ),
        starting_area=(
            starting_area.strip()
            if isinstance(starting_area, str) and starting_area.strip()
            else defaults.starting_area
        ),
        starting_points=_normalize_non_negative(raw.get("starting_points"), defaults.starting_points),
        tier_points=_normalize_tier_points(raw.get("tier_points")),
        task_mode=_normalize_choice(
            raw.get("task_mode"), tuple(mode.value for mode in TaskMode), defaults.task_mode
        ),
        tasks_file_path=tasks_file_path.strip() if isinstance(tasks_file_path, str) else "",
        log_level=_normalize_choice(
            log_level.upper() if isinstance(log_level, str) else None,
            _LOG_LEVELS,
            defaults.log_level,
        ),
    )


def load_config(path: Path | None = None) -> AppConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return AppConfig()
    except (OSError, ValueError) as exc:
        logger.warning("Using default options; could not read %s: %s", config_path, exc)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _normalize(raw)


def save_config(config: AppConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    payload["tier_points"] = {str(tier): points for tier, points in payload["tier_points"].items()}
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def resolve_log_level(config: AppConfig) -> str:
    """The ``AREALOCK_LOG_LEVEL`` environment variable wins over the config file."""
    override = os.getenv("AREALOCK_LOG_LEVEL", "").strip().upper()
    return override if override in _LOG_LEVELS else config.log_level
