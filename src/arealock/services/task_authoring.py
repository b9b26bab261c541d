"""Authoring task lists from external title sources.

Network access is delegated to an injected ``fetch_titles`` callable and always
runs on a worker thread, so gameplay code never waits on it.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence

from arealock.domain.defs import TASK_SOURCES, TaskDef, TaskSourceDef, clamp_difficulty

logger = logging.getLogger(__name__)

TitleFetcher = Callable[[TaskSourceDef], Sequence[str]]
ProgressCallback = Callable[[str], None]


@dataclass(slots=True)
class AuthoringDefaults:
    """Values stamped onto every generated task."""

    difficulty: int = 3
    f2p: bool = True

    def __post_init__(self) -> None:
        self.difficulty = clamp_difficulty(self.difficulty)


def tasks_from_titles(
    source: TaskSourceDef,
    titles: Iterable[str],
    defaults: AuthoringDefaults | None = None,
) -> List[TaskDef]:
    """Turn page titles into tasks using the source's prefix and task type."""
    defaults = defaults or AuthoringDefaults()
    tasks: List[TaskDef] = []
    seen: set[str] = set()
    for title in titles:
        name = f"{source.display_name_prefix}{title.strip()}" if title and title.strip() else ""
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        tasks.append(
            TaskDef(
                display_name=name,
                task_type=source.default_task_type,
                difficulty=defaults.difficulty,
                f2p=defaults.f2p,
            )
        )
    return tasks


class TaskAuthoringService:
    """Generates tasks for selected sources off the calling thread."""

    def __init__(self, *, fetch_titles: TitleFetcher, max_workers: int = 1) -> None:
        self._fetch_titles = fetch_titles
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="task-authoring"
        )

    def generate(
        self,
        source_ids: Sequence[str],
        defaults: AuthoringDefaults | None = None,
        progress: ProgressCallback | None = None,
    ) -> List[TaskDef]:
        """Fetch and convert every source in order; blocks on the fetcher."""
        sources = [TASK_SOURCES[source_id] for source_id in source_ids]
        return self._run(sources, defaults, progress)

    def generate_async(
        self,
        source_ids: Sequence[str],
        defaults: AuthoringDefaults | None = None,
        on_done: Callable[[List[TaskDef]], None] | None = None,
        progress: ProgressCallback | None = None,
    ) -> "Future[List[TaskDef]]":
        """Run ``generate`` on the worker pool; unknown source ids raise KeyError immediately."""
        sources = [TASK_SOURCES[source_id] for source_id in source_ids]
        future = self._executor.submit(self._run, sources, defaults, progress)
        if on_done is not None:
            future.add_done_callback(lambda done: self._deliver(done, on_done))
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _run(
        self,
        sources: Sequence[TaskSourceDef],
        defaults: AuthoringDefaults | None,
        progress: ProgressCallback | None,
    ) -> List[TaskDef]:
        tasks: List[TaskDef] = []
        for source in sources:
            if progress is not None:
                progress(f"Fetching {source.display_name}...")
            generated = tasks_from_titles(source, self._fetch_titles(source), defaults)
            logger.info("Generated %d tasks from %s", len(generated), source.display_name)
            if progress is not None:
                progress(f"{source.display_name}: {len(generated)} tasks")
            tasks.extend(generated)
        return tasks

    @staticmethod
    def _deliver(future: "Future[List[TaskDef]]", on_done: Callable[[List[TaskDef]], None]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Task generation failed: %s", error)
            return
        on_done(future.result())
