"""
Timecamp Rofi — Task Catalog Cache.

Turns the flat task list from Timecamp into a two-level hierarchy
(groups -> tasks) and keeps it in tasks.json for the menu to read.

Catalog shape: ``{parent_id: [Task, ...]}``. Key 0 holds the top-level
groups; every other key holds one group's children, in API order.
Archived tasks are dropped at build time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import ValidationError

from timecamp_rofi.data.models import Task
from timecamp_rofi.data.store import TASKS_FILE, CacheMissError, JsonStore
from timecamp_rofi.ports.timer_port import TimerPort

logger = logging.getLogger(__name__)

TaskCatalog = dict[int, list[Task]]

ROOT_PARENT_ID = 0


def build_catalog(tasks: list[Task]) -> TaskCatalog:
    """Group non-archived tasks by parent id, preserving input order."""
    catalog: TaskCatalog = {ROOT_PARENT_ID: []}
    for task in tasks:
        if task.archived:
            continue
        catalog.setdefault(task.parent_id, []).append(task)
    return catalog


def iter_leaves(catalog: TaskCatalog) -> Iterator[tuple[Task, Task]]:
    """Yield (group, task) for every child of every top-level group."""
    for group in catalog.get(ROOT_PARENT_ID, []):
        for task in catalog.get(group.task_id, []):
            yield group, task


def render_name(group: Task, task: Task) -> str:
    """Menu label for a task, e.g. "Acme: Code review"."""
    return f"{group.name}: {task.name}"


class TaskCatalogCache:
    """Fetches, groups and persists the task hierarchy."""

    def __init__(self, client: TimerPort, store: JsonStore) -> None:
        self._client = client
        self._store = store

    async def refresh(self) -> TaskCatalog:
        """Rebuild the catalog from the API and replace tasks.json.

        Raises NetworkError before touching the cache, so a failed refresh
        leaves the previous catalog in place.
        """
        tasks = await self._client.fetch_tasks()
        catalog = build_catalog(tasks)

        self._store.write(
            TASKS_FILE,
            {
                str(parent_id): [t.model_dump() for t in group]
                for parent_id, group in catalog.items()
            },
        )
        logger.info(
            "Task catalog refreshed: %d groups, %d tasks kept of %d",
            len(catalog[ROOT_PARENT_ID]),
            sum(len(group) for group in catalog.values()),
            len(tasks),
        )
        return catalog

    def load(self) -> TaskCatalog:
        """Read tasks.json.

        Raises:
            CacheMissError: the cache is absent or malformed. An empty
            catalog is never substituted.
        """
        raw = self._store.read(TASKS_FILE)
        if not isinstance(raw, dict):
            raise CacheMissError(f"{TASKS_FILE} is not a mapping")

        try:
            return {
                int(parent_id): [Task.model_validate(t) for t in group]
                for parent_id, group in raw.items()
            }
        except (ValueError, TypeError, ValidationError) as exc:
            raise CacheMissError(f"{TASKS_FILE} is malformed: {exc}") from exc
