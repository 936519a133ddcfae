"""
Timecamp Rofi — Menu Selection Protocol.

Builds the picker list from the task catalog and the active timer, hands it
to the picker, maps the chosen line back to a task (or to "stop"), and
drives the timer state machine accordingly.

Menu layout when a timer is running:

    Stop Task: Code review
    ---------------------
    Acme: Code review          <- most recently used first
    Acme: Planning
    Internal: Admin            <- never used, alphabetical
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from timecamp_rofi.core.active_timer import ActiveTimerState, Transition
from timecamp_rofi.core.catalog import TaskCatalog, TaskCatalogCache, iter_leaves, render_name
from timecamp_rofi.core.status import StatusReporter
from timecamp_rofi.data.models import NEVER_USED, Running, Task, TimeEntry
from timecamp_rofi.data.store import ENTRIES_FILE, CacheMissError, JsonStore
from timecamp_rofi.ports.picker_port import PickerPort

logger = logging.getLogger(__name__)

STOP_PREFIX = "Stop Task:"


@dataclass(frozen=True)
class StopSentinel:
    """The user chose the "Stop Task" line."""


@dataclass(frozen=True)
class NoMatch:
    """The chosen text matches nothing in the catalog."""

    text: str


Selection = StopSentinel | Task | NoMatch


def last_used_by_task(entries: list[TimeEntry]) -> dict[int, str]:
    """Latest last_modify timestamp per task id."""
    last: dict[int, str] = {}
    for entry in entries:
        if entry.last_modify > last.get(entry.task_id, NEVER_USED):
            last[entry.task_id] = entry.last_modify
    return last


def order_leaves(catalog: TaskCatalog, entries: list[TimeEntry]) -> list[str]:
    """Rendered leaf names, most recently used first, then by name."""
    last = last_used_by_task(entries)
    rows = [
        (render_name(group, task), last.get(task.task_id, NEVER_USED))
        for group, task in iter_leaves(catalog)
    ]
    rows.sort(key=lambda row: row[0])
    # stable: equal timestamps keep the alphabetical order from above
    rows.sort(key=lambda row: row[1], reverse=True)
    return [name for name, _ in rows]


class MenuSelection:
    """Interactive start/stop flow on top of the catalog and timer state."""

    def __init__(
        self,
        catalog_cache: TaskCatalogCache,
        timer_state: ActiveTimerState,
        picker: PickerPort,
        store: JsonStore,
        status: StatusReporter | None = None,
    ) -> None:
        self._catalog_cache = catalog_cache
        self._timer_state = timer_state
        self._picker = picker
        self._store = store
        self._status = status

    def _load_entries(self) -> list[TimeEntry]:
        """Entries for recency ordering; missing or bad data means "never used"."""
        try:
            raw = self._store.read(ENTRIES_FILE)
            return [TimeEntry.model_validate(e) for e in raw]
        except (CacheMissError, ValidationError, TypeError) as exc:
            logger.debug("No usable entries for ordering: %s", exc)
            return []

    def build_menu(self) -> list[str]:
        """Return the picker lines.

        Raises:
            CacheMissError: no task catalog has been cached yet.
        """
        catalog = self._catalog_cache.load()
        lines: list[str] = []

        state = self._timer_state.read()
        if isinstance(state, Running):
            name = state.timer.name
            lines.append(f"{STOP_PREFIX} {name}")
            lines.append("-" * (len(name) + len(STOP_PREFIX) + 1))

        lines.extend(order_leaves(catalog, self._load_entries()))
        return lines

    def resolve_selection(self, text: str, catalog: TaskCatalog | None = None) -> Selection:
        """Map a chosen line back to a StopSentinel, a Task or NoMatch."""
        if text.startswith(STOP_PREFIX):
            return StopSentinel()

        if catalog is None:
            catalog = self._catalog_cache.load()
        for group, task in iter_leaves(catalog):
            if render_name(group, task) == text:
                return task
        return NoMatch(text=text)

    async def run(self) -> Transition | None:
        """Show the menu and act on the choice. None means nothing changed."""
        lines = self.build_menu()
        message = self._status.menu_banner() if self._status else ""

        chosen = await self._picker.choose(lines, message)
        if not chosen:
            logger.debug("Picker cancelled")
            return None

        selection = self.resolve_selection(chosen)
        if isinstance(selection, StopSentinel):
            return await self._timer_state.stop()
        if isinstance(selection, Task):
            return await self._timer_state.start(selection)

        logger.info("Ignoring unknown selection %r", selection.text)
        return None
