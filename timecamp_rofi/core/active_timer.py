"""
Timecamp Rofi — Active Timer State.

The single source of truth for "what is running right now". The state is
persisted as active.json: present means Running, absent means Idle.

Transitions keep local and remote state in agreement, with one bias: when
they cannot agree, local state falls back to Idle. An orphaned remote
timer is logged and left for the user to fix; a local "running" indicator
for a timer the user believes is stopped is never left behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from timecamp_rofi.data.models import ActiveTimer, Idle, Running, Task, TimerState
from timecamp_rofi.data.store import ACTIVE_FILE, CacheMissError, JsonStore
from timecamp_rofi.ports.notification_port import NotificationPort
from timecamp_rofi.ports.timer_port import NetworkError, TimerPort

logger = logging.getLogger(__name__)


class TimerStartError(Exception):
    """Raised when the remote service refused or failed to start a timer."""


@dataclass(frozen=True)
class Transition:
    """Outcome of a start/stop: the new state plus what happened on the way."""

    state: TimerState
    stopped: ActiveTimer | None = None   # timer that this transition stopped
    remote_ok: bool = True               # False: remote stop failed, timer orphaned


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class ActiveTimerState:
    """Idle/Running state machine mirrored against the remote timer."""

    def __init__(
        self,
        client: TimerPort,
        store: JsonStore,
        notifier: NotificationPort | None = None,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._client = client
        self._store = store
        self._notifier = notifier
        self._clock = clock

    # ----- Reads -----

    def _load(self) -> ActiveTimer | None:
        try:
            raw = self._store.read(ACTIVE_FILE)
        except CacheMissError as exc:
            if self._store.exists(ACTIVE_FILE):
                logger.warning("Ignoring unreadable active timer: %s", exc)
            return None

        try:
            return ActiveTimer.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Ignoring malformed active timer: %s", exc)
            return None

    def read(self, now: datetime | None = None) -> TimerState:
        """Return the persisted state. Never touches the network."""
        timer = self._load()
        if timer is None:
            return Idle()
        now = now or self._clock()
        return Running(timer=timer, elapsed_seconds=timer.elapsed_seconds(now))

    # ----- Transitions -----

    async def start(self, task: Task) -> Transition:
        """Start a timer for task, stopping any running one first.

        Raises:
            TimerStartError: the remote start failed; local state is Idle.
        """
        previous = None
        if self._load() is not None:
            previous = (await self.stop()).stopped

        started_at = self._clock()
        try:
            handle = await self._client.start_timer(task.task_id, started_at)
        except NetworkError as exc:
            logger.error("Could not start timer for '%s': %s", task.name, exc)
            raise TimerStartError(f"Could not start timer for {task.name!r}") from exc

        timer = ActiveTimer(
            timer_id=handle.new_timer_id,
            task_id=task.task_id,
            name=task.name,
            started_at=started_at,
        )
        self._store.write(ACTIVE_FILE, timer.model_dump())
        logger.info("Started timer %d for '%s'", timer.timer_id, timer.name)

        await self._notify("Task Started", timer.name)
        return Transition(state=Running(timer=timer, elapsed_seconds=0), stopped=previous)

    async def stop(self) -> Transition:
        """Stop the running timer. A no-op when already Idle."""
        timer = self._load()
        if timer is None:
            if self._store.delete(ACTIVE_FILE):
                logger.warning("Discarded unreadable %s", ACTIVE_FILE)
            return Transition(state=Idle())

        remote_ok = True
        try:
            await self._client.stop_timer(timer.timer_id, self._clock())
        except NetworkError as exc:
            remote_ok = False
            logger.error(
                "Remote timer %d for '%s' may still be running: %s",
                timer.timer_id, timer.name, exc,
            )
        finally:
            try:
                self._store.delete(ACTIVE_FILE)
            except OSError as exc:
                logger.error("Could not remove %s: %s", ACTIVE_FILE, exc)

        logger.info("Stopped timer %d for '%s'", timer.timer_id, timer.name)
        await self._notify("Task Stopped", timer.name)
        return Transition(state=Idle(), stopped=timer, remote_ok=remote_ok)

    async def _notify(self, title: str, body: str) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.notify(title, body)
        except Exception as exc:
            logger.warning("Notification failed: %s", exc)
