"""Shared test fixtures and configuration.

Sets up fake environment variables so timecamp_rofi.config loads without a
real .env, and provides common fixtures like a temp data directory.
"""

import os
import tempfile

# Patch env vars BEFORE any timecamp_rofi imports
os.environ.setdefault("TIMECAMP_KEY", "fake-key-for-tests")
os.environ.setdefault("TIMECAMP_DATA_DIR", tempfile.mkdtemp(prefix="timecamp-tests-"))
os.environ.setdefault("PICKER_COMMAND", "rofi -dmenu -i -p Task")

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from timecamp_rofi.data.models import RemoteTimerHandle, Task

# Wednesday; its week runs Monday 2026-10-19 .. Sunday 2026-10-25
FIXED_NOW = datetime(2026, 10, 21, 12, 0, 0)


def make_task(task_id: int, name: str, parent_id: int = 0, archived: bool = False) -> Task:
    return Task(task_id=task_id, parent_id=parent_id, name=name, archived=archived)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    """Return a JsonStore backed by a temp directory."""
    from timecamp_rofi.data.store import JsonStore
    return JsonStore(tmp_path / "timecamp")


@pytest.fixture
def client():
    """AsyncMock standing in for TimecampClient."""
    mock = AsyncMock()
    mock.fetch_tasks.return_value = []
    mock.fetch_entries.return_value = []
    mock.start_timer.side_effect = (
        lambda task_id, started_at: RemoteTimerHandle(new_timer_id=1000 + task_id)
    )
    mock.stop_timer.return_value = None
    return mock


@pytest.fixture
def notifier():
    return AsyncMock()


@pytest.fixture
def timer_state(client, store, notifier, clock):
    from timecamp_rofi.core.active_timer import ActiveTimerState
    return ActiveTimerState(client, store, notifier, clock=clock)


@pytest.fixture
def sample_tasks():
    """Two groups with children, plus an archived child and an archived group."""
    return [
        make_task(1, "Acme"),
        make_task(2, "Internal"),
        make_task(3, "Retired", archived=True),
        make_task(11, "Planning", parent_id=1),
        make_task(12, "Code review", parent_id=1),
        make_task(13, "Old project", parent_id=1, archived=True),
        make_task(21, "Admin", parent_id=2),
        make_task(31, "Ghost", parent_id=3),
    ]
