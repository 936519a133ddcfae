"""Timer port — abstract interface for the remote time-tracking service.

Core modules depend on this protocol, never on a specific HTTP client.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from timecamp_rofi.data.models import RemoteTimerHandle, Task, TimeEntry


class NetworkError(Exception):
    """Raised when a remote call fails, times out or returns a malformed body."""


class TimerPort(Protocol):
    """Abstract remote timer interface used by core modules."""

    async def fetch_tasks(self) -> list[Task]: ...

    async def fetch_entries(
        self, range_start: date, range_end: date
    ) -> list[TimeEntry]: ...

    async def start_timer(
        self, task_id: int, started_at: datetime
    ) -> RemoteTimerHandle: ...

    async def stop_timer(self, timer_id: int, stopped_at: datetime) -> None: ...

