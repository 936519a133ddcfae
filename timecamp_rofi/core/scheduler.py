"""
Timecamp Rofi — Poll Scheduler.

Keeps the caches warm for the short-lived CLI invocations: the task catalog
every TIMEOUT_TASKS minutes and the status totals every TIMEOUT_ENTRIES
minutes, each run once immediately on startup.

Each job owns its own loop on the event loop. A job sleeps only after its
refresh has finished, so the same refresh never overlaps with itself, and
a failed cycle is logged without cancelling the ones after it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from timecamp_rofi.ports.timer_port import NetworkError

logger = logging.getLogger(__name__)


@dataclass
class PollJob:
    """One recurring refresh."""

    name: str
    interval_seconds: float
    action: Callable[[], Awaitable[Any]]


class PollScheduler:
    """Runs independent PollJobs until stopped."""

    def __init__(self, jobs: list[PollJob]) -> None:
        self._jobs = jobs
        self._stopping = asyncio.Event()

    @property
    def jobs(self) -> list[PollJob]:
        return list(self._jobs)

    def stop(self) -> None:
        """Ask every job loop to exit after its current cycle."""
        self._stopping.set()

    async def _run_once(self, job: PollJob) -> None:
        try:
            await job.action()
        except NetworkError as exc:
            logger.warning("%s refresh failed, keeping cached data: %s", job.name, exc)
        except Exception:
            logger.exception("%s refresh crashed", job.name)

    async def _loop(self, job: PollJob) -> None:
        logger.info("Polling %s every %.0f s", job.name, job.interval_seconds)
        while not self._stopping.is_set():
            await self._run_once(job)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=job.interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def run(self) -> None:
        """Run all jobs until stop() is called."""
        await asyncio.gather(*(self._loop(job) for job in self._jobs))
        logger.info("Poll scheduler stopped")


def build_poll_scheduler(
    refresh_tasks: Callable[[], Awaitable[Any]],
    refresh_entries: Callable[[], Awaitable[Any]],
    tasks_minutes: int,
    entries_minutes: int,
) -> PollScheduler:
    """Scheduler with the catalog and aggregation jobs."""
    return PollScheduler([
        PollJob(name="entries", interval_seconds=entries_minutes * 60, action=refresh_entries),
        PollJob(name="tasks", interval_seconds=tasks_minutes * 60, action=refresh_tasks),
    ])
