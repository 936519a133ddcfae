"""
Timecamp Rofi — Time Aggregation Engine.

Fetches this week's entries (Monday through Sunday), persists them for the
menu's recency ordering, and writes today/week totals to status.json.
The running timer's live duration is folded into the totals here and
nowhere else; every other reader sees the last persisted summary.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable

from timecamp_rofi.core.active_timer import ActiveTimerState
from timecamp_rofi.data.models import (
    DATE_FORMAT,
    Running,
    StatusSummary,
    TimeEntry,
    TimerState,
    Totals,
)
from timecamp_rofi.data.store import ENTRIES_FILE, STATUS_FILE, JsonStore
from timecamp_rofi.ports.timer_port import TimerPort

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def week_window(today: date) -> tuple[date, date]:
    """Return (monday, sunday) of the ISO week containing today."""
    monday = today - timedelta(days=today.isoweekday() - 1)
    return monday, monday + timedelta(days=6)


def split_duration(seconds: int) -> Totals:
    """Split seconds into zero-padded hours and minutes, rounding down."""
    seconds = max(0, int(seconds))
    return Totals(
        hours=f"{seconds // 3600:02d}",
        minutes=f"{seconds % 3600 // 60:02d}",
    )


def _live_seconds_since(state: TimerState, boundary: datetime, now: datetime) -> int:
    """Seconds the running timer has accrued since boundary."""
    if not isinstance(state, Running):
        return 0
    since = max(state.timer.started_at, boundary)
    return max(0, int((now - since).total_seconds()))


def summarize(entries: list[TimeEntry], state: TimerState, now: datetime) -> StatusSummary:
    """Compute today/week totals from entries plus the running timer."""
    today_str = now.strftime(DATE_FORMAT)
    monday, _ = week_window(now.date())

    today = sum(e.duration for e in entries if e.date == today_str)
    week = sum(e.duration for e in entries)

    today += _live_seconds_since(state, datetime.combine(now.date(), time.min), now)
    week += _live_seconds_since(state, datetime.combine(monday, time.min), now)

    return StatusSummary(today=split_duration(today), week=split_duration(week))


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class TimeAggregator:
    """Refreshes entries.json and status.json from the remote service."""

    def __init__(
        self,
        client: TimerPort,
        store: JsonStore,
        timer_state: ActiveTimerState,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._client = client
        self._store = store
        self._timer_state = timer_state
        self._clock = clock

    async def refresh(self) -> StatusSummary:
        """Fetch this week's entries and persist entries + totals.

        Raises NetworkError before writing anything, so stale-but-valid
        files survive a failed refresh.
        """
        now = self._clock()
        range_start, range_end = week_window(now.date())
        entries = await self._client.fetch_entries(range_start, range_end)

        summary = summarize(entries, self._timer_state.read(now), now)

        self._store.write(ENTRIES_FILE, [e.model_dump() for e in entries])
        self._store.write(STATUS_FILE, summary.model_dump())
        logger.info(
            "Status refreshed: today %s, week %s (%d entries)",
            summary.today, summary.week, len(entries),
        )
        return summary
