"""Tests for timecamp_rofi.core.aggregation — weekly totals."""

from datetime import date, datetime, timedelta

import pytest

from conftest import FIXED_NOW, make_task
from timecamp_rofi.core.aggregation import (
    TimeAggregator,
    split_duration,
    summarize,
    week_window,
)
from timecamp_rofi.data.models import ActiveTimer, Idle, Running, TimeEntry
from timecamp_rofi.ports.timer_port import NetworkError


def _entry(day: str, duration: int, task_id: int = 11, last_modify: str = "") -> TimeEntry:
    return TimeEntry(date=day, duration=duration, task_id=task_id, last_modify=last_modify)


def _running(started_at: datetime) -> Running:
    timer = ActiveTimer(timer_id=1, task_id=11, name="Planning", started_at=started_at)
    return Running(timer=timer, elapsed_seconds=timer.elapsed_seconds(FIXED_NOW))


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestWeekWindow:
    def test_midweek(self):
        assert week_window(date(2026, 10, 21)) == (date(2026, 10, 19), date(2026, 10, 25))

    def test_monday_starts_its_own_week(self):
        assert week_window(date(2026, 10, 19)) == (date(2026, 10, 19), date(2026, 10, 25))

    def test_sunday_belongs_to_previous_monday(self):
        assert week_window(date(2026, 10, 25)) == (date(2026, 10, 19), date(2026, 10, 25))

    def test_across_month_boundary(self):
        assert week_window(date(2026, 11, 1)) == (date(2026, 10, 26), date(2026, 11, 1))


class TestSplitDuration:
    def test_zero(self):
        assert str(split_duration(0)) == "00:00"

    def test_floors_minutes(self):
        assert str(split_duration(3600 + 59)) == "01:00"

    def test_many_hours(self):
        assert str(split_duration(41 * 3600 + 5 * 60)) == "41:05"


class TestSummarize:
    def test_entries_only(self):
        entries = [_entry("2026-10-21", 3600), _entry("2026-10-20", 1800)]
        summary = summarize(entries, Idle(), FIXED_NOW)
        assert str(summary.today) == "01:00"
        assert str(summary.week) == "01:30"

    def test_includes_running_timer(self):
        entries = [_entry("2026-10-21", 3600), _entry("2026-10-20", 1800)]
        state = _running(FIXED_NOW - timedelta(seconds=600))
        summary = summarize(entries, state, FIXED_NOW)
        assert str(summary.today) == "01:10"
        assert str(summary.week) == "01:40"

    def test_overnight_timer_counts_only_today_part(self):
        state = _running(datetime(2026, 10, 20, 23, 0, 0))
        now = datetime(2026, 10, 21, 1, 0, 0)
        summary = summarize([], state, now)
        assert str(summary.today) == "01:00"
        assert str(summary.week) == "02:00"

    def test_no_entries(self):
        summary = summarize([], Idle(), FIXED_NOW)
        assert summary.model_dump() == {
            "today": {"hours": "00", "minutes": "00"},
            "week": {"hours": "00", "minutes": "00"},
        }


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class TestTimeAggregator:
    @pytest.mark.asyncio
    async def test_refresh_persists_entries_and_status(self, client, store, timer_state, clock):
        client.fetch_entries.return_value = [
            _entry("2026-10-21", 3600, last_modify="2026-10-21 10:00:00"),
            _entry("2026-10-19", 1800),
        ]
        aggregator = TimeAggregator(client, store, timer_state, clock=clock)

        summary = await aggregator.refresh()

        client.fetch_entries.assert_awaited_once_with(date(2026, 10, 19), date(2026, 10, 25))
        assert store.read("status.json") == summary.model_dump()
        assert str(summary.week) == "01:30"
        assert store.read("entries.json")[0] == {
            "date": "2026-10-21", "duration": 3600, "task_id": 11,
            "last_modify": "2026-10-21 10:00:00",
        }

    @pytest.mark.asyncio
    async def test_refresh_counts_active_timer(self, client, store, timer_state, clock):
        client.fetch_entries.return_value = [_entry("2026-10-21", 3600)]
        clock.now = FIXED_NOW - timedelta(minutes=10)
        await timer_state.start(make_task(11, "Planning", parent_id=1))
        clock.now = FIXED_NOW

        summary = await TimeAggregator(client, store, timer_state, clock=clock).refresh()

        assert str(summary.today) == "01:10"

    @pytest.mark.asyncio
    async def test_network_error_keeps_stale_files(self, client, store, timer_state, clock):
        store.write("status.json", {"stale": True})
        store.write("entries.json", [])
        client.fetch_entries.side_effect = NetworkError("down")

        with pytest.raises(NetworkError):
            await TimeAggregator(client, store, timer_state, clock=clock).refresh()

        assert store.read("status.json") == {"stale": True}
        assert store.read("entries.json") == []
