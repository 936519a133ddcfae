"""
Timecamp Rofi — Status Reporter.

Cheap, network-free reads for the status bar and the picker banner.
Safe to call as often as the bar refreshes, concurrently with the poller.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

import pendulum
from pydantic import ValidationError

from timecamp_rofi.core.active_timer import ActiveTimerState
from timecamp_rofi.data.models import Running, StatusSummary
from timecamp_rofi.data.store import STATUS_FILE, CacheMissError, JsonStore

logger = logging.getLogger(__name__)

_UNKNOWN_TOTALS = "Today --:--, Week --:--"


class StatusReporter:
    """Formats the persisted StatusSummary and active timer for display."""

    def __init__(
        self,
        store: JsonStore,
        timer_state: ActiveTimerState,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._timer_state = timer_state
        self._clock = clock

    def read_status(self) -> StatusSummary:
        """Return the last persisted summary.

        Raises:
            CacheMissError: status.json is absent or malformed.
        """
        raw = self._store.read(STATUS_FILE)
        try:
            return StatusSummary.model_validate(raw)
        except ValidationError as exc:
            raise CacheMissError(f"{STATUS_FILE} is malformed: {exc}") from exc

    def _logged(self) -> str:
        try:
            status = self.read_status()
        except CacheMissError as exc:
            logger.debug("No status yet: %s", exc)
            return _UNKNOWN_TOTALS
        return f"Today {status.today}, Week {status.week}"

    def i3block_lines(self) -> tuple[str, str]:
        """Return the (long, short) lines an i3blocks block prints."""
        logged = self._logged()
        state = self._timer_state.read()

        if isinstance(state, Running):
            long_text = f"Task: {state.timer.name} "
            short_text = f"{state.timer.name} "
        else:
            long_text = "No Active Task "
            short_text = ""

        return f"{long_text} {logged}", f"{short_text} {logged}"

    def menu_banner(self) -> str:
        """Message shown above the picker list."""
        lines = []
        try:
            status = self.read_status()
            lines.append(f"Today: {status.today}, this week: {status.week}.")
        except CacheMissError as exc:
            logger.debug("No status for banner: %s", exc)

        wall = self._clock()
        state = self._timer_state.read(wall)
        if isinstance(state, Running):
            now = pendulum.instance(wall, tz=pendulum.local_timezone())
            since = now.subtract(seconds=state.elapsed_seconds)
            ago = since.diff_for_humans(now, absolute=True)
            lines.append(f"You started working on {state.timer.name} {ago} ago.")

        return "\n".join(lines)
