"""
Timecamp Rofi — Data Models.

Record shapes shared by the remote client, the persisted state files and
the core modules. Remote records are validated here, at the
deserialization boundary: a response missing a required field fails
validation instead of leaking half-formed dicts downstream.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

# last_modify of a task that has no entries; sorts before any timestamp
NEVER_USED = ""


# ---------------------------------------------------------------------------
# Remote records
# ---------------------------------------------------------------------------


class Task(BaseModel):
    """A trackable unit of work. Top-level groups have parent_id 0.

    The API sends ids and flags as strings ("42", "0"); they are coerced.
    """

    model_config = ConfigDict(frozen=True)

    task_id: int
    parent_id: int = 0
    name: str
    archived: bool = False

    @field_validator("parent_id", mode="before")
    @classmethod
    def empty_parent_is_root(cls, v: object) -> object:
        return 0 if v in (None, "") else v

    @field_validator("archived", mode="before")
    @classmethod
    def null_is_active(cls, v: object) -> object:
        return False if v in (None, "") else v


class TimeEntry(BaseModel):
    """Logged duration for one task on one day."""

    date: str                  # YYYY-MM-DD
    duration: int              # seconds
    task_id: int
    last_modify: str = NEVER_USED  # YYYY-MM-DD HH:MM:SS, lexically sortable

    @field_validator("last_modify", mode="before")
    @classmethod
    def null_is_never(cls, v: object) -> object:
        return v or NEVER_USED


class RemoteTimerHandle(BaseModel):
    """Response of a timer start call."""

    new_timer_id: int
    entry_id: int | None = None


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------


class ActiveTimer(BaseModel):
    """The one locally running timer, persisted as active.json.

    Older files stored the remote handle verbatim, so ``new_timer_id`` is
    accepted as an alias for ``timer_id``.
    """

    timer_id: int = Field(validation_alias=AliasChoices("timer_id", "new_timer_id"))
    task_id: int
    name: str
    started_at: datetime

    @field_validator("started_at", mode="before")
    @classmethod
    def parse_started_at(cls, v: object) -> object:
        if isinstance(v, str):
            return datetime.strptime(v.replace("/", "-"), TIMESTAMP_FORMAT)
        return v

    @field_serializer("started_at")
    def dump_started_at(self, v: datetime) -> str:
        return v.strftime(TIMESTAMP_FORMAT)

    def elapsed_seconds(self, now: datetime) -> int:
        """Seconds since the timer started; never negative."""
        return max(0, int((now - self.started_at).total_seconds()))


class Totals(BaseModel):
    """A duration split into zero-padded hour and minute components."""

    hours: str
    minutes: str

    def __str__(self) -> str:
        return f"{self.hours}:{self.minutes}"


class StatusSummary(BaseModel):
    """Today/week totals, persisted as status.json."""

    today: Totals
    week: Totals


# ---------------------------------------------------------------------------
# Timer state machine variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Idle:
    """No timer is running."""


@dataclass(frozen=True)
class Running:
    """A timer is running; elapsed is computed at read time."""

    timer: ActiveTimer
    elapsed_seconds: int


TimerState = Idle | Running
