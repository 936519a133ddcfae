"""Timecamp API integration — implements TimerPort.

Wraps the four third-party API endpoints this tool needs: task list,
time entries for a date range, timer start and timer stop. The API token
travels embedded in the URL path.

Every transport, HTTP status, JSON or record-validation failure surfaces
as NetworkError. There are no retries here; the poller simply tries again
on its next cycle.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from timecamp_rofi.config import ConfigurationError
from timecamp_rofi.data.models import (
    DATE_FORMAT,
    TIMESTAMP_FORMAT,
    RemoteTimerHandle,
    Task,
    TimeEntry,
)
from timecamp_rofi.ports.timer_port import NetworkError

logger = logging.getLogger(__name__)


class TimecampClient:
    """Timecamp implementation of TimerPort."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        if api_key is None or base_url is None or timeout is None:
            from timecamp_rofi.config import get_settings

            settings = get_settings()
            api_key = api_key if api_key is not None else settings.TIMECAMP_KEY
            base_url = base_url if base_url is not None else settings.TIMECAMP_API_URL
            timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS

        if not api_key:
            raise ConfigurationError("Timecamp API key must not be empty")

        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _url(self, resource: str, *suffix: str) -> str:
        parts = [self._base_url, resource, "format/json/api_token", self._api_key, *suffix]
        return "/".join(parts)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Timecamp {method} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Timecamp {method} failed: {exc!r}") from exc
        except ValueError as exc:
            raise NetworkError(f"Timecamp returned a non-JSON body: {exc}") from exc

    async def fetch_tasks(self) -> list[Task]:
        """Fetch every task visible to the token, in API order."""
        data = await self._request("GET", self._url("tasks"))

        # The API answers with an object keyed by task_id; accept a list too.
        if isinstance(data, dict):
            records = list(data.values())
        elif isinstance(data, list):
            records = data
        else:
            raise NetworkError(f"Unexpected tasks payload: {type(data).__name__}")

        try:
            tasks = [Task.model_validate(r) for r in records]
        except ValidationError as exc:
            raise NetworkError(f"Malformed task record: {exc}") from exc

        logger.info("Fetched %d tasks", len(tasks))
        return tasks

    async def fetch_entries(self, range_start: date, range_end: date) -> list[TimeEntry]:
        """Fetch time entries dated within [range_start, range_end]."""
        url = self._url(
            "entries",
            "from", range_start.strftime(DATE_FORMAT),
            "to", range_end.strftime(DATE_FORMAT),
        )
        data = await self._request("GET", url)
        if not isinstance(data, list):
            raise NetworkError(f"Unexpected entries payload: {type(data).__name__}")

        try:
            entries = [TimeEntry.model_validate(r) for r in data]
        except ValidationError as exc:
            raise NetworkError(f"Malformed entry record: {exc}") from exc

        logger.info("Fetched %d entries for %s..%s", len(entries), range_start, range_end)
        return entries

    async def start_timer(self, task_id: int, started_at: datetime) -> RemoteTimerHandle:
        data = await self._request(
            "POST",
            self._url("timer"),
            json={
                "action": "start",
                "task_id": task_id,
                "started_at": started_at.strftime(TIMESTAMP_FORMAT),
            },
        )
        try:
            return RemoteTimerHandle.model_validate(data)
        except ValidationError as exc:
            raise NetworkError(f"Malformed timer handle: {exc}") from exc

    async def stop_timer(self, timer_id: int, stopped_at: datetime) -> None:
        await self._request(
            "POST",
            self._url("timer"),
            json={
                "action": "stop",
                "timer_id": timer_id,
                "stopped_at": stopped_at.strftime(TIMESTAMP_FORMAT),
            },
        )
