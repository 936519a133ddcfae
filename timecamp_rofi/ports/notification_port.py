"""Notification port — abstract interface for desktop notifications.

Core modules depend on this protocol, never on a specific notifier.
"""

from __future__ import annotations

from typing import Protocol


class NotificationPort(Protocol):
    """Fire-and-forget notification sink."""

    async def notify(self, title: str, body: str) -> None: ...
