"""Desktop notification adapter — implements NotificationPort.

Shells out to ``notify-send``. Notifications are fire-and-forget: a missing
binary or a failing daemon is logged and otherwise ignored.
"""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class DesktopNotifier:
    """notify-send implementation of NotificationPort."""

    def __init__(self, icon: str = "", command: str = "notify-send") -> None:
        self._icon = icon
        self._command = command

    async def notify(self, title: str, body: str) -> None:
        args = [self._command]
        if self._icon:
            args += ["-i", self._icon]
        args += [title, body]

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await proc.wait()
        except OSError as exc:
            logger.warning("Notification '%s' not delivered: %s", title, exc)
