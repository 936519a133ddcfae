"""Rofi picker adapter — implements PickerPort.

Spawns the configured picker command (rofi or any dmenu-compatible program),
writes the menu lines to its stdin and reads the chosen line from stdout.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import PurePath

logger = logging.getLogger(__name__)


class RofiPicker:
    """Subprocess implementation of PickerPort."""

    def __init__(self, command: str | None = None) -> None:
        if command is None:
            from timecamp_rofi.config import get_settings
            command = get_settings().PICKER_COMMAND

        self._argv = shlex.split(command)
        if not self._argv:
            raise ValueError("Picker command must not be empty")

    def _build_argv(self, message: str) -> list[str]:
        argv = list(self._argv)
        # Only rofi understands -mesg; plain dmenu would reject it.
        if message and PurePath(argv[0]).name == "rofi":
            argv += ["-mesg", message]
        return argv

    async def choose(self, lines: list[str], message: str = "") -> str:
        """Return the chosen line, or "" on cancel or picker failure."""
        argv = self._build_argv(message)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.error("Could not launch picker %s: %s", argv[0], exc)
            return ""

        stdout, _ = await proc.communicate("\n".join(lines).encode())

        # rofi exits 1 when the user presses Escape
        if proc.returncode != 0:
            logger.debug("Picker exited with status %s", proc.returncode)
            return ""

        chosen = stdout.decode(errors="replace").splitlines()
        return chosen[0] if chosen else ""
