"""Picker port — abstract interface for "choose one line" programs."""

from __future__ import annotations

from typing import Protocol


class PickerPort(Protocol):
    """Interactive line picker used by the menu flow."""

    async def choose(self, lines: list[str], message: str = "") -> str:
        """Return the chosen line, or "" when the user cancelled."""
        ...
