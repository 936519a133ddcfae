"""Tests for the subprocess adapters — notify-send and rofi."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from timecamp_rofi.adapters.desktop_notifier import DesktopNotifier
from timecamp_rofi.adapters.rofi_picker import RofiPicker


def _mock_proc(stdout: bytes = b"", returncode: int = 0):
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout, b""))
    proc.wait = AsyncMock(return_value=returncode)
    proc.returncode = returncode
    return proc


class TestDesktopNotifier:
    @pytest.mark.asyncio
    async def test_invokes_notify_send_with_icon(self):
        with patch(
            "timecamp_rofi.adapters.desktop_notifier.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_mock_proc()),
        ) as mock_exec:
            await DesktopNotifier(icon="/tmp/tc.png").notify("Task Started", "Planning")

        assert mock_exec.call_args.args == (
            "notify-send", "-i", "/tmp/tc.png", "Task Started", "Planning",
        )

    @pytest.mark.asyncio
    async def test_missing_binary_is_ignored(self):
        with patch(
            "timecamp_rofi.adapters.desktop_notifier.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("notify-send")),
        ):
            await DesktopNotifier().notify("Task Stopped", "Planning")


class TestRofiPicker:
    @pytest.mark.asyncio
    async def test_returns_chosen_line(self):
        proc = _mock_proc(stdout=b"Acme: Planning\n")
        with patch(
            "timecamp_rofi.adapters.rofi_picker.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ) as mock_exec:
            chosen = await RofiPicker("rofi -dmenu -i -p Task").choose(
                ["Acme: Planning", "Internal: Admin"], "Today: 01:00"
            )

        assert chosen == "Acme: Planning"
        assert mock_exec.call_args.args == (
            "rofi", "-dmenu", "-i", "-p", "Task", "-mesg", "Today: 01:00",
        )
        proc.communicate.assert_awaited_once_with(b"Acme: Planning\nInternal: Admin")

    @pytest.mark.asyncio
    async def test_escape_is_cancel(self):
        proc = _mock_proc(returncode=1)
        with patch(
            "timecamp_rofi.adapters.rofi_picker.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            assert await RofiPicker("rofi -dmenu").choose(["a"]) == ""

    @pytest.mark.asyncio
    async def test_dmenu_gets_no_mesg(self):
        with patch(
            "timecamp_rofi.adapters.rofi_picker.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_mock_proc(stdout=b"a\n")),
        ) as mock_exec:
            await RofiPicker("dmenu -i").choose(["a"], "banner")

        assert mock_exec.call_args.args == ("dmenu", "-i")

    @pytest.mark.asyncio
    async def test_missing_picker_is_cancel(self):
        with patch(
            "timecamp_rofi.adapters.rofi_picker.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("rofi")),
        ):
            assert await RofiPicker("rofi -dmenu").choose(["a"]) == ""

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            RofiPicker("   ")
