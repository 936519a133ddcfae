"""
Timecamp Rofi — Command line entry point.

A rofi based client for Timecamp with i3blocks support:

    timecamp-rofi tasks      refresh the task catalog
    timecamp-rofi entries    refresh this week's totals
    timecamp-rofi menu       pick a task to start, or stop the running one
    timecamp-rofi i3block    print long and short status lines
    timecamp-rofi auto       keep tasks and entries refreshed forever
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass

from timecamp_rofi.adapters.desktop_notifier import DesktopNotifier
from timecamp_rofi.adapters.rofi_picker import RofiPicker
from timecamp_rofi.config import ConfigurationError, Settings, get_settings
from timecamp_rofi.core.active_timer import ActiveTimerState, TimerStartError
from timecamp_rofi.core.aggregation import TimeAggregator
from timecamp_rofi.core.catalog import TaskCatalogCache
from timecamp_rofi.core.menu import MenuSelection
from timecamp_rofi.core.scheduler import build_poll_scheduler
from timecamp_rofi.core.status import StatusReporter
from timecamp_rofi.data.store import CacheMissError, JsonStore
from timecamp_rofi.integrations.timecamp_client import TimecampClient
from timecamp_rofi.ports.timer_port import NetworkError

logger = logging.getLogger(__name__)

USAGE = (
    "A rofi based client for Timecamp with i3blocks support.\n"
    "Usage: timecamp-rofi tasks | entries | menu | i3block | auto"
)


@dataclass
class App:
    """All wired-up components for one invocation."""

    settings: Settings
    store: JsonStore
    catalog: TaskCatalogCache
    timer: ActiveTimerState
    aggregator: TimeAggregator
    status: StatusReporter
    menu: MenuSelection


def build_app(settings: Settings) -> App:
    """Wire the Timecamp client, adapters and core components together."""
    store = JsonStore(settings.TIMECAMP_DATA_DIR)
    client = TimecampClient(
        api_key=settings.TIMECAMP_KEY,
        base_url=settings.TIMECAMP_API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    notifier = DesktopNotifier(icon=settings.NOTIFY_ICON)

    catalog = TaskCatalogCache(client, store)
    timer = ActiveTimerState(client, store, notifier)
    aggregator = TimeAggregator(client, store, timer)
    status = StatusReporter(store, timer)
    menu = MenuSelection(
        catalog, timer, RofiPicker(settings.PICKER_COMMAND), store, status
    )

    return App(
        settings=settings,
        store=store,
        catalog=catalog,
        timer=timer,
        aggregator=aggregator,
        status=status,
        menu=menu,
    )


# ---------------------------------------------------------------------------
# Subcommands — each returns a process exit status
# ---------------------------------------------------------------------------


async def cmd_tasks(app: App) -> int:
    try:
        await app.catalog.refresh()
    except NetworkError as exc:
        logger.error("Task refresh failed: %s", exc)
        return 1
    return 0


async def cmd_entries(app: App) -> int:
    try:
        await app.aggregator.refresh()
    except NetworkError as exc:
        logger.error("Entries refresh failed: %s", exc)
        return 1
    return 0


async def cmd_menu(app: App) -> int:
    try:
        await app.menu.run()
    except CacheMissError as exc:
        logger.error("Cannot build menu, run `timecamp-rofi tasks` first: %s", exc)
        return 1
    except TimerStartError as exc:
        logger.error("%s", exc)
        return 1
    return 0


async def cmd_i3block(app: App) -> int:
    long_line, short_line = app.status.i3block_lines()
    print(long_line)
    print(short_line)
    return 0


async def cmd_auto(app: App) -> int:
    scheduler = build_poll_scheduler(
        refresh_tasks=app.catalog.refresh,
        refresh_entries=app.aggregator.refresh,
        tasks_minutes=app.settings.TIMEOUT_TASKS,
        entries_minutes=app.settings.TIMEOUT_ENTRIES,
    )
    await scheduler.run()
    return 0


COMMANDS = {
    "tasks": cmd_tasks,
    "entries": cmd_entries,
    "menu": cmd_menu,
    "i3block": cmd_i3block,
    "auto": cmd_auto,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timecamp-rofi",
        description="A rofi based client for Timecamp with i3blocks support.",
    )
    parser.add_argument("command", nargs="?", choices=sorted(COMMANDS))
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point: load settings, then dispatch one subcommand."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request URL, and the API token lives in the path
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    logging.getLogger().setLevel(settings.LOG_LEVEL)

    if args.command is None:
        print(USAGE)
        sys.exit(0)

    app = build_app(settings)
    try:
        status = asyncio.run(COMMANDS[args.command](app))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        status = 130
    sys.exit(status)


if __name__ == "__main__":
    main()
