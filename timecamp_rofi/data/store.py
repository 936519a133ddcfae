"""
Timecamp Rofi — Persisted State Store.

All state lives as small JSON files in one directory. That directory is the
only synchronization point between the long-running poller and short-lived
CLI invocations, so every write replaces the file atomically: readers see
either the previous version or the new one, never a torn write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.json"
ENTRIES_FILE = "entries.json"
ACTIVE_FILE = "active.json"
STATUS_FILE = "status.json"


class CacheMissError(Exception):
    """Raised when a persisted file is absent or cannot be parsed."""


class JsonStore:
    """Atomic JSON file storage rooted at the configuration directory."""

    def __init__(self, data_dir: str | Path | None = None) -> None:
        if data_dir is None:
            from timecamp_rofi.config import get_settings
            data_dir = get_settings().TIMECAMP_DATA_DIR

        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def path(self, name: str) -> Path:
        return self._dir / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def read(self, name: str) -> Any:
        """Load and parse a JSON file.

        Raises:
            CacheMissError: the file is missing or is not valid JSON.
        """
        path = self.path(name)
        try:
            with path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError as exc:
            raise CacheMissError(f"{name} not found in {self._dir}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CacheMissError(f"{name} is malformed: {exc}") from exc
        logger.debug("Read %s", path)
        return data

    def write(self, name: str, obj: Any) -> None:
        """Serialize obj and atomically replace the named file."""
        path = self.path(name)
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=str(self._dir), prefix=f".{name}.", encoding="utf-8"
        ) as tmp:
            tmp_name = tmp.name
            try:
                json.dump(obj, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            except BaseException:
                tmp.close()
                Path(tmp_name).unlink(missing_ok=True)
                raise
        os.replace(tmp_name, path)
        logger.debug("Wrote %s", path)

    def delete(self, name: str) -> bool:
        """Remove the named file. Returns False if it was already gone."""
        try:
            self.path(name).unlink()
        except FileNotFoundError:
            return False
        return True
