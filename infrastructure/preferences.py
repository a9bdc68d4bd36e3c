"""Per-user preference persistence backed by a small JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from infrastructure.logging import get_app_data_directory

PREFERENCES_FILE = "preferences.json"


class JsonPreferenceStore:
    """Read/write string preferences in `preferences.json`.

    The file is read once at construction and rewritten on every `set`.
    A missing or unreadable file starts from an empty store.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            path = Path(get_app_data_directory()) / PREFERENCES_FILE
        self._path = Path(path)
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the stored value for `key`, or `default`."""
        value = self._data.get(key, default)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key` and write the file."""
        self._data[key] = value
        self._save()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as ex:
            logger.warning("Failed to read preferences {}: {}", self._path, ex)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences file {}", self._path)
            return {}
        return data

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
        except OSError as ex:
            logger.error("Failed to write preferences {}: {}", self._path, ex)
