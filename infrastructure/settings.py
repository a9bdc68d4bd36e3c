"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from loguru import logger

ACCESS_KEY_ENV = "UNSPLASH_ACCESS_KEY"

DEFAULT_SETTINGS: dict[str, Any] = {
    "api": {
        "base_url": "https://api.unsplash.com",
        "per_page": 24,
        "timeout": 10,
        "access_key": "",
    },
    "search": {
        "default_query": "galaxy",
        "categories": [
            {"label": "Nature", "term": "nature"},
            {"label": "Birds", "term": "birds"},
            {"label": "Cats", "term": "cats"},
            {"label": "Car", "term": "car"},
        ],
    },
    "thumbnail_size": 200,
    "preview_max_side": 1080,
    "thumbnail_mem_cache": 256,
}


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    Falls back to `DEFAULT_SETTINGS` when the file does not exist.
    """

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            logger.info("settings.json not found at {}, using defaults", self._path)
            self._data: dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
            return
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @property
    def path(self) -> Path:
        """Location the settings were (or would have been) read from."""
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int, or `default` when missing or not numeric."""
        try:
            return int(self.get(key, default) or default)
        except (TypeError, ValueError):
            logger.warning("Setting {} is not an integer, using {}", key, default)
            return default


def resolve_access_key(settings: JsonSettings, env_file: str | Path | None = None) -> str:
    """Return the API credential.

    `UNSPLASH_ACCESS_KEY` from the environment (optionally populated from a
    `.env` file) wins over `api.access_key` in the settings.
    """
    load_dotenv(dotenv_path=env_file, override=False)
    key = os.environ.get(ACCESS_KEY_ENV) or str(settings.get("api.access_key", "") or "")
    if not key:
        logger.warning("No API access key configured; set {} in the environment", ACCESS_KEY_ENV)
    return key
