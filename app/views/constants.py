"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

WINDOW_TITLE: str = "Image Search"
SEARCH_PLACEHOLDER: str = "Type something to search..."
LOADING_TEXT: str = "Loading..."
TILE_LOADING_TEXT: str = "Loading…"
TILE_FAILED_TEXT: str = "(failed)"
PAGE_LABEL_FMT: str = "page value: {}"

# Token prefixes used by ImageTaskRunner
TOKEN_SINGLE: str = "single"
TOKEN_GRID: str = "grid"

# Grid defaults
DEFAULT_THUMB_SIZE: int = 200  # overridable by settings.json
DEFAULT_PREVIEW_SIDE: int = 1080
GRID_MIN_THUMB_PX: int = 160
GRID_SPACING_PX: int = 8
GRID_MAX_COLUMNS: int = 8

WINDOW_SIZE_RATIO: float = 0.7
DIALOG_SIZE_RATIO: float = 0.6
