from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.services.interfaces import IPreferenceStore

THEME_KEY = "theme"
LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)

Listener = Callable[["ThemeVM"], None]


class ThemeVM:
    """Light/dark theme preference, loaded at startup and saved on every toggle."""

    def __init__(self, store: IPreferenceStore) -> None:
        self._store = store
        stored = store.get(THEME_KEY, LIGHT)
        if stored not in THEMES:
            logger.warning("Unknown stored theme {!r}, using {}", stored, LIGHT)
            stored = LIGHT
        self._theme: str = stored
        self._listeners: list[Listener] = []

    def add_listener(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def is_dark(self) -> bool:
        return self._theme == DARK

    @property
    def button_label(self) -> str:
        """Label of the toggle button: names the theme it switches to."""
        return "Light Mode" if self.is_dark else "Dark Mode"

    def toggle(self) -> str:
        """Flip between light and dark and persist the choice."""
        self._theme = LIGHT if self.is_dark else DARK
        self._store.set(THEME_KEY, self._theme)
        logger.info("Theme switched to {}", self._theme)
        for callback in list(self._listeners):
            callback(self)
        return self._theme
