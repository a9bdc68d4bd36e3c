"""Selection and like tracking decoupled from any UI toolkit.

Holds the photo shown in the detail overlay and the set of liked photo
ids. The liked set lives independently of the current result page: a
liked photo stays liked after it scrolls out of the results.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import Photo

Listener = Callable[["SelectionTracker"], None]


class SelectionTracker:
    """In-memory state for the previewed photo and liked photo ids."""

    def __init__(self) -> None:
        self._selected: Photo | None = None
        self._is_open = False
        self._liked: set[str] = set()
        self._listeners: list[Listener] = []

    # Listeners
    def add_listener(self, callback: Listener) -> None:
        """Register `callback`, called with the tracker after every change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """Unregister `callback` if present."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    # Selection
    @property
    def selected(self) -> Photo | None:
        """Photo currently shown in the detail view, if any."""
        return self._selected

    @property
    def is_open(self) -> bool:
        """True while the detail view is shown."""
        return self._is_open

    def select(self, photo: Photo) -> None:
        """Show `photo` in the detail view."""
        self._selected = photo
        self._is_open = True
        logger.debug("Selected photo {}", photo.id)
        self._notify()

    def dismiss(self) -> None:
        """Close the detail view and clear the selection."""
        if self._selected is None and not self._is_open:
            return
        self._selected = None
        self._is_open = False
        self._notify()

    # Likes
    def toggle_like(self, photo_id: str) -> bool:
        """Flip membership of `photo_id` in the liked set.

        Returns:
            The new liked state of `photo_id`.
        """
        if photo_id in self._liked:
            self._liked.discard(photo_id)
            liked = False
        else:
            self._liked.add(photo_id)
            liked = True
        logger.debug("Photo {} liked={}", photo_id, liked)
        self._notify()
        return liked

    def is_liked(self, photo_id: str) -> bool:
        """True if `photo_id` is in the liked set."""
        return photo_id in self._liked

    @property
    def liked_ids(self) -> frozenset[str]:
        """Snapshot of the liked photo ids."""
        return frozenset(self._liked)

    @property
    def liked_count(self) -> int:
        """Number of liked photos."""
        return len(self._liked)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)
