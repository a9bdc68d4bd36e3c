"""Lightweight view model wrapper around `Photo`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import Photo

LIKED_GLYPH = "♥"
UNLIKED_GLYPH = "♡"


@dataclass
class PhotoVM:
    """Expose convenient properties for card and dialog bindings."""

    photo: Photo
    is_liked: bool = False

    @property
    def id(self) -> str:
        return self.photo.id

    @property
    def like_glyph(self) -> str:
        """Filled heart when liked, outline otherwise."""
        return LIKED_GLYPH if self.is_liked else UNLIKED_GLYPH

    @property
    def like_tooltip(self) -> str:
        return "Unlike" if self.is_liked else "Like"

    @property
    def tooltip(self) -> str:
        """Alt text, falling back to the owner name."""
        return self.photo.alt_text or self.photo.owner_name

    @property
    def title(self) -> str:
        """Detail view title."""
        return self.photo.owner_name
