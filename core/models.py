"""Core domain models for photo search results and requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SearchStatus(Enum):
    """Lifecycle of the search controller."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Photo:
    """A single photo as returned by the search API. Immutable once received."""

    id: str
    thumb_url: str
    full_url: str
    alt_text: str
    owner_name: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Photo:
        """Build a `Photo` from one entry of the API `results` array.

        Raises:
            KeyError: A required field is missing.
            TypeError: The entry is not shaped like a photo object.
        """
        urls = raw["urls"]
        user = raw["user"]
        return cls(
            id=str(raw["id"]),
            thumb_url=str(urls["small"]),
            full_url=str(urls["regular"]),
            # alt_description is nullable upstream
            alt_text=str(raw.get("alt_description") or ""),
            owner_name=str(user["name"]),
        )


@dataclass(frozen=True)
class SearchPage:
    """One page of search results."""

    photos: tuple[Photo, ...] = field(default_factory=tuple)
    total_pages: int = 0
    total: int = 0


@dataclass(frozen=True)
class SearchRequest:
    """A single search call tagged with the sequence number that issued it."""

    token: int
    query: str
    page: int
    per_page: int
