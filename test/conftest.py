"""
Shared fixtures and fakes for the image search tests.
"""

from __future__ import annotations

from collections.abc import Callable
import os
from typing import Any

import pytest
from loguru import logger

from core.models import Photo, SearchPage, SearchRequest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_photo(idx: int | str = 1, **overrides: Any) -> Photo:
    fields = {
        "id": f"p{idx}",
        "thumb_url": f"https://images.example/{idx}/small.jpg",
        "full_url": f"https://images.example/{idx}/regular.jpg",
        "alt_text": f"photo {idx}",
        "owner_name": f"Owner {idx}",
    }
    fields.update(overrides)
    return Photo(**fields)


def make_page(count: int, total_pages: int, start: int = 0) -> SearchPage:
    photos = tuple(make_photo(start + i) for i in range(count))
    return SearchPage(photos=photos, total_pages=total_pages, total=count * total_pages)


def api_photo(idx: int | str = 1, alt: str | None = "a photo") -> dict[str, Any]:
    """One entry of the `/search/photos` results array."""
    return {
        "id": f"id{idx}",
        "alt_description": alt,
        "urls": {
            "small": f"https://images.unsplash.com/{idx}?w=400",
            "regular": f"https://images.unsplash.com/{idx}?w=1080",
            "full": f"https://images.unsplash.com/{idx}",
        },
        "user": {"name": f"User {idx}", "links": {"html": f"https://unsplash.com/@u{idx}"}},
    }


class FakeSearchClient:
    """Returns queued responses (pages or exceptions) and records every call."""

    def __init__(self, default: SearchPage | None = None) -> None:
        self.calls: list[tuple[str, int, int]] = []
        self.responses: list[SearchPage | Exception] = []
        self.default = default or make_page(24, 5)

    def search(self, query: str, page: int, per_page: int) -> SearchPage:
        self.calls.append((query, page, per_page))
        result = self.responses.pop(0) if self.responses else self.default
        if isinstance(result, Exception):
            raise result
        return result


class DeferredDispatcher:
    """Holds requests until the test resolves them, in any order."""

    def __init__(self) -> None:
        self.pending: dict[
            int,
            tuple[
                SearchRequest,
                Callable[[SearchRequest, SearchPage], None],
                Callable[[SearchRequest, Exception], None],
            ],
        ] = {}

    def dispatch(self, request, on_done, on_error) -> None:
        self.pending[request.token] = (request, on_done, on_error)

    def resolve(self, token: int, page: SearchPage) -> None:
        request, on_done, _ = self.pending.pop(token)
        on_done(request, page)

    def fail(self, token: int, error: Exception) -> None:
        request, _, on_error = self.pending.pop(token)
        on_error(request, error)


class FakePreferenceStore:
    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data = dict(data or {})
        self.writes: list[tuple[str, str]] = []

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes.append((key, value))


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def deferred() -> DeferredDispatcher:
    return DeferredDispatcher()


@pytest.fixture
def log_messages():
    """Capture loguru output for assertions."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for every widget test (offscreen platform)."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
