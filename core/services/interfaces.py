"""Core service interfaces.

The view-models depend on these protocols only, so tests can pass in
fakes and the Qt layer can supply a thread-pool backed dispatcher.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from core.models import SearchPage, SearchRequest


class ISearchClient(Protocol):
    """Photo search backend."""

    def search(self, query: str, page: int, per_page: int) -> SearchPage:
        """Return one page of results or raise `SearchError`."""
        ...


class ISearchDispatcher(Protocol):
    """Runs a search request and reports the outcome back.

    Implementations must invoke exactly one of `on_done` / `on_error` for
    each dispatched request, on the thread that owns the view-model.
    """

    def dispatch(
        self,
        request: SearchRequest,
        on_done: Callable[[SearchRequest, SearchPage], None],
        on_error: Callable[[SearchRequest, Exception], None],
    ) -> None:
        """Start `request`."""
        ...


class IPreferenceStore(Protocol):
    """Key-value store for the few preferences that outlive a session."""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the stored value for `key`."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key` and persist it."""
        ...
