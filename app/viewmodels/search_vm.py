"""ViewModel orchestrating photo search, pagination and request ordering."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from loguru import logger

from core.models import Photo, SearchPage, SearchRequest, SearchStatus
from core.services.interfaces import ISearchClient, ISearchDispatcher

ERROR_MESSAGE = "Error fetching images. Try again later."
DEFAULT_QUERY = "galaxy"
DEFAULT_PER_PAGE = 24
DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Nature", "nature"),
    ("Birds", "birds"),
    ("Cats", "cats"),
    ("Car", "car"),
)

Listener = Callable[["SearchVM"], None]


class InlineDispatcher:
    """Runs the search on the calling thread and reports back immediately."""

    def __init__(self, client: ISearchClient) -> None:
        self._client = client

    def dispatch(
        self,
        request: SearchRequest,
        on_done: Callable[[SearchRequest, SearchPage], None],
        on_error: Callable[[SearchRequest, Exception], None],
    ) -> None:
        try:
            result = self._client.search(request.query, request.page, request.per_page)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            on_error(request, ex)
            return
        on_done(request, result)


class SearchVM:
    """Search controller view-model.

    Owns the query, current page, total page count, result list and the
    loading/error flags. Each fetch is tagged with an increasing token and
    only the response for the latest token is applied; earlier responses
    that resolve late are dropped.
    """

    def __init__(
        self,
        client: ISearchClient,
        dispatcher: ISearchDispatcher | None = None,
        per_page: int = DEFAULT_PER_PAGE,
        default_query: str = DEFAULT_QUERY,
        categories: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Create a SearchVM.

        Args:
            client: Search backend, used directly when no dispatcher is given.
            dispatcher: Runs requests off the UI thread (defaults to inline).
            per_page: Page size sent with every request.
            default_query: Seed term fetched by `start()`.
            categories: (label, term) shortcut pairs.
        """
        self._dispatcher: ISearchDispatcher = dispatcher or InlineDispatcher(client)
        self._per_page = per_page
        self._default_query = default_query
        self._categories: tuple[tuple[str, str], ...] = tuple(categories or DEFAULT_CATEGORIES)

        self._query = ""
        self._page = 1
        self._total_pages = 0
        self._photos: tuple[Photo, ...] = ()
        self._loading = False
        self._error_message = ""
        self._status = SearchStatus.IDLE
        self._latest_token = 0
        self._started = False
        self._listeners: list[Listener] = []

    # Listeners
    def add_listener(self, callback: Listener) -> None:
        """Register `callback`, called with the VM after every state change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """Unregister `callback` if present."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    # State
    @property
    def query(self) -> str:
        return self._query

    @property
    def page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def photos(self) -> tuple[Photo, ...]:
        return self._photos

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def per_page(self) -> int:
        return self._per_page

    @property
    def latest_token(self) -> int:
        """Token of the most recently issued request (0 before any fetch)."""
        return self._latest_token

    @property
    def categories(self) -> tuple[tuple[str, str], ...]:
        return self._categories

    @property
    def has_previous(self) -> bool:
        """True when a Previous control should be shown."""
        return self._page > 1

    @property
    def has_next(self) -> bool:
        """True when a Next control should be shown."""
        return self._page < self._total_pages

    # Operations
    def start(self) -> SearchRequest | None:
        """Initial mount: search the seed term on page 1. Runs once."""
        if self._started:
            return None
        self._started = True
        return self.submit_search(self._default_query)

    def submit_search(self, query: str) -> SearchRequest | None:
        """Search `query` from page 1.

        Empty or whitespace-only queries are ignored without touching state.
        """
        text = (query or "").strip()
        if not text:
            logger.debug("Ignoring empty search submission")
            return None
        # Query and page are updated together before the request is built.
        self._query = text
        self._page = 1
        return self.fetch(text, 1)

    def select_category(self, label: str) -> SearchRequest | None:
        """Search the shortcut term for category `label` (or the term itself)."""
        wanted = (label or "").strip().lower()
        for cat_label, term in self._categories:
            if wanted in (cat_label.lower(), term.lower()):
                return self.submit_search(term)
        raise ValueError(f"Unknown category: {label!r}")

    def set_page(self, page: int) -> SearchRequest | None:
        """Move to `page` and fetch it for the current query.

        Pages outside `1..total_pages` are ignored, as is any page change
        while a request is in flight.
        """
        if self._loading:
            logger.debug("Ignoring page {} while loading", page)
            return None
        if not 1 <= page <= self._total_pages:
            logger.debug("Ignoring page {} outside 1..{}", page, self._total_pages)
            return None
        self._page = page
        return self.fetch(self._query, page)

    def next_page(self) -> SearchRequest | None:
        return self.set_page(self._page + 1)

    def previous_page(self) -> SearchRequest | None:
        return self.set_page(self._page - 1)

    def fetch(self, query: str, page: int) -> SearchRequest | None:
        """Issue one search request for (`query`, `page`).

        Sets the loading flag and clears any previous error. The outcome is
        applied by `_on_search_finished` / `_on_search_failed`.
        """
        if not query:
            return None
        self._latest_token += 1
        request = SearchRequest(
            token=self._latest_token, query=query, page=page, per_page=self._per_page
        )
        self._loading = True
        self._error_message = ""
        self._status = SearchStatus.LOADING
        logger.info("Fetch #{}: query={!r} page={}", request.token, query, page)
        self._notify()
        self._dispatcher.dispatch(request, self._on_search_finished, self._on_search_failed)
        return request

    # Dispatcher callbacks
    def _on_search_finished(self, request: SearchRequest, result: SearchPage) -> None:
        if request.token != self._latest_token:
            logger.debug(
                "Discarding stale response #{} (latest #{})", request.token, self._latest_token
            )
            return
        self._photos = tuple(result.photos)
        self._total_pages = int(result.total_pages)
        self._loading = False
        self._status = SearchStatus.SUCCESS
        logger.info(
            "Fetch #{} done: {} photos, {} pages",
            request.token,
            len(self._photos),
            self._total_pages,
        )
        self._notify()

    def _on_search_failed(self, request: SearchRequest, error: Exception) -> None:
        if request.token != self._latest_token:
            logger.debug("Discarding stale failure #{}: {}", request.token, error)
            return
        logger.error("Fetch #{} failed for {!r}: {}", request.token, request.query, error)
        self._error_message = ERROR_MESSAGE
        self._loading = False
        self._status = SearchStatus.FAILURE
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)
