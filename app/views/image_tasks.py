from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot
from loguru import logger

from app.views.constants import TOKEN_GRID, TOKEN_SINGLE
from core.models import SearchPage, SearchRequest


class _ImageTask(QRunnable):
    """QRunnable for background image loading.

    Emits `receiver.imageLoaded(token, url, image)` upon completion. The
    receiver is expected to own a Qt `Signal(str, str, object)` named
    `imageLoaded`.
    """

    def __init__(
        self, *, url: str, side: int, is_preview: bool, service: Any, receiver: QObject, token: str
    ) -> None:
        super().__init__()
        self._url = url
        self._side = side
        self._is_preview = is_preview
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            if self._is_preview:
                img = self._service.get_preview(self._url, self._side)
            else:
                img = self._service.get_thumbnail(self._url, self._side)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Image task failed: {}", ex)
            img = None
        try:
            self._receiver.imageLoaded.emit(self._token, self._url, img)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Image task receiver gone: {}", ex)


class ImageTaskRunner:
    """Dispatches image load tasks to the global thread pool.

    Tokens:
    - Detail preview: "single|{url}|{side}"
    - Grid thumbnail: "grid|{url}|{thumb_side}"
    """

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_single_preview(self, url: str, side: int) -> str:
        """Request a full-size preview. Returns the token string."""
        token = f"{TOKEN_SINGLE}|{url}|{side}"
        self._start(url, side, True, token)
        return token

    def request_grid_thumbnail(self, url: str, thumb_side: int) -> str:
        """Request a grid thumbnail for `url` with given `thumb_side`. Returns token."""
        token = f"{TOKEN_GRID}|{url}|{thumb_side}"
        self._start(url, thumb_side, False, token)
        return token

    def _start(self, url: str, side: int, is_preview: bool, token: str) -> None:
        if self._service is None:
            return
        task = _ImageTask(
            url=url,
            side=side,
            is_preview=is_preview,
            service=self._service,
            receiver=self._receiver,
            token=token,
        )
        self._pool.start(task)


class _SearchTask(QRunnable):
    """QRunnable running one search call and emitting the outcome on `runner`."""

    def __init__(self, *, client: Any, request: SearchRequest, runner: SearchTaskRunner) -> None:
        super().__init__()
        self._client = client
        self._request = request
        self._runner = runner

    def run(self) -> None:  # type: ignore[override]
        req = self._request
        try:
            result = self._client.search(req.query, req.page, req.per_page)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            self._runner.searchFailed.emit(req, ex)
            return
        self._runner.searchFinished.emit(req, result)


class SearchTaskRunner(QObject):
    """Search dispatcher backed by the global thread pool.

    Lives on the UI thread; worker signals are delivered through queued
    connections so the view-model callbacks always run on the UI thread.
    """

    searchFinished = Signal(object, object)  # SearchRequest, SearchPage
    searchFailed = Signal(object, object)  # SearchRequest, Exception

    def __init__(self, client: Any, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._client = client
        self._pool = QThreadPool.globalInstance()
        self._pending: dict[
            int,
            tuple[
                Callable[[SearchRequest, SearchPage], None],
                Callable[[SearchRequest, Exception], None],
            ],
        ] = {}
        self.searchFinished.connect(self._on_finished)
        self.searchFailed.connect(self._on_failed)

    def dispatch(
        self,
        request: SearchRequest,
        on_done: Callable[[SearchRequest, SearchPage], None],
        on_error: Callable[[SearchRequest, Exception], None],
    ) -> None:
        self._pending[request.token] = (on_done, on_error)
        self._pool.start(_SearchTask(client=self._client, request=request, runner=self))

    @property
    def in_flight(self) -> int:
        """Number of dispatched requests that have not reported back yet."""
        return len(self._pending)

    @Slot(object, object)
    def _on_finished(self, request: SearchRequest, result: SearchPage) -> None:
        callbacks = self._pending.pop(request.token, None)
        if callbacks is not None:
            callbacks[0](request, result)

    @Slot(object, object)
    def _on_failed(self, request: SearchRequest, error: Exception) -> None:
        callbacks = self._pending.pop(request.token, None)
        if callbacks is not None:
            callbacks[1](request, error)
