"""PhotoGrid: card grid for one page of search results."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from app.views.constants import (
    DEFAULT_THUMB_SIZE,
    GRID_MAX_COLUMNS,
    GRID_MIN_THUMB_PX,
    GRID_SPACING_PX,
    TILE_FAILED_TEXT,
    TILE_LOADING_TEXT,
)
from app.views.image_tasks import ImageTaskRunner


class _Card:
    """Widgets making up one photo card."""

    def __init__(self, frame: QFrame, image: QLabel, like_button: QPushButton) -> None:
        self.frame = frame
        self.image = image
        self.like_button = like_button


class PhotoGrid(QScrollArea):
    """Scrollable grid of photo cards with a like toggle under each thumbnail."""

    photoClicked = Signal(str)  # photo id
    likeToggled = Signal(str)  # photo id

    def __init__(
        self, parent: QWidget | None, task_runner: ImageTaskRunner, thumb_size: int | None = None
    ) -> None:
        super().__init__(parent)
        self._runner = task_runner
        self._thumb_size = int(thumb_size or DEFAULT_THUMB_SIZE)

        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)

        self._container: QWidget | None = None
        self._layout: QGridLayout | None = None
        self._items: list[PhotoVM] = []
        self._cards: dict[str, _Card] = {}
        self._labels_by_token: dict[str, QLabel] = {}
        self._columns = 0

    # Public API
    def show_photos(self, items: list[PhotoVM]) -> None:
        """Replace the grid with cards for `items`."""
        self._items = list(items)
        self._rebuild()

    def set_liked(self, photo_id: str, liked: bool) -> None:
        """Update the like button of card `photo_id`, if shown."""
        card = self._cards.get(photo_id)
        if card is None:
            return
        for vm in self._items:
            if vm.id == photo_id:
                vm.is_liked = liked
                self._apply_like(card.like_button, vm)
                break

    def card_count(self) -> int:
        return len(self._cards)

    def on_image_loaded(self, token: str, image: Any) -> None:
        """Place a finished thumbnail; tokens from an earlier grid are ignored."""
        lbl = self._labels_by_token.get(token)
        if lbl is None:
            return
        try:
            if image is None:
                lbl.setText(TILE_FAILED_TEXT)
                return
            pm = QPixmap.fromImage(image)
            if pm.isNull():
                lbl.setText(TILE_FAILED_TEXT)
                return
            lbl.setPixmap(
                pm.scaled(lbl.width(), lbl.height(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )
        except RuntimeError as ex:  # pragma: no cover - label deleted by a rebuild
            logger.debug("Thumbnail target gone: {}", ex)

    # Qt events
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if self._items and self._compute_grid_geometry()[0] != self._columns:
            self._rebuild()

    # internals
    def _rebuild(self) -> None:
        # setWidget() below deletes the previous container
        self._cards = {}
        self._labels_by_token = {}

        self._container = QWidget()
        self._layout = QGridLayout(self._container)
        self._layout.setSpacing(GRID_SPACING_PX)
        self._layout.setAlignment(Qt.AlignTop | Qt.AlignHCenter)

        cols, side = self._compute_grid_geometry()
        self._columns = cols
        for i, vm in enumerate(self._items):
            r, c = divmod(i, cols)
            card = self._make_card(vm, side)
            self._cards[vm.id] = card
            self._layout.addWidget(card.frame, r, c)
            token = self._runner.request_grid_thumbnail(vm.photo.thumb_url, side)
            self._labels_by_token[token] = card.image

        self.setWidget(self._container)

    def _make_card(self, vm: PhotoVM, side: int) -> _Card:
        frame = QFrame()
        frame.setObjectName("photoCard")
        v = QVBoxLayout(frame)
        v.setContentsMargins(4, 4, 4, 4)

        img_lbl = QLabel(TILE_LOADING_TEXT)
        img_lbl.setFixedSize(side, side)
        img_lbl.setAlignment(Qt.AlignCenter)
        img_lbl.setToolTip(vm.tooltip)
        img_lbl.setCursor(Qt.PointingHandCursor)

        # Bind with default args to capture current locals
        def _make_click_handler(_id=vm.id):
            return lambda e: self.photoClicked.emit(_id)

        img_lbl.mousePressEvent = _make_click_handler()
        v.addWidget(img_lbl)

        footer = QHBoxLayout()
        like_btn = QPushButton()
        like_btn.setObjectName("likeButton")
        self._apply_like(like_btn, vm)
        like_btn.clicked.connect(lambda _checked=False, _id=vm.id: self.likeToggled.emit(_id))
        footer.addWidget(like_btn)
        footer.addStretch(1)
        v.addLayout(footer)
        return _Card(frame, img_lbl, like_btn)

    @staticmethod
    def _apply_like(button: QPushButton, vm: PhotoVM) -> None:
        button.setText(vm.like_glyph)
        button.setToolTip(vm.like_tooltip)

    def _compute_grid_geometry(self) -> tuple[int, int]:
        width = max(1, self.viewport().width())
        spacing = GRID_SPACING_PX
        min_px = GRID_MIN_THUMB_PX
        max_px = self._thumb_size if self._thumb_size > 0 else DEFAULT_THUMB_SIZE
        best_cols = 1
        best_cell = min(min_px, max_px)
        for cols in range(1, GRID_MAX_COLUMNS + 1):
            total_spacing = spacing * (cols + 1)
            cell = (width - total_spacing) // cols
            if cell < min_px:
                break
            best_cols = cols
            best_cell = min(cell, max_px)
        return best_cols, best_cell
