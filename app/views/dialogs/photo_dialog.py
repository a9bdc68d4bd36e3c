from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
)

from app.viewmodels.photo_vm import PhotoVM
from app.views.constants import TILE_FAILED_TEXT, TILE_LOADING_TEXT


class PhotoDetailDialog(QDialog):
    """Full-size preview of one photo with a like toggle mirrored from the grid."""

    likeToggled = Signal(str)  # photo id

    def __init__(self, vm: PhotoVM, parent=None) -> None:
        super().__init__(parent)
        self._vm = vm
        self._pm: QPixmap | None = None
        self.token: str | None = None
        self.setWindowTitle(vm.title)
        self.setModal(True)

        root = QVBoxLayout(self)

        header = QHBoxLayout()
        self.title_label = QLabel(vm.title)
        self.title_label.setObjectName("titleLabel")
        header.addWidget(self.title_label)
        header.addStretch(1)
        self.btn_close = QPushButton("✕")
        self.btn_close.setToolTip("Close")
        header.addWidget(self.btn_close)
        root.addLayout(header)

        self.area = QScrollArea()
        self.area.setWidgetResizable(True)
        self.image_label = QLabel(TILE_LOADING_TEXT)
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setToolTip(vm.photo.alt_text)
        self.area.setWidget(self.image_label)
        root.addWidget(self.area, 1)

        footer = QHBoxLayout()
        self.btn_like = QPushButton()
        self.btn_like.setObjectName("likeButton")
        footer.addWidget(self.btn_like)
        footer.addStretch(1)
        root.addLayout(footer)
        self._apply_like()

        self.btn_close.clicked.connect(self.reject)
        self.btn_like.clicked.connect(lambda _checked=False: self.likeToggled.emit(self._vm.id))

    @property
    def photo_id(self) -> str:
        return self._vm.id

    def set_liked(self, liked: bool) -> None:
        self._vm.is_liked = liked
        self._apply_like()

    def set_image(self, image: Any) -> None:
        """Show the downloaded full-size image, or a failure note."""
        if image is None:
            self.image_label.setText(TILE_FAILED_TEXT)
            return
        pm = QPixmap.fromImage(image)
        if pm.isNull():
            self.image_label.setText(TILE_FAILED_TEXT)
            return
        self._pm = pm
        self._apply_fit()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._apply_fit()

    def _apply_like(self) -> None:
        self.btn_like.setText(f"{self._vm.like_glyph} {self._vm.like_tooltip}")

    def _apply_fit(self) -> None:
        if self._pm is None or self._pm.isNull():
            return
        vp = self.area.viewport()
        scaled = self._pm.scaled(
            max(1, vp.width() - 2),
            max(1, vp.height() - 2),
            Qt.KeepAspectRatio,
            Qt.SmoothTransformation,
        )
        self.image_label.setPixmap(scaled)
