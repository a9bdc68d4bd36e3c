"""MainWindow: search box, category shortcuts, result grid and pagination.

The window renders `SearchVM`, `SelectionTracker` and `ThemeVM` state and
forwards user actions to them; it holds no search state of its own.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from app.viewmodels.search_vm import SearchVM
from app.viewmodels.theme_vm import ThemeVM
from app.views.components.menu_controller import MenuController
from app.views.components.photo_grid import PhotoGrid
from app.views.constants import (
    DEFAULT_PREVIEW_SIDE,
    DEFAULT_THUMB_SIZE,
    DIALOG_SIZE_RATIO,
    LOADING_TEXT,
    PAGE_LABEL_FMT,
    SEARCH_PLACEHOLDER,
    TOKEN_GRID,
    TOKEN_SINGLE,
    WINDOW_SIZE_RATIO,
    WINDOW_TITLE,
)
from app.views.dialogs.photo_dialog import PhotoDetailDialog
from app.views.image_tasks import ImageTaskRunner
from app.views.theme import stylesheet_for
from core.services.selection_service import SelectionTracker
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Single-page image search window."""

    # Critical signal for ImageTaskRunner
    imageLoaded = Signal(str, str, object)  # token, url, QImage

    def __init__(
        self,
        search_vm: SearchVM,
        selection: SelectionTracker,
        theme_vm: ThemeVM,
        image_service: Any | None = None,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with view-models and services.

        Args:
            search_vm: Search controller view-model
            selection: Selection/like tracker
            theme_vm: Theme preference view-model
            image_service: Image service for downloading thumbnails/previews
            settings: Settings instance for configuration
        """
        super().__init__()
        self._search = search_vm
        self._selection = selection
        self._theme = theme_vm
        self._img = image_service
        self._settings = settings
        self._dialog: PhotoDetailDialog | None = None
        self._shown_photos: tuple = ()
        self._synced_token = 0

        self._log_dir: str | None = None
        self._thumb_size = DEFAULT_THUMB_SIZE
        self._preview_side = DEFAULT_PREVIEW_SIDE
        if self._settings is not None:
            self._thumb_size = self._settings.get_int("thumbnail_size", DEFAULT_THUMB_SIZE)
            self._preview_side = self._settings.get_int("preview_max_side", DEFAULT_PREVIEW_SIDE)
            self._log_dir = self._settings.get("log_dir")

        self.menu_controller = MenuController(self)
        self._runner = ImageTaskRunner(service=self._img, receiver=self)

        self._setup_ui()
        self._connect_signals()
        self._apply_theme()
        self.render_search()

    # UI construction
    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)
        central = QWidget(self)
        root = QVBoxLayout(central)

        title_row = QHBoxLayout()
        self.title_label = QLabel(WINDOW_TITLE)
        self.title_label.setObjectName("titleLabel")
        title_row.addWidget(self.title_label)
        title_row.addStretch(1)
        self.theme_button = QPushButton()
        title_row.addWidget(self.theme_button)
        root.addLayout(title_row)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorLabel")
        self.error_label.setVisible(False)
        root.addWidget(self.error_label)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(SEARCH_PLACEHOLDER)
        self.search_input.setClearButtonEnabled(True)
        root.addWidget(self.search_input)

        filters = QHBoxLayout()
        self.category_buttons: dict[str, QPushButton] = {}
        for label, _term in self._search.categories:
            btn = QPushButton(label)
            btn.clicked.connect(lambda _checked=False, _label=label: self._on_category(_label))
            filters.addWidget(btn)
            self.category_buttons[label] = btn
        filters.addStretch(1)
        root.addLayout(filters)

        self.loading_label = QLabel(LOADING_TEXT)
        self.loading_label.setVisible(False)
        root.addWidget(self.loading_label)

        self.grid = PhotoGrid(central, self._runner, thumb_size=self._thumb_size)
        root.addWidget(self.grid, 1)

        pager = QHBoxLayout()
        self.btn_previous = QPushButton("Previous")
        self.btn_next = QPushButton("Next")
        pager.addStretch(1)
        pager.addWidget(self.btn_previous)
        pager.addWidget(self.btn_next)
        pager.addStretch(1)
        root.addLayout(pager)

        self.page_label = QLabel()
        root.addWidget(self.page_label)

        self.setCentralWidget(central)
        self.menu_controller.setup_menus()
        self._setup_initial_window_size()

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {
                "exit": self.close,
                "toggle_theme": self._theme.toggle,
                "previous_page": self._search.previous_page,
                "next_page": self._search.next_page,
                "open_latest_log": self._open_latest_log,
                "open_log_directory": self._open_log_directory,
            }
        )
        self.theme_button.clicked.connect(self._theme.toggle)
        self.search_input.returnPressed.connect(self._on_submit)
        self.btn_previous.clicked.connect(self._search.previous_page)
        self.btn_next.clicked.connect(self._search.next_page)
        self.grid.photoClicked.connect(self._on_photo_clicked)
        self.grid.likeToggled.connect(self._selection.toggle_like)
        self.imageLoaded.connect(self._on_image_loaded)

        self._search.add_listener(lambda _vm: self.render_search())
        self._selection.add_listener(lambda _tracker: self.render_likes())
        self._theme.add_listener(lambda _vm: self._apply_theme())

    def _setup_initial_window_size(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        rect = screen.availableGeometry()
        self.resize(int(rect.width() * WINDOW_SIZE_RATIO), int(rect.height() * WINDOW_SIZE_RATIO))

    # Rendering
    def render_search(self) -> None:
        """Re-render everything derived from `SearchVM`."""
        vm = self._search
        self.error_label.setText(vm.error_message)
        self.error_label.setVisible(bool(vm.error_message))
        # Mirror the query once per issued request
        if vm.latest_token != self._synced_token:
            self._synced_token = vm.latest_token
            if self.search_input.text().strip() != vm.query:
                self.search_input.setText(vm.query)

        # Loading hides the results and pagination
        self.loading_label.setVisible(vm.loading)
        self.grid.setVisible(not vm.loading)
        self.btn_previous.setVisible(not vm.loading and vm.has_previous)
        self.btn_next.setVisible(not vm.loading and vm.has_next)
        self.page_label.setVisible(not vm.loading)
        self.page_label.setText(PAGE_LABEL_FMT.format(vm.page))
        self.menu_controller.enable_action("previous_page", not vm.loading and vm.has_previous)
        self.menu_controller.enable_action("next_page", not vm.loading and vm.has_next)

        if not vm.loading and self._shown_photos != vm.photos:
            self._shown_photos = vm.photos
            self.grid.show_photos(
                [PhotoVM(p, self._selection.is_liked(p.id)) for p in vm.photos]
            )

    def render_likes(self) -> None:
        """Mirror the liked set onto the grid and the open detail dialog."""
        for photo in self._search.photos:
            self.grid.set_liked(photo.id, self._selection.is_liked(photo.id))
        if self._dialog is not None:
            self._dialog.set_liked(self._selection.is_liked(self._dialog.photo_id))

    def _apply_theme(self) -> None:
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(stylesheet_for(self._theme.theme))
        self.theme_button.setText(self._theme.button_label)

    # Handlers
    def _on_submit(self) -> None:
        self._search.submit_search(self.search_input.text())

    def _on_category(self, label: str) -> None:
        self._search.select_category(label)

    def _on_photo_clicked(self, photo_id: str) -> None:
        photo = next((p for p in self._search.photos if p.id == photo_id), None)
        if photo is None:
            logger.warning("Clicked photo {} is no longer in the results", photo_id)
            return
        self._selection.select(photo)
        self._open_dialog()

    def _open_dialog(self) -> None:
        photo = self._selection.selected
        if photo is None:
            return
        dlg = PhotoDetailDialog(PhotoVM(photo, self._selection.is_liked(photo.id)), self)
        dlg.likeToggled.connect(self._selection.toggle_like)
        dlg.finished.connect(self._on_dialog_finished)
        geo = self.geometry()
        dlg.resize(int(geo.width() * DIALOG_SIZE_RATIO), int(geo.height() * DIALOG_SIZE_RATIO))
        dlg.token = self._runner.request_single_preview(photo.full_url, self._preview_side)
        self._dialog = dlg
        dlg.open()

    def _on_dialog_finished(self, _result: int) -> None:
        dlg = self._dialog
        self._dialog = None
        self._selection.dismiss()
        if dlg is not None:
            dlg.deleteLater()

    def _open_latest_log(self) -> None:
        if not open_latest_log(self._log_dir):
            logger.info("No log file to open")

    def _open_log_directory(self) -> None:
        open_log_directory(self._log_dir)

    def _on_image_loaded(self, token: str, url: str, image: Any) -> None:
        """Route a finished image download to the grid or the detail dialog."""
        if token.startswith(f"{TOKEN_SINGLE}|"):
            if self._dialog is not None and self._dialog.token == token:
                self._dialog.set_image(image)
        elif token.startswith(f"{TOKEN_GRID}|"):
            self.grid.on_image_loaded(token, image)
        else:
            logger.debug("Unknown image token for {}: {}", url, token)
