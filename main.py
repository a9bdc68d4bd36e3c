from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.search_vm import DEFAULT_CATEGORIES, DEFAULT_PER_PAGE, DEFAULT_QUERY, SearchVM
from app.viewmodels.theme_vm import ThemeVM
from app.views.image_tasks import SearchTaskRunner
from app.views.main_window import MainWindow
from core.services.selection_service import SelectionTracker
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.preferences import JsonPreferenceStore
from infrastructure.settings import JsonSettings, resolve_access_key
from infrastructure.unsplash_client import DEFAULT_BASE_URL, UnsplashClient


BASE_DIR = Path(__file__).parent


def _parse_categories(settings: JsonSettings) -> list[tuple[str, str]]:
    # Expect a list like: [{"label":"Nature","term":"nature"}, ...]
    raw = settings.get("search.categories", [])
    result: list[tuple[str, str]] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and item.get("term"):
                term = str(item["term"])
                label = str(item.get("label") or term)
                result.append((label, term))
    return result or list(DEFAULT_CATEGORIES)


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_path = init_logging(settings.get("log_dir"))
    logger.info("Image Search starting, logs in {}", log_path)

    app = QApplication(sys.argv)

    client = UnsplashClient(
        access_key=resolve_access_key(settings, BASE_DIR / ".env"),
        base_url=str(settings.get("api.base_url", DEFAULT_BASE_URL)),
        timeout=float(settings.get("api.timeout", 10) or 10),
    )
    search_vm = SearchVM(
        client,
        dispatcher=SearchTaskRunner(client, parent=app),
        per_page=settings.get_int("api.per_page", DEFAULT_PER_PAGE),
        default_query=str(settings.get("search.default_query", DEFAULT_QUERY) or DEFAULT_QUERY),
        categories=_parse_categories(settings),
    )
    selection = SelectionTracker()
    theme_vm = ThemeVM(JsonPreferenceStore())
    images = ImageService(client, settings)

    win = MainWindow(
        search_vm=search_vm,
        selection=selection,
        theme_vm=theme_vm,
        image_service=images,
        settings=settings,
    )
    win.show()
    search_vm.start()

    try:
        return app.exec()
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
