"""Application-wide stylesheets for the light and dark themes."""

from __future__ import annotations

from app.viewmodels.theme_vm import DARK, LIGHT

_LIGHT_QSS = """
QWidget { background-color: #ffffff; color: #212529; }
QLineEdit { border: 1px solid #ced4da; border-radius: 4px; padding: 6px; }
QPushButton { border: 1px solid #6c757d; border-radius: 4px; padding: 4px 12px; }
QPushButton:hover { background-color: #e9ecef; }
QPushButton#likeButton { border-color: #dc3545; color: #dc3545; }
QLabel#errorLabel { color: #dc3545; font-weight: bold; }
QLabel#titleLabel { font-size: 24px; font-weight: bold; }
QFrame#photoCard { border: 1px solid #dee2e6; border-radius: 6px; }
"""

_DARK_QSS = """
QWidget { background-color: #212529; color: #f8f9fa; }
QLineEdit { border: 1px solid #495057; border-radius: 4px; padding: 6px; background-color: #343a40; }
QPushButton { border: 1px solid #adb5bd; border-radius: 4px; padding: 4px 12px; }
QPushButton:hover { background-color: #343a40; }
QPushButton#likeButton { border-color: #ff6b6b; color: #ff6b6b; }
QLabel#errorLabel { color: #ff6b6b; font-weight: bold; }
QLabel#titleLabel { font-size: 24px; font-weight: bold; }
QFrame#photoCard { border: 1px solid #495057; border-radius: 6px; }
"""

STYLESHEETS: dict[str, str] = {LIGHT: _LIGHT_QSS, DARK: _DARK_QSS}


def stylesheet_for(theme: str) -> str:
    """Return the stylesheet for `theme`, defaulting to light."""
    return STYLESHEETS.get(theme, _LIGHT_QSS)
