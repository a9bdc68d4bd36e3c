"""Exception types shared by the infrastructure and UI layers."""

from __future__ import annotations


class ImageSearchError(Exception):
    """Base class for all application errors."""


class SearchError(ImageSearchError):
    """A search request failed.

    Covers transport errors, non-2xx responses and malformed payloads. The
    UI collapses all of them into one user-facing message.
    """


class ImageDownloadError(ImageSearchError):
    """Fetching the bytes of a thumbnail or full-size image failed."""
