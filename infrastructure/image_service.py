"""Remote image loading, thumbnailing, and in-memory caching.

Images are downloaded through the search client, decoded with Pillow (Qt's
own decoder is the fallback), scaled to the requested side and kept in a
small LRU so that flipping back to a recent page does not re-download every
tile.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import io
from typing import Any, Protocol

from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage
from loguru import logger

from core.errors import ImageDownloadError


class _Downloader(Protocol):
    def download(self, url: str) -> bytes:
        """Return raw bytes for `url`."""
        ...


def _compute_cache_key(url: str, size_key: int) -> str:
    """Compute a stable cache key from the URL and requested side."""
    sig = f"{url}|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def get(self, key: str) -> QImage | None:
        """Return cached QImage for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def __len__(self) -> int:
        return len(self._data)


class ImageService:
    """High-level image service: download, decode, scale, cache."""

    def __init__(self, downloader: _Downloader, settings: object | None = None) -> None:
        """Initialize the memory cache from settings.

        Args:
            downloader: Object with `download(url) -> bytes` (the search client).
            settings: Optional settings with `thumbnail_mem_cache`.
        """
        self._downloader = downloader
        self._mem_cap = 256
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("thumbnail_mem_cache", 256) or 256)
            except (ValueError, TypeError):
                self._mem_cap = 256
        self._mem_cache = _LRUCache(self._mem_cap)

    # Public API
    def get_thumbnail(self, url: str, size: int) -> QImage | None:
        """Return thumbnail image for `url` with max side `size`."""
        return self._get_image(url, size)

    def get_preview(self, url: str, max_side: int) -> QImage | None:
        """Return preview image for `url` bounded by `max_side`."""
        return self._get_image(url, max_side)

    # Internal helpers
    def _get_image(self, url: str, requested_side: int) -> QImage | None:
        """Get image via memory cache or download and cache it.

        Returns None when the image cannot be downloaded or decoded; failures
        are not cached so a later request retries.
        """
        key = _compute_cache_key(url, requested_side)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        try:
            data = self._downloader.download(url)
        except ImageDownloadError as ex:
            logger.debug("Image download failed for {}: {}", url, ex)
            return None

        img = self._decode(data, requested_side)
        if img is None or img.isNull():
            logger.debug("Image decode failed for {}", url)
            return None
        self._mem_cache.put(key, img)
        return img

    def _decode(self, data: bytes, requested_side: int) -> QImage | None:
        """Decode with Pillow first, then Qt's reader."""
        img = self._load_via_pillow(data, requested_side)
        if img is not None and not img.isNull():
            return img
        qimg = QImage.fromData(data)
        if qimg.isNull():
            return None
        if requested_side and requested_side > 0:
            qimg = qimg.scaled(
                requested_side, requested_side, Qt.KeepAspectRatio, Qt.SmoothTransformation
            )
        return qimg

    def _load_via_pillow(self, data: bytes, requested_side: int) -> QImage | None:
        try:
            with Image.open(io.BytesIO(data)) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                if requested_side and requested_side > 0:
                    im.thumbnail((requested_side, requested_side), Image.Resampling.LANCZOS)
                return self._pil_to_qimage(im)
        except (OSError, ValueError, UnidentifiedImageError) as ex:
            logger.debug("Pillow load failed: {}", ex)
            return None

    def _pil_to_qimage(self, pil_img: Any) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        try:
            mode = pil_img.mode
            if mode not in ("RGBA", "RGB"):
                pil_img = pil_img.convert("RGBA")
                mode = pil_img.mode
            if mode == "RGB":
                data = pil_img.tobytes("raw", "RGB")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
                )
            else:
                data = pil_img.tobytes("raw", "RGBA")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
                )
            if qimg is None or qimg.isNull():
                return None
            return qimg.copy()
        except (ValueError, TypeError) as ex:
            logger.debug("PIL->QImage convert failed: {}", ex)
            return None
