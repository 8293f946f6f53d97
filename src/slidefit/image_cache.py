"""Image dimension lookup with a per-path memo.

The cache reads an image once, decodes only its header to get the pixel
size and keeps the result for the lifetime of the cache object. Entries are
never evicted, so a cache should live as long as one deck-building session.

Typical usage:
    >>> cache = ImageMetadataCache()
    >>> dims = cache.dimensions_of("assets/planning_network.png")
    >>> dims.aspect_ratio
    1.7777777777777777
"""

from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image, UnidentifiedImageError

from .errors import ResourceNotFoundError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Collaborator signatures
ReadBytes = Callable[[Path], bytes]
DecodeSize = Callable[[bytes], tuple[int, int]]


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel size of an image and its width/height ratio."""
    width: int
    height: int
    aspect_ratio: float

    @classmethod
    def from_size(cls, width: int, height: int) -> "ImageDimensions":
        return cls(width=width, height=height, aspect_ratio=width / height)


def read_file_bytes(path: Path) -> bytes:
    """Default filesystem collaborator."""
    return path.read_bytes()


# Guards the temporary change of Pillow's global pixel limit
_PIXEL_LIMIT_LOCK = threading.Lock()


def _open_size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def pillow_size(data: bytes) -> tuple[int, int]:
    """Decode the pixel size of an image with Pillow.

    Pillow parses the header lazily, so pixel data is never decoded here.
    Images above Pillow's decompression-bomb limit are re-read with the
    limit lifted, since only the header is needed.

    Raises:
        ValueError: If Pillow does not recognise the image format.
    """
    try:
        try:
            return _open_size(data)
        except Image.DecompressionBombError:
            with _PIXEL_LIMIT_LOCK:
                saved_limit = Image.MAX_IMAGE_PIXELS
                Image.MAX_IMAGE_PIXELS = None
                try:
                    return _open_size(data)
                finally:
                    Image.MAX_IMAGE_PIXELS = saved_limit
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(str(e)) from e


class ImageMetadataCache:
    """Memoizes image dimensions keyed by the path string."""

    def __init__(self, read_bytes: Optional[ReadBytes] = None,
                 decode_size: Optional[DecodeSize] = None):
        """Create an empty cache.

        Args:
            read_bytes: Callable returning the raw bytes for a path
                (defaults to reading from disk)
            decode_size: Callable returning (width, height) for raw bytes,
                raising ValueError for undecodable data (defaults to Pillow)
        """
        self._read_bytes = read_bytes or read_file_bytes
        self._decode_size = decode_size or pillow_size
        self._entries: dict[str, ImageDimensions] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: PathLike) -> bool:
        return str(path) in self._entries

    def dimensions_of(self, path: PathLike) -> ImageDimensions:
        """Return the dimensions of the image at `path`.

        The first call for a path string reads and decodes the file; later
        calls with the same string return the stored value without touching
        the filesystem. Failed lookups are not stored.

        Args:
            path: Path to a raster image

        Returns:
            ImageDimensions for the image

        Raises:
            ResourceNotFoundError: If the path does not resolve to a readable file
            UnsupportedFormatError: If the image size cannot be decoded
        """
        key = str(path)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Reading image dimensions: {key}")
        try:
            data = self._read_bytes(Path(key))
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError) as e:
            raise ResourceNotFoundError(key) from e

        try:
            width, height = self._decode_size(data)
        except ValueError as e:
            raise UnsupportedFormatError(key, str(e)) from e

        if width <= 0 or height <= 0:
            raise UnsupportedFormatError(key, f"invalid size {width}x{height}")

        dims = ImageDimensions.from_size(width, height)
        with self._lock:
            # A concurrent reader may have stored the same key already
            stored = self._entries.setdefault(key, dims)
        logger.debug(f"  {key}: {stored.width}x{stored.height} (ratio {stored.aspect_ratio:.4f})")
        return stored
