from __future__ import annotations

import struct
import zlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from PIL import Image

from slidefit.errors import ResourceNotFoundError, UnsupportedFormatError
from slidefit.image_cache import ImageDimensions, ImageMetadataCache, pillow_size


class CountingReader:
    """Filesystem reader that records every read."""

    def __init__(self):
        self.reads: list[Path] = []

    def __call__(self, path: Path) -> bytes:
        self.reads.append(path)
        return path.read_bytes()


def test_reads_dimensions_from_png(make_png) -> None:
    path = make_png(400, 300)
    dims = ImageMetadataCache().dimensions_of(path)

    assert dims == ImageDimensions(width=400, height=300, aspect_ratio=400 / 300)


def test_second_lookup_is_served_from_cache(wide_png) -> None:
    reader = CountingReader()
    cache = ImageMetadataCache(read_bytes=reader)

    first = cache.dimensions_of(wide_png)
    second = cache.dimensions_of(wide_png)

    assert first is second
    assert len(reader.reads) == 1
    assert wide_png in cache
    assert len(cache) == 1


def test_cache_is_keyed_by_path_string(wide_png) -> None:
    reader = CountingReader()
    cache = ImageMetadataCache(read_bytes=reader)

    cache.dimensions_of(wide_png)
    cache.dimensions_of(str(wide_png))
    assert len(reader.reads) == 1

    # A different spelling of the same file is a different key
    cache.dimensions_of(f"{wide_png.parent}/./{wide_png.name}")
    assert len(reader.reads) == 2


def test_missing_file_is_not_cached(tmp_path: Path) -> None:
    reader = CountingReader()
    cache = ImageMetadataCache(read_bytes=reader)
    missing = tmp_path / "missing.png"

    with pytest.raises(ResourceNotFoundError) as exc_info:
        cache.dimensions_of(missing)
    assert isinstance(exc_info.value, FileNotFoundError)
    assert exc_info.value.path == str(missing)
    assert missing not in cache

    with pytest.raises(ResourceNotFoundError):
        cache.dimensions_of(missing)
    assert len(reader.reads) == 2


def test_directory_is_not_an_image(tmp_path: Path) -> None:
    with pytest.raises(ResourceNotFoundError):
        ImageMetadataCache().dimensions_of(tmp_path)


def test_undecodable_bytes_raise_and_retry(tmp_path: Path, make_png) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    reader = CountingReader()
    cache = ImageMetadataCache(read_bytes=reader)

    with pytest.raises(UnsupportedFormatError):
        cache.dimensions_of(path)
    assert path not in cache

    # Once the file is fixed the next call reads it again
    make_png(20, 10, "broken.png")
    assert cache.dimensions_of(path).aspect_ratio == 2.0
    assert len(reader.reads) == 2


def test_zero_size_is_unsupported(tmp_path: Path) -> None:
    cache = ImageMetadataCache(read_bytes=lambda p: b"", decode_size=lambda data: (0, 10))

    with pytest.raises(UnsupportedFormatError, match="invalid size"):
        cache.dimensions_of(tmp_path / "any.png")


def test_custom_collaborators() -> None:
    cache = ImageMetadataCache(
        read_bytes=lambda p: b"header",
        decode_size=lambda data: (1920, 1080),
    )

    dims = cache.dimensions_of("virtual/asset.png")
    assert (dims.width, dims.height) == (1920, 1080)
    assert dims.aspect_ratio == 1920 / 1080


def with_declared_size(png: bytes, width: int, height: int) -> bytes:
    """Rewrite the IHDR width/height of a PNG and fix up the chunk CRC."""
    data = bytearray(png)
    data[16:24] = struct.pack(">II", width, height)
    data[29:33] = struct.pack(">I", zlib.crc32(bytes(data[12:29])) & 0xFFFFFFFF)
    return bytes(data)


def test_huge_image_reads_header_size(tmp_path: Path, make_png) -> None:
    panorama = tmp_path / "panorama.png"
    panorama.write_bytes(with_declared_size(make_png(4, 2).read_bytes(), 20000, 10000))
    limit = Image.MAX_IMAGE_PIXELS

    dims = ImageMetadataCache().dimensions_of(panorama)

    assert (dims.width, dims.height) == (20000, 10000)
    assert dims.aspect_ratio == 2.0
    assert Image.MAX_IMAGE_PIXELS == limit


def test_unreadable_file_is_not_found(tmp_path: Path) -> None:
    def denied(path: Path) -> bytes:
        raise PermissionError(13, "Permission denied", str(path))

    cache = ImageMetadataCache(read_bytes=denied)
    locked = tmp_path / "locked.png"

    with pytest.raises(ResourceNotFoundError) as exc_info:
        cache.dimensions_of(locked)
    assert isinstance(exc_info.value.__cause__, PermissionError)
    assert locked not in cache


def test_pillow_size_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        pillow_size(b"\x00\x01\x02")


def test_concurrent_first_lookups_agree(wide_png) -> None:
    cache = ImageMetadataCache()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.dimensions_of(wide_png), range(32)))

    assert all(r is results[0] for r in results)
    assert len(cache) == 1
