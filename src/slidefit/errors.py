"""Exceptions raised by the fitting and image metadata layers."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class SlideFitError(Exception):
    """Base class for slidefit errors."""


class ResourceNotFoundError(SlideFitError, FileNotFoundError):
    """Raised when an image path does not resolve to a readable file."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Image not found: {self.path}")


class UnsupportedFormatError(SlideFitError, ValueError):
    """Raised when image bytes exist but their dimensions cannot be decoded."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Cannot read image dimensions: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidViewportError(SlideFitError, ValueError):
    """Raised when a fitting call receives a non-positive width or height."""

    def __init__(self, w: float, h: float):
        self.w = w
        self.h = h
        super().__init__(f"Viewport must have positive size, got w={w}, h={h}")
