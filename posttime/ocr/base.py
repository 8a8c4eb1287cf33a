from __future__ import annotations

from abc import ABC, abstractmethod


class OcrError(RuntimeError):
    """Recognition failed (engine unavailable, HTTP error, timeout, ...)."""


class OcrEngine(ABC):
    name: str
    language: str

    @abstractmethod
    def ocr_png_bytes(self, png_bytes: bytes) -> str:
        """Return recognized text for a PNG screenshot region (as bytes)."""
        raise NotImplementedError
