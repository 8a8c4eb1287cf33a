from __future__ import annotations

import io
from dataclasses import dataclass

from .base import OcrEngine, OcrError


@dataclass
class TesseractEngine(OcrEngine):
    """Local Tesseract via pytesseract.

    Lazy-imports pytesseract/Pillow so the resolver runs without them
    (install the `tesseract` extra to enable).
    """

    language: str = "eng"
    config: str = "--oem 1 --psm 6"
    timeout_s: float = 30.0

    name: str = "tesseract"

    def ocr_png_bytes(self, png_bytes: bytes) -> str:
        if not png_bytes:
            raise OcrError("Empty image region")
        try:
            import pytesseract  # type: ignore
            from PIL import Image  # type: ignore
        except ImportError as e:
            raise OcrError("Tesseract engine needs the optional deps: pip install 'posttime-resolver[tesseract]'") from e

        try:
            img = Image.open(io.BytesIO(png_bytes))
            # header text is small; grayscale helps tesseract
            img = img.convert("L")
            return pytesseract.image_to_string(img, lang=self.language, config=self.config, timeout=self.timeout_s)
        except (OSError, RuntimeError, pytesseract.TesseractError) as e:
            raise OcrError(f"Tesseract failed: {e}") from e
