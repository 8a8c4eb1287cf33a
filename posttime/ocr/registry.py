from __future__ import annotations

from .azure import AzureVisionReadEngine
from .base import OcrEngine
from .tesseract import TesseractEngine


def build_engine(name: str | None, **kwargs) -> OcrEngine | None:
    """Engine factory. Returns None when OCR is switched off ("none")."""
    n = (name or "none").lower()
    if n in ("none", "off", ""):
        return None
    if n in ("azure", "azure-read", "azure_read"):
        return AzureVisionReadEngine.from_env(
            language=str(kwargs.get("language") or "en"),
            timeout_s=float(kwargs.get("timeout_s", 30.0)),
        )
    if n == "tesseract":
        return TesseractEngine(
            language=str(kwargs.get("language") or "eng"),
            timeout_s=float(kwargs.get("timeout_s", 30.0)),
        )

    raise ValueError(f"Unsupported OCR engine: {name} (expected none, azure or tesseract)")
