from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .date.types import ResolvePolicy
from .logger import resolve_level


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        v = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if v < 1:
        raise ValueError(f"{name} must be >= 1, got {v}")
    return v


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        v = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not v > 0:
        raise ValueError(f"{name} must be > 0, got {v}")
    return v


@dataclass(frozen=True)
class Settings:
    """Runtime settings (env vars, or a .env file in the working directory)."""

    harvest_cap: int = 50
    ocr_engine: str = "none"
    ocr_language: str | None = None
    ocr_timeout_s: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            harvest_cap=_env_int("POSTTIME_HARVEST_CAP", 50),
            ocr_engine=os.environ.get("POSTTIME_OCR_ENGINE", "none").strip().lower() or "none",
            ocr_language=os.environ.get("POSTTIME_OCR_LANGUAGE", "").strip() or None,
            ocr_timeout_s=_env_float("POSTTIME_OCR_TIMEOUT_S", 30.0),
            log_level=resolve_level(None),
        )

    def policy(self) -> ResolvePolicy:
        return ResolvePolicy(harvest_cap=self.harvest_cap, ocr_timeout_s=self.ocr_timeout_s)
