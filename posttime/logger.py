from __future__ import annotations

import logging
import os
import sys

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def resolve_level(level: str | None = None) -> str:
    """Pick a log level from the argument or LOG_LEVEL, falling back to INFO."""
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return lvl if lvl in VALID_LOG_LEVELS else "INFO"


def configure_logging(level: str | None = None) -> None:
    """Attach a stderr handler to the package logger (scripts call this once)."""
    root = logging.getLogger("posttime")
    root.setLevel(getattr(logging, resolve_level(level)))
    if not any(getattr(h, "_posttime", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._posttime = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the posttime namespace for the given module."""
    if name == "posttime" or name.startswith("posttime."):
        return logging.getLogger(name)
    return logging.getLogger(f"posttime.{name.split('.')[-1]}")
