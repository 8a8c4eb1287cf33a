from __future__ import annotations

from typing import Any

from .date.types import Resolution, ResolvedTimestamp

UNRESOLVED_MESSAGE = "Could not detect post time"


def build_post_date_record(url: str, outcome: Resolution) -> dict[str, Any]:
    """Merge a resolution outcome into a post-date output record.

    Unresolved is not an item error: the record is kept with status
    "unresolved" and iso=None, so consumers never see a made-up date.
    """
    rec: dict[str, Any] = {"url": url, "item_type": "post_date"}
    if isinstance(outcome, ResolvedTimestamp):
        rec.update(status="success", iso=outcome.iso, source=outcome.source, error=None)
        return rec

    rec.update(status="unresolved", iso=None, source=None, error=UNRESOLVED_MESSAGE)
    if outcome.ocr_error:
        rec["ocr_error"] = outcome.ocr_error
    return rec


def build_error_record(url: str, exc: BaseException) -> dict[str, Any]:
    """Record for a post whose collaborators (navigation, harvesting) raised."""
    return {
        "url": url,
        "item_type": "post_date",
        "status": "error",
        "iso": None,
        "source": None,
        "error": str(exc) or type(exc).__name__,
    }
