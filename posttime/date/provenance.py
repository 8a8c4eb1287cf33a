from __future__ import annotations

from .types import CandidateKind

OCR_TAG = "ocr"

DOM_TAGS: dict[str, str] = {
    "datetime": "dom_datetime",
    "epoch": "dom_epoch",
    "title": "dom_title",
    "aria": "dom_aria",
    "text": "dom_text",
}


def dom_tag(kind: CandidateKind) -> str:
    """Provenance tag for a result taken from a harvested candidate."""
    try:
        return DOM_TAGS[kind]
    except KeyError:
        raise ValueError(f"Unknown candidate kind: {kind!r}") from None


def ocr_tag() -> str:
    return OCR_TAG
