"""Turn DOM-walker output into resolver candidates.

The walker itself (browser, selectors, screenshots) lives outside this
package. It hands over one plain record per element, in document order:

    {"datetime": "...", "data-utime": "...", "title": "...", "aria-label": "...", "text": "..."}

Any key may be missing or empty.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .date.types import Candidate, CandidateKind

DEFAULT_CAP = 50

# per-element emission order
ATTRIBUTE_KINDS: list[tuple[str, CandidateKind]] = [
    ("datetime", "datetime"),
    ("data-utime", "epoch"),
    ("title", "title"),
    ("aria-label", "aria"),
    ("text", "text"),
]

KIND_ALIASES: dict[str, CandidateKind] = {
    "datetime": "datetime",
    "machine": "datetime",
    "epoch": "epoch",
    "utime": "epoch",
    "title": "title",
    "aria": "aria",
    "aria-label": "aria",
    "text": "text",
}


def candidates_from_elements(elements: Iterable[Mapping[str, Any]], *, cap: int = DEFAULT_CAP) -> list[Candidate]:
    """Flatten element records into an ordered candidate list, stopping at cap."""
    out: list[Candidate] = []
    if cap <= 0:
        return out
    for el in elements:
        for attr, kind in ATTRIBUTE_KINDS:
            v = el.get(attr)
            if v is None or isinstance(v, bool):
                continue
            s = str(v).strip()
            if not s:
                continue
            out.append(Candidate(kind=kind, raw_value=s))
            if len(out) >= cap:
                return out
    return out


def candidates_from_pairs(items: Iterable[Mapping[str, Any]], *, cap: int = DEFAULT_CAP) -> list[Candidate]:
    """Build candidates from pre-classified [{"kind": ..., "value": ...}] records.

    Unknown kinds and empty values are skipped.
    """
    out: list[Candidate] = []
    for item in items:
        if len(out) >= cap:
            break
        kind = KIND_ALIASES.get(str(item.get("kind") or "").strip().lower())
        value = item.get("value")
        if kind is None or value is None:
            continue
        s = str(value).strip()
        if s:
            out.append(Candidate(kind=kind, raw_value=s))
    return out
