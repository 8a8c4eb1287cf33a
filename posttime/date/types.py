from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Union

CandidateKind = Literal["datetime", "epoch", "title", "aria", "text"]

MACHINE_KINDS: tuple[CandidateKind, ...] = ("datetime", "epoch")
TEXT_KINDS: tuple[CandidateKind, ...] = ("title", "aria", "text")


@dataclass(frozen=True)
class Candidate:
    """One harvested raw signal that might encode a post timestamp."""

    kind: CandidateKind
    raw_value: str


@dataclass(frozen=True)
class ResolvedTimestamp:
    """Final resolved instant for a post, with the tag of the tier that produced it."""

    instant: datetime  # aware, UTC
    source: str
    rule: str
    candidate_index: int | None = None  # None when recovered by OCR

    @property
    def iso(self) -> str:
        """Millisecond ISO string with a trailing Z."""
        dt = self.instant.astimezone(timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Unresolved:
    """No tier produced a valid instant. Carries no date field and is falsy."""

    reason: str = "no tier produced a valid instant"
    ocr_error: str | None = None

    def __bool__(self) -> bool:
        return False


Resolution = Union[ResolvedTimestamp, Unresolved]


@dataclass(frozen=True)
class ResolvePolicy:
    """Controls resolver limits.

    - harvest_cap bounds how many candidates are considered (first N wins).
    - ocr_timeout_s bounds the last-resort OCR call.
    """

    harvest_cap: int = 50
    ocr_timeout_s: float = 30.0
