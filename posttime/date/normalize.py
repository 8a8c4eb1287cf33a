from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from dateutil import parser as dateparser

from .types import CandidateKind

EPOCH_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?$")

# Two defaults that differ in year, month and day (both leap years, so a
# bare "February 29" parses under either). A field that comes out different
# under the two was not present in the text.
_PROBE_DEFAULTS = (datetime(1904, 1, 1), datetime(1908, 2, 2))


@dataclass(frozen=True)
class CalendarParse:
    dt: datetime  # fields missing from the text hold placeholder values
    year_given: bool
    month_given: bool
    day_given: bool

    @property
    def full_date(self) -> bool:
        return self.year_given and self.month_given and self.day_given


def parse_calendar(text: str) -> CalendarParse | None:
    """dateutil parse that also reports which date fields the text supplied."""
    try:
        a, b = (dateparser.parse(text, default=d) for d in _PROBE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    return CalendarParse(
        dt=a,
        year_given=a.year == b.year,
        month_given=a.month == b.month,
        day_given=a.day == b.day,
    )


def normalize_epoch(value: str | int | float) -> datetime | None:
    """Unix epoch seconds -> aware UTC datetime (millisecond precision)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        s = value.strip()
        if not EPOCH_RE.match(s):
            return None
        value = float(s)
    if not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None

    ms = round(value * 1000)
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def normalize_iso(value: str) -> datetime | None:
    """ISO-like datetime string -> aware UTC datetime.

    Only values carrying a full calendar date are accepted; a bare time,
    weekday or month/day never borrows the missing fields from a clock.
    Strings without an explicit offset are taken as UTC.
    """
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    parsed = parse_calendar(s)
    if parsed is None or not parsed.full_date:
        return None
    dt = parsed.dt
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def normalize_candidate(kind: CandidateKind, raw: str) -> datetime | None:
    if kind == "epoch":
        return normalize_epoch(raw)
    if kind == "datetime":
        return normalize_iso(raw)
    return None
