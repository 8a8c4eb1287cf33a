"""Relative/loose post-date parsing.

All phrase handling lives in RULES, evaluated top to bottom against a
lower-cased, trimmed copy of the text. The first rule whose pattern matches
decides the outcome; if its extractor cannot build a valid date the result
is None and later rules are not consulted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from .normalize import parse_calendar

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}

JUST_NOW_RE = re.compile(r"\bjust\s*now\b")

SHORT_RELATIVE_RE = re.compile(r"(?<!\d)(\d{1,3})\s*(minutes?|mins?|m|hours?|hrs?|h|days?|d)\b")

YESTERDAY_AT_RE = re.compile(r"yesterday\s+at\s+(\d{1,2}):(\d{2})\s*(am|pm)\b")

MONTH_DAY_RE = re.compile(
    r"\b(" + "|".join(MONTHS) + r")\s+(\d{1,2})\b"
    r"(?:\s*,\s*(\d{4}))?"
    r"(?:\s+at\s+(\d{1,2}):(\d{2})\s*(am|pm)\b)?"
)

_MONTH_WORD = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"

# Calendar signal required before handing text to the generic parser: a
# month word next to a day number, or an all-numeric date with a 19xx/20xx year.
CALENDAR_HINT_RE = re.compile(
    rf"\b{_MONTH_WORD}\s+\d{{1,2}}\b"
    rf"|\b\d{{1,2}}\s+{_MONTH_WORD}(?![a-z])"
    r"|(?<!\d)(?:19|20)\d{2}[/.-]\d{1,2}[/.-]\d{1,2}(?!\d)"
    r"|(?<!\d)\d{1,2}[/.-]\d{1,2}[/.-](?:19|20)\d{2}(?!\d)"
)


@dataclass(frozen=True)
class RelativeMatch:
    instant: datetime
    rule: str


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str], str, datetime], datetime | None]


def to_24h(hour: int, ampm: str) -> int | None:
    """12-hour clock -> 24-hour (12 AM -> 0, 12 PM -> 12)."""
    if not 1 <= hour <= 12:
        return None
    ampm = ampm.lower()
    if ampm == "am":
        return 0 if hour == 12 else hour
    return hour if hour == 12 else hour + 12


def _clock_time(hh: str, mm: str, ampm: str) -> tuple[int, int] | None:
    h = to_24h(int(hh), ampm)
    m = int(mm)
    if h is None or not 0 <= m <= 59:
        return None
    return h, m


def _just_now(m: re.Match[str], text: str, now: datetime) -> datetime | None:
    return now


def _short_relative(m: re.Match[str], text: str, now: datetime) -> datetime | None:
    n = int(m.group(1))
    secs = n * UNIT_SECONDS[m.group(2)[0]]
    # absolute seconds, independent of any DST transition in now's zone
    return (now.astimezone(timezone.utc) - timedelta(seconds=secs)).astimezone(now.tzinfo)


def _yesterday_at(m: re.Match[str], text: str, now: datetime) -> datetime | None:
    hm = _clock_time(m.group(1), m.group(2), m.group(3))
    if hm is None:
        return None
    day = (now - timedelta(days=1)).date()
    return datetime(day.year, day.month, day.day, hm[0], hm[1], tzinfo=now.tzinfo)


def _roll_back_if_future(dt: datetime, now: datetime) -> datetime:
    if dt.astimezone(now.tzinfo).date() > now.date():
        return dt.replace(year=dt.year - 1)
    return dt


def _month_day(m: re.Match[str], text: str, now: datetime) -> datetime | None:
    """Month/day with optional year and time.

    When the calendar day lands after now's day the year is rolled back by
    one; a later time on now's own day is kept as is. The rollback only
    holds for posts from the preceding twelve months: an older month/day
    without a year resolves to the wrong year.
    """
    month = MONTHS[m.group(1)]
    day = int(m.group(2))
    year = int(m.group(3)) if m.group(3) else now.year

    hour, minute = 0, 0
    if m.group(4):
        hm = _clock_time(m.group(4), m.group(5), m.group(6))
        if hm is None:
            return None
        hour, minute = hm

    try:
        return _roll_back_if_future(datetime(year, month, day, hour, minute, tzinfo=now.tzinfo), now)
    except ValueError:
        return None


def _generic(m: re.Match[str], text: str, now: datetime) -> datetime | None:
    """dateutil parse of the full text; month and day must be in the text.

    A missing year takes now's year and is rolled back like month_day.
    """
    parsed = parse_calendar(text)
    if parsed is None or not (parsed.month_given and parsed.day_given):
        return None
    dt = parsed.dt
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=now.tzinfo)
    if parsed.year_given:
        return dt
    try:
        return _roll_back_if_future(dt.replace(year=now.year), now)
    except ValueError:
        return None


RULES: tuple[Rule, ...] = (
    Rule("just_now", JUST_NOW_RE, _just_now),
    Rule("short_relative", SHORT_RELATIVE_RE, _short_relative),
    Rule("yesterday_at", YESTERDAY_AT_RE, _yesterday_at),
    Rule("month_day", MONTH_DAY_RE, _month_day),
    Rule("generic", CALENDAR_HINT_RE, _generic),
)


def as_reference(now: datetime | None) -> datetime:
    """Return an aware reference clock (naive values are taken as local time)."""
    if now is None:
        return datetime.now().astimezone()
    if now.tzinfo is None:
        return now.astimezone()
    return now


def parse_relative_detailed(text: str | None, now: datetime | None = None) -> RelativeMatch | None:
    if not text:
        return None
    ref = as_reference(now)
    cleaned = str(text).strip()
    lower = cleaned.lower()
    if not lower:
        return None

    for rule in RULES:
        m = rule.pattern.search(lower)
        if not m:
            continue
        dt = rule.extract(m, cleaned, ref)
        if dt is None:
            return None
        return RelativeMatch(instant=dt, rule=rule.name)

    return None


def parse_relative(text: str | None, now: datetime | None = None) -> datetime | None:
    """Parse post-header date text ("Just now", "2 h", "Yesterday at 3:45 PM", ...).

    Returns an aware datetime in now's timezone, or None.
    """
    hit = parse_relative_detailed(text, now)
    return hit.instant if hit else None
