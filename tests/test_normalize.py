from __future__ import annotations

from datetime import datetime, timezone

import pytest

from posttime.date.normalize import normalize_candidate, normalize_epoch, normalize_iso, parse_calendar


def test_epoch_seconds_int_and_string() -> None:
    want = datetime(2025, 9, 13, 4, 0, tzinfo=timezone.utc)
    assert normalize_epoch(1757736000) == want
    assert normalize_epoch("1757736000") == want
    assert normalize_epoch(" 1757736000 ") == want


def test_epoch_keeps_milliseconds() -> None:
    got = normalize_epoch(1757736000.1234)
    assert got is not None
    assert got.microsecond == 123000


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "abc", "", "12e", True, None, 10**20])
def test_epoch_rejects_bad_values(bad) -> None:
    assert normalize_epoch(bad) is None


def test_iso_with_offset_is_converted_to_utc() -> None:
    got = normalize_iso("2025-09-13T12:00:00+08:00")
    assert got == datetime(2025, 9, 13, 4, 0, tzinfo=timezone.utc)
    assert got.utcoffset().total_seconds() == 0


def test_iso_naive_is_taken_as_utc() -> None:
    assert normalize_iso("2025-09-13T12:00:00") == datetime(2025, 9, 13, 12, 0, tzinfo=timezone.utc)
    assert normalize_iso("2025-09-13") == datetime(2025, 9, 13, tzinfo=timezone.utc)


@pytest.mark.parametrize("bad", ["", "   ", "not a date", "2025-13-45T99:00:00"])
def test_iso_unparseable_is_absent(bad: str) -> None:
    assert normalize_iso(bad) is None


def test_normalize_candidate_dispatch() -> None:
    assert normalize_candidate("epoch", "1757736000") == datetime(2025, 9, 13, 4, 0, tzinfo=timezone.utc)
    assert normalize_candidate("datetime", "2025-09-13T04:00:00Z") == datetime(2025, 9, 13, 4, 0, tzinfo=timezone.utc)
    assert normalize_candidate("title", "2025-09-13T04:00:00Z") is None


@pytest.mark.parametrize("partial", ["12:30", "September 13", "Sat", "2025-09", "10:00 AM +08:00"])
def test_iso_without_full_date_is_absent(partial: str) -> None:
    assert normalize_iso(partial) is None
    assert normalize_candidate("datetime", partial) is None


def test_parse_calendar_reports_given_fields() -> None:
    p = parse_calendar("Dec 25")
    assert p is not None
    assert (p.year_given, p.month_given, p.day_given) == (False, True, True)
    assert not p.full_date
    assert parse_calendar("2024-12-25").full_date
    assert parse_calendar("gibberish") is None
