"""Unit tests for timezone helpers."""

from datetime import date, datetime, timezone

from billmate.utils.time import (
    format_thai_date,
    local_day_bounds,
    local_due_date,
    local_today,
    to_naive_utc,
)


def test_local_day_bounds_are_bangkok_midnights_in_utc():
    start, end = local_day_bounds(date(2026, 3, 15))
    assert start == datetime(2026, 3, 14, 17, 0)
    assert end == datetime(2026, 3, 15, 17, 0)


def test_local_today_crosses_utc_date_line():
    # 18:00 UTC on the 10th is already the 11th in Bangkok
    assert local_today(datetime(2026, 3, 10, 18, 0)) == date(2026, 3, 11)


def test_local_due_date_clamps_to_month_length():
    assert local_due_date(2026, 2, 31) == datetime(2026, 2, 27, 17, 0)
    assert local_due_date(2024, 2, 31) == datetime(2024, 2, 28, 17, 0)


def test_local_due_date_december_rolls_year():
    assert local_due_date(2026, 12, 31) == datetime(2026, 12, 30, 17, 0)


def test_to_naive_utc_keeps_naive_values():
    naive = datetime(2026, 1, 1, 12, 0)
    assert to_naive_utc(naive) is naive


def test_to_naive_utc_converts_aware_values():
    aware = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert to_naive_utc(aware) == datetime(2026, 1, 1, 12, 0)


def test_format_thai_date_uses_local_day():
    assert format_thai_date(datetime(2026, 3, 14, 17, 0)) == "15/03/2026"
