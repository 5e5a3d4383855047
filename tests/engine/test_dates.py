from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from tasklink.contracts.exceptions import ConfigError
from tasklink.engine.dates import days_until, normalize_due_date, parse_timestamp, resolve_timezone, today_in

LA = resolve_timezone("America/Los_Angeles")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        # 23:59:59 PST on the 15th is already the 16th in UTC.
        ("2024-01-16T07:59:59Z", date(2024, 1, 15)),
        ("2024-01-16T08:00:00Z", date(2024, 1, 16)),
        # Daylight time: UTC-7.
        ("2024-07-01T06:59:00Z", date(2024, 6, 30)),
        ("2024-07-01T07:00:00Z", date(2024, 7, 1)),
        ("2024-03-10T12:00:00-08:00", date(2024, 3, 10)),
    ],
)
def test_normalize_due_date_uses_institution_calendar_day(raw: str, expected: date) -> None:
    assert normalize_due_date(raw, LA) == expected


def test_early_morning_local_times_are_not_shifted_back() -> None:
    # 01:30 local on the 16th stays on the 16th.
    assert normalize_due_date("2024-01-16T09:30:00Z", LA) == date(2024, 1, 16)


def test_normalize_due_date_defaults_to_los_angeles() -> None:
    assert normalize_due_date("2024-01-16T07:59:59Z") == date(2024, 1, 15)


def test_normalize_due_date_other_zone() -> None:
    assert normalize_due_date("2024-01-16T07:59:59Z", resolve_timezone("Europe/Berlin")) == date(2024, 1, 16)


@pytest.mark.parametrize("raw", [None, "", "   ", "not a date", "2024-13-40T00:00:00Z"])
def test_normalize_due_date_returns_none_for_missing_or_invalid(raw: str | None) -> None:
    assert normalize_due_date(raw, LA) is None


def test_parse_timestamp_treats_naive_values_as_utc() -> None:
    assert parse_timestamp("2024-01-16T07:59:59") == datetime(2024, 1, 16, 7, 59, 59, tzinfo=UTC)


def test_resolve_timezone_rejects_unknown_zone() -> None:
    with pytest.raises(ConfigError, match="unknown timezone"):
        resolve_timezone("Mars/Olympus_Mons")


def test_today_in_uses_zone_calendar() -> None:
    assert today_in(LA, datetime(2024, 1, 16, 7, 0, tzinfo=UTC)) == date(2024, 1, 15)
    assert today_in(LA, datetime(2024, 1, 16, 7, 0)) == date(2024, 1, 15)


def test_days_until() -> None:
    assert days_until(date(2024, 1, 20), date(2024, 1, 15)) == 5
    assert days_until(date(2024, 1, 10), date(2024, 1, 15)) == -5
