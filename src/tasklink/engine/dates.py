"""Due-date normalization.

Canvas stamps "due at end of day" deadlines as instants that, in UTC, often
fall on the next calendar day. A due date is therefore read in the
institution's timezone and kept as a plain :class:`datetime.date` from then
on, so rendering it anywhere yields the same calendar day.

The calendar date observed in the institution timezone is used as-is; no
early-morning hour window is shifted back to the previous day.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tasklink.contracts.config import DEFAULT_INSTITUTION_TIMEZONE
from tasklink.contracts.exceptions import ConfigError


def resolve_timezone(name: str = DEFAULT_INSTITUTION_TIMEZONE) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"unknown timezone: {name}") from exc


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        instant = datetime.fromisoformat(text)
    except ValueError:
        return None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant


def normalize_due_date(raw: str | None, zone: ZoneInfo | None = None) -> date | None:
    """Return the institution-local calendar date of *raw*, or ``None``."""
    instant = parse_timestamp(raw)
    if instant is None:
        return None
    return instant.astimezone(zone or resolve_timezone()).date()


def today_in(zone: ZoneInfo, now: datetime | None = None) -> date:
    current = now if now is not None else datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    return current.astimezone(zone).date()


def days_until(due_date: date, today: date) -> int:
    return (due_date - today).days
