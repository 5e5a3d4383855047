"""Shared CLI formatting helpers."""

from __future__ import annotations

from datetime import date, datetime


def format_due(value: date | None) -> str:
    return value.isoformat() if value is not None else "no due date"


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_or_none(value: str | None) -> str:
    return value if value else "none"
