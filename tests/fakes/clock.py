"""Fixed clock shared by engine, SDK and scheduler tests."""

from __future__ import annotations

from datetime import UTC, datetime

# Noon on 2024-01-15 in America/Los_Angeles.
FIXED_NOW = datetime(2024, 1, 15, 20, 0, tzinfo=UTC)

USER_ID = "user-1"


def fixed_clock() -> datetime:
    return FIXED_NOW
