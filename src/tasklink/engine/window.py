"""Due-date windowing for the fetch cycle."""

from __future__ import annotations

from datetime import date

from tasklink.engine.dates import days_until


def is_in_scope(
    due_date: date | None,
    today: date,
    look_ahead_days: int | None,
    include_undated: bool,
) -> bool:
    """Decide whether an assignment is stored for syncing.

    Past-due work is never scoped in. Rows stored while still upcoming are
    deleted by ``FetchEngine`` once they fall due.
    """
    if due_date is None:
        return include_undated
    if due_date < today:
        return False
    if look_ahead_days is None:
        return True
    return days_until(due_date, today) <= look_ahead_days
