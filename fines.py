"""Overdue fine policy."""

from datetime import date
from typing import Optional

DAILY_FINE_RATE = 0.5


def overdue_days(due_date: Optional[date], today: date) -> int:
    """Whole days ``today`` is past ``due_date``; 0 when not overdue."""
    if due_date is None or not today > due_date:
        return 0
    return (today - due_date).days


def calculate_overdue_fine(due_date: Optional[date], today: date) -> float:
    """Fine for a book due on ``due_date`` as of ``today``.

    Nothing is owed on or before the due date, or when no due date was set.
    After that the fine grows by ``DAILY_FINE_RATE`` per whole day.
    """
    return overdue_days(due_date, today) * DAILY_FINE_RATE
