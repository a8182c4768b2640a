"""Duration resolution for tasks."""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

from critpath.exceptions import InvalidDurationError
from critpath.models import TaskRef

from .protocols import DurationResolver

SECONDS_PER_DAY = 24 * 60 * 60


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def span_days(start: date | datetime | None, due: date | datetime | None) -> int | None:
    """Whole days from ``start`` to ``due``, rounded up.

    Returns None if either date is missing or ``due`` is before ``start``.
    """
    if start is None or due is None:
        return None

    start_dt = _as_datetime(start)
    due_dt = _as_datetime(due)
    # Plain dates carry no zone; borrow it from the other side
    if start_dt.tzinfo is None and due_dt.tzinfo is not None:
        start_dt = start_dt.replace(tzinfo=due_dt.tzinfo)
    elif due_dt.tzinfo is None and start_dt.tzinfo is not None:
        due_dt = due_dt.replace(tzinfo=start_dt.tzinfo)

    delta = due_dt - start_dt
    if delta < timedelta(0):
        return None
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


class DateSpanDurationResolver:
    """Default resolver: calendar days between start and due date, minimum 1."""

    def __init__(self, default_days: int = 1):
        if default_days < 1:
            raise ValueError(f"default_days must be at least 1, got {default_days}")
        self.default_days = default_days

    def __call__(self, task: TaskRef) -> int:
        days = span_days(task.start_date, task.due_date)
        if days is None:
            return self.default_days
        return max(1, days)


def resolve_duration(task: TaskRef) -> int:
    """Resolve a task's duration with the default policy."""
    return DateSpanDurationResolver()(task)


def checked_duration(resolver: DurationResolver, task: TaskRef) -> int:
    """Run ``resolver`` on ``task`` and reject anything but a positive int.

    Raises:
        InvalidDurationError: If the resolver returns a non-positive or non-integer value
    """
    value = resolver(task)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidDurationError(task.id, value)
    return value
