"""Reminder schedule computation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from ..core.datetime_utils import ensure_utc

DEFAULT_REMINDER_OFFSETS: tuple[timedelta, ...] = (
    timedelta(hours=1),
    timedelta(hours=8),
    timedelta(days=1),
    timedelta(days=3),
    timedelta(weeks=1),
    timedelta(weeks=2),
)


def offsets_from_hours(hours: Iterable[float]) -> tuple[timedelta, ...]:
    """Convert configured lead times in hours into offsets."""
    return tuple(timedelta(hours=value) for value in hours)


def compute_reminders(
    deadline: datetime,
    now: datetime,
    offsets: Sequence[timedelta] = DEFAULT_REMINDER_OFFSETS,
) -> list[datetime]:
    """Return the future reminder times for ``deadline``, earliest first.

    Each reminder is ``deadline - offset``; repeated offsets collapse into one
    reminder. Reminders at or before ``now`` are dropped, so a deadline that is
    close or already past yields fewer or no reminders rather than a burst of
    overdue ones.
    """
    deadline = ensure_utc(deadline)
    now = ensure_utc(now)
    reminders = sorted({deadline - offset for offset in offsets})
    while reminders and reminders[0] <= now:
        reminders.pop(0)
    return reminders


def due_reminders(
    reminders: Sequence[datetime], now: datetime
) -> tuple[tuple[datetime, ...], tuple[datetime, ...]]:
    """Split an ascending schedule into ``(due, remaining)`` at ``now``."""
    now = ensure_utc(now)
    due = tuple(value for value in reminders if value <= now)
    remaining = tuple(value for value in reminders if value > now)
    return due, remaining


__all__ = [
    "DEFAULT_REMINDER_OFFSETS",
    "compute_reminders",
    "due_reminders",
    "offsets_from_hours",
]
