from __future__ import annotations

from datetime import datetime

from dateutil import rrule


def parse_daily_time(value: str) -> tuple[int, int]:
    """Parse an ``HH:MM`` wall-clock string."""
    hour_text, sep, minute_text = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Expected HH:MM, got {value!r}")

    hour = int(hour_text)
    minute = int(minute_text)
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hour, minute


def next_daily_run(after: datetime, hour: int, minute: int) -> datetime:
    """Return the first ``hour:minute`` strictly after ``after``.

    The result keeps the timezone (or naivety) of ``after``.
    """
    start = after.replace(second=0, microsecond=0)
    recurrence = rrule.rrule(
        rrule.DAILY,
        dtstart=start,
        byhour=hour,
        byminute=minute,
        bysecond=0,
    )
    upcoming = recurrence.after(after, inc=False)
    if upcoming is None:
        raise ValueError("daily recurrence produced no upcoming run")
    return upcoming
