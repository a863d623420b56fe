"""Conversion between storage time (UTC) and the shop's display time.

Every order timestamp is stored in UTC. The admin dashboard shows, and accepts
edits in, a single fixed local offset. This is intentionally not a timezone
database lookup: there is no DST and no per-user zone, only the one offset
below. All reads that present a timestamp and all writes that persist a
user-supplied local timestamp go through ``to_display`` / ``to_storage``.
"""

import datetime
from typing import Optional

DISPLAY_UTC_OFFSET = datetime.timedelta(hours=8)
DISPLAY_TIMEZONE = datetime.timezone(DISPLAY_UTC_OFFSET, name="UTC+08:00")


def to_display(utc_timestamp: datetime.datetime) -> datetime.datetime:
    """Shift a stored timestamp into display time.

    Naive values are taken to be UTC, which is how the store hands them back
    when timezone support is disabled.

    Returns:
        An aware datetime carrying the display offset.
    """
    if utc_timestamp.tzinfo is None:
        utc_timestamp = utc_timestamp.replace(tzinfo=datetime.timezone.utc)
    return utc_timestamp.astimezone(DISPLAY_TIMEZONE)


def to_storage(local_timestamp: datetime.datetime) -> datetime.datetime:
    """Shift a display-time timestamp back to UTC for persisting.

    Naive values are taken to be display-local wall-clock time, which is what
    the dashboard's date pickers submit.

    Returns:
        An aware datetime in UTC.
    """
    if local_timestamp.tzinfo is None:
        local_timestamp = local_timestamp.replace(tzinfo=DISPLAY_TIMEZONE)
    return local_timestamp.astimezone(datetime.timezone.utc)


def display_now(now: Optional[datetime.datetime] = None) -> datetime.datetime:
    """The current moment (or ``now``) in display time."""
    return to_display(now or datetime.datetime.now(datetime.timezone.utc))


def display_today(now: Optional[datetime.datetime] = None) -> datetime.date:
    return display_now(now).date()


def local_day_bounds(day: datetime.date) -> tuple[datetime.datetime, datetime.datetime]:
    """UTC [start, end) bounds of one display-local calendar day."""
    start = to_storage(datetime.datetime.combine(day, datetime.time.min))
    return start, start + datetime.timedelta(days=1)


def local_range_bounds(
    first_day: datetime.date, last_day: datetime.date
) -> tuple[datetime.datetime, datetime.datetime]:
    """UTC [start, end) bounds covering display-local days first_day..last_day."""
    start, _ = local_day_bounds(first_day)
    _, end = local_day_bounds(last_day)
    return start, end
