"""Reporting periods: the keys a sales report is bucketed by.

Each report granularity has a fixed, ordered set of periods that must all
appear in the output, whether or not any order falls into them. This module
builds those sets and maps a display-local date to the key of the period it
belongs to. Nothing here touches the database or the clock; callers pass in
"today" in display time.
"""
import calendar
import datetime
import enum
import logging
from dataclasses import dataclass
from typing import Hashable, Optional, Sequence

logger = logging.getLogger(__name__)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
WEEKS_IN_WEEKLY_REPORT = 7
YEARS_IN_YEARLY_REPORT = 5


class Granularity(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw: Optional[str], default: "Granularity") -> "Granularity":
        """Lenient lookup used for query parameters; unknown values give ``default``."""
        try:
            return cls(raw)
        except ValueError:
            logger.debug(f"Unknown timeframe {raw!r}, using {default.value}")
            return default


@dataclass(frozen=True)
class Period:
    granularity: Granularity
    key: Hashable
    label: str
    start: datetime.date
    end: datetime.date  # inclusive


def week_start(day: datetime.date) -> datetime.date:
    """The Sunday on or before ``day``."""
    return day - datetime.timedelta(days=(day.weekday() + 1) % 7)


def iso_week_start(day: datetime.date) -> datetime.date:
    """The Monday on or before ``day``."""
    return day - datetime.timedelta(days=day.weekday())


def period_key(granularity: Granularity, day: datetime.date) -> Hashable:
    """Key of the period ``day`` falls in.

    Daily periods are keyed by the date itself so that a Tuesday from an
    earlier week never lands in this week's Tuesday bucket.
    """
    if granularity is Granularity.DAILY:
        return day
    if granularity is Granularity.WEEKLY:
        iso_year, iso_week, _ = day.isocalendar()
        return (iso_year, iso_week)
    if granularity is Granularity.MONTHLY:
        return (day.year, day.month)
    return day.year


def daily_periods(today: datetime.date) -> list[Period]:
    """Sunday through Saturday of the week containing ``today``."""
    # Sunday-start week, not ISO; only the weekly report uses ISO weeks.
    first = week_start(today)
    periods = []
    for offset, name in enumerate(DAY_NAMES):
        day = first + datetime.timedelta(days=offset)
        periods.append(Period(Granularity.DAILY, period_key(Granularity.DAILY, day), name, day, day))
    return periods


def weekly_periods(today: datetime.date, weeks: int = WEEKS_IN_WEEKLY_REPORT) -> list[Period]:
    """The last ``weeks`` ISO weeks, oldest first, ending with the current one."""
    current = iso_week_start(today)
    periods = []
    for back in range(weeks - 1, -1, -1):
        start = current - datetime.timedelta(weeks=back)
        end = start + datetime.timedelta(days=6)
        key = period_key(Granularity.WEEKLY, start)
        label = f"Week {key[1]} ({start.isoformat()} - {end.isoformat()})"
        periods.append(Period(Granularity.WEEKLY, key, label, start, end))
    return periods


def monthly_periods(year: int) -> list[Period]:
    periods = []
    for month in range(1, 13):
        last_day = calendar.monthrange(year, month)[1]
        periods.append(Period(
            Granularity.MONTHLY,
            (year, month),
            str(month),
            datetime.date(year, month, 1),
            datetime.date(year, month, last_day),
        ))
    return periods


def yearly_periods(today: datetime.date, years: int = YEARS_IN_YEARLY_REPORT) -> list[Period]:
    """The current year and the ``years - 1`` before it, oldest first."""
    periods = []
    for year in range(today.year - years + 1, today.year + 1):
        periods.append(Period(
            Granularity.YEARLY, year, str(year), datetime.date(year, 1, 1), datetime.date(year, 12, 31)
        ))
    return periods


def expected_periods(
    granularity: Granularity, today: datetime.date, year: Optional[int] = None
) -> list[Period]:
    """The complete, chronologically ordered periods a report must contain.

    Args:
        granularity: The report granularity.
        today: The current display-local date.
        year: Only used by monthly reports; defaults to ``today``'s year.
    """
    if granularity is Granularity.DAILY:
        return daily_periods(today)
    if granularity is Granularity.WEEKLY:
        return weekly_periods(today)
    if granularity is Granularity.MONTHLY:
        return monthly_periods(year or today.year)
    return yearly_periods(today)


def current_period(granularity: Granularity, today: datetime.date) -> Period:
    """The single period of ``granularity`` that contains ``today``.

    Used by the drill-down views; "weekly" here is the same Sunday-based week
    the daily report covers.
    """
    if granularity is Granularity.DAILY:
        return Period(granularity, today, DAY_NAMES[(today.weekday() + 1) % 7], today, today)
    if granularity is Granularity.WEEKLY:
        days = daily_periods(today)
        return Period(granularity, days[0].start, "This week", days[0].start, days[-1].end)
    if granularity is Granularity.MONTHLY:
        return next(p for p in monthly_periods(today.year) if p.key == (today.year, today.month))
    return yearly_periods(today, years=1)[0]


def span(periods: Sequence[Period]) -> tuple[datetime.date, datetime.date]:
    """First and last calendar day covered by an ordered period sequence."""
    return periods[0].start, periods[-1].end


def resolve_year(raw: Optional[str], today: datetime.date) -> int:
    """Parse a ``year`` query parameter, falling back to the current year."""
    try:
        year = int(str(raw).strip())
    except (TypeError, ValueError):
        return today.year
    # The outermost years cannot be shifted between UTC and display time
    if not datetime.MINYEAR < year < datetime.MAXYEAR:
        return today.year
    return year


def resolve_date(raw: Optional[str], today: datetime.date) -> datetime.date:
    """Parse a ``date`` query parameter (date or datetime), falling back to today."""
    if not raw:
        return today
    value = raw.strip()
    try:
        day = datetime.date.fromisoformat(value[:10])
    except ValueError:
        logger.debug(f"Unparseable date {raw!r}, using {today.isoformat()}")
        return today
    if not datetime.MINYEAR < day.year < datetime.MAXYEAR:
        return today
    return day


class RatingWindow(str, enum.Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_WEEK = "lastWeek"
    LAST_MONTH = "lastMonth"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "RatingWindow":
        try:
            return cls(raw)
        except ValueError:
            return cls.TODAY

    def days(self, today: datetime.date) -> tuple[datetime.date, datetime.date]:
        """First and last display-local day of the window, both inclusive."""
        if self is RatingWindow.YESTERDAY:
            yesterday = today - datetime.timedelta(days=1)
            return yesterday, yesterday
        if self is RatingWindow.LAST_WEEK:
            return today - datetime.timedelta(weeks=1), today
        if self is RatingWindow.LAST_MONTH:
            return _month_before(today), today
        return today, today


def _month_before(day: datetime.date) -> datetime.date:
    # Clamp to the last day of the shorter month (Mar 31 -> Feb 28/29)
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    return datetime.date(year, month, min(day.day, calendar.monthrange(year, month)[1]))
