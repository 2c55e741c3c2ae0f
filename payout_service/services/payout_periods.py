from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from payout_service.core.enums import PayoutFrequency
from payout_service.exceptions import InvalidPeriodException

Period = tuple[datetime, datetime]


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (e.g. read back from SQLite) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _day_bounds(start_day: date, end_day: date) -> Period:
    return (
        datetime.combine(start_day, time.min, tzinfo=timezone.utc),
        datetime.combine(end_day, time.max, tzinfo=timezone.utc),
    )


def validate_period(period_start: datetime, period_end: datetime) -> Period:
    period_start, period_end = as_utc(period_start), as_utc(period_end)
    if period_start > period_end:
        raise InvalidPeriodException(period_start, period_end)
    return period_start, period_end


def period_for(
    frequency: PayoutFrequency,
    reference: date,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
) -> Period:
    """Return the ``frequency`` period that contains ``reference``.

    Custom periods take their bounds from ``period_start``/``period_end``.
    Weeks run Monday to Sunday.
    """
    if frequency == PayoutFrequency.CUSTOM:
        if period_start is None or period_end is None:
            raise ValueError("custom periods need explicit start and end")
        return validate_period(period_start, period_end)

    if frequency == PayoutFrequency.DAILY:
        return _day_bounds(reference, reference)

    if frequency == PayoutFrequency.WEEKLY:
        monday = reference - timedelta(days=reference.weekday())
        return _day_bounds(monday, monday + timedelta(days=6))

    first = reference.replace(day=1)
    last = reference.replace(day=monthrange(reference.year, reference.month)[1])
    return _day_bounds(first, last)


def previous_period(frequency: PayoutFrequency, today: date) -> Period:
    """Most recent complete period before ``today``."""
    if frequency == PayoutFrequency.DAILY:
        return period_for(frequency, today - timedelta(days=1))
    if frequency == PayoutFrequency.WEEKLY:
        return period_for(frequency, today - timedelta(days=7))
    return previous_month(today)


def previous_month(today: date) -> Period:
    last_of_previous = today.replace(day=1) - timedelta(days=1)
    return period_for(PayoutFrequency.MONTHLY, last_of_previous)
