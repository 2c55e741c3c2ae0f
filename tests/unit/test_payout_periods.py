from datetime import date, datetime, time, timedelta, timezone

import pytest

from payout_service.core.enums import PayoutFrequency
from payout_service.exceptions import InvalidPeriodException
from payout_service.services.payout_periods import (
    as_utc,
    period_for,
    previous_month,
    previous_period,
    validate_period,
)


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _day_end(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


@pytest.mark.unit
class TestPeriodFor:
    def test_daily(self) -> None:
        start, end = period_for(PayoutFrequency.DAILY, date(2026, 9, 15))

        assert start == _day_start(date(2026, 9, 15))
        assert end == _day_end(date(2026, 9, 15))

    def test_weekly_runs_monday_to_sunday(self) -> None:
        # 2026-09-17 is a Thursday
        start, end = period_for(PayoutFrequency.WEEKLY, date(2026, 9, 17))

        assert start == _day_start(date(2026, 9, 14))
        assert end == _day_end(date(2026, 9, 20))

    def test_monthly(self) -> None:
        start, end = period_for(PayoutFrequency.MONTHLY, date(2026, 2, 10))

        assert start == _day_start(date(2026, 2, 1))
        assert end == _day_end(date(2026, 2, 28))

    def test_custom_uses_explicit_bounds(self) -> None:
        explicit_start = datetime(2026, 9, 3, tzinfo=timezone.utc)
        explicit_end = datetime(2026, 9, 9, tzinfo=timezone.utc)

        period = period_for(
            PayoutFrequency.CUSTOM, date(2026, 9, 5), explicit_start, explicit_end
        )

        assert period == (explicit_start, explicit_end)

    def test_custom_without_bounds_raises(self) -> None:
        with pytest.raises(ValueError):
            period_for(PayoutFrequency.CUSTOM, date(2026, 9, 5))


@pytest.mark.unit
class TestPreviousPeriod:
    def test_previous_day(self) -> None:
        start, _ = previous_period(PayoutFrequency.DAILY, date(2026, 10, 1))

        assert start == _day_start(date(2026, 9, 30))

    def test_previous_week(self) -> None:
        # 2026-10-18 is a Sunday
        start, end = previous_period(PayoutFrequency.WEEKLY, date(2026, 10, 18))

        assert start == _day_start(date(2026, 10, 5))
        assert end == _day_end(date(2026, 10, 11))

    def test_previous_month_crosses_year(self) -> None:
        start, end = previous_month(date(2026, 1, 15))

        assert start == _day_start(date(2025, 12, 1))
        assert end == _day_end(date(2025, 12, 31))

    @pytest.mark.parametrize(
        "frequency", [PayoutFrequency.MONTHLY, PayoutFrequency.CUSTOM]
    )
    def test_monthly_and_custom_use_previous_month(
        self, frequency: PayoutFrequency
    ) -> None:
        assert previous_period(frequency, date(2026, 10, 18)) == previous_month(
            date(2026, 10, 18)
        )


@pytest.mark.unit
class TestValidatePeriod:
    def test_equal_bounds_are_valid(self) -> None:
        moment = datetime(2026, 9, 1, tzinfo=timezone.utc)

        assert validate_period(moment, moment) == (moment, moment)

    def test_start_after_end_raises(self) -> None:
        with pytest.raises(InvalidPeriodException) as exc_info:
            validate_period(
                datetime(2026, 9, 2, tzinfo=timezone.utc),
                datetime(2026, 9, 1, tzinfo=timezone.utc),
            )

        assert exc_info.value.error_code == "PAYOUT_INVALID_PERIOD"

    def test_as_utc_converts_offsets(self) -> None:
        aware = datetime(2026, 9, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))

        assert as_utc(aware) == datetime(2026, 9, 1, 0, 0, tzinfo=timezone.utc)
        assert as_utc(datetime(2026, 9, 1)).tzinfo == timezone.utc
