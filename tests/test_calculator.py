"""Testes do cálculo de horas úteis"""
from datetime import date, datetime, timedelta, timezone

import pytest

from helpdesk.sla.calculator import (
    HOUR,
    add_business_duration,
    business_duration,
    is_business_instant,
    is_working_day,
    next_business_instant,
)
from helpdesk.sla.config import BusinessHoursConfig

from conftest import at


class TestCalendar:
    def test_weekday_inside_hours_is_business(self, cfg):
        assert is_business_instant(at(0, 10), cfg)
        assert is_business_instant(at(0, 8), cfg)

    def test_end_hour_is_excluded(self, cfg):
        assert not is_business_instant(at(0, 18), cfg)
        assert not is_business_instant(at(0, 7, 59), cfg)

    def test_weekend_is_not_business(self, cfg):
        assert not is_working_day(date(2024, 1, 13), cfg)
        assert not is_business_instant(at(5, 10), cfg)

    def test_uses_global_config_when_omitted(self):
        assert is_business_instant(at(0, 10))

    def test_next_business_instant_before_opening(self, cfg):
        assert next_business_instant(at(0, 7), cfg) == at(0, 8)

    def test_next_business_instant_after_closing_friday(self, cfg):
        assert next_business_instant(at(4, 19), cfg) == at(7, 8)

    def test_next_business_instant_on_saturday(self, cfg):
        assert next_business_instant(at(5, 12), cfg) == at(7, 8)

    def test_next_business_instant_is_idempotent(self, cfg):
        for moment in (at(0, 10), at(0, 7), at(4, 20), at(6, 3)):
            once = next_business_instant(moment, cfg)
            assert next_business_instant(once, cfg) == once

    def test_next_business_instant_keeps_timezone(self, cfg):
        tz = timezone(timedelta(hours=-3))
        moment = datetime(2024, 1, 13, 10, tzinfo=tz)
        assert next_business_instant(moment, cfg) == datetime(2024, 1, 15, 8, tzinfo=tz)


class TestBusinessDuration:
    def test_same_day(self, cfg):
        assert business_duration(at(0, 10), at(0, 12), cfg) == 2 * HOUR

    def test_overnight(self, cfg):
        assert business_duration(at(0, 17), at(1, 9), cfg) == 2 * HOUR

    def test_over_weekend(self, cfg):
        assert business_duration(at(4, 17), at(7, 9), cfg) == 2 * HOUR

    def test_full_week(self, cfg):
        assert business_duration(at(0, 0), at(7, 0), cfg) == 50 * HOUR

    def test_invalid_interval_is_zero(self, cfg):
        assert business_duration(at(0, 12), at(0, 10), cfg) == timedelta(0)
        assert business_duration(at(0, 12), at(0, 12), cfg) == timedelta(0)

    def test_outside_hours_is_zero(self, cfg):
        assert business_duration(at(0, 19), at(0, 23), cfg) == timedelta(0)

    def test_is_monotonic(self, cfg):
        start = at(0, 9, 30)
        previous = timedelta(0)
        for step in range(0, 24 * 9, 3):
            current = business_duration(start, start + timedelta(hours=step), cfg)
            assert current >= previous
            previous = current

    def test_holidays_are_skipped(self):
        cfg = BusinessHoursConfig(holidays={date(2024, 1, 9)})
        assert business_duration(at(0, 17), at(2, 9), cfg) == 2 * HOUR

    def test_aware_datetimes(self, cfg):
        tz = timezone(timedelta(hours=-3))
        start = datetime(2024, 1, 8, 10, tzinfo=tz)
        end = datetime(2024, 1, 8, 15, tzinfo=timezone.utc)  # 12:00 em -03
        assert business_duration(start, end, cfg) == 2 * HOUR


class TestAddBusinessDuration:
    def test_within_same_day(self, cfg):
        assert add_business_duration(at(0, 10), 4, cfg) == at(0, 14)

    def test_rolls_over_weekend(self, cfg):
        assert add_business_duration(at(4, 17), 2, cfg) == at(7, 9)

    def test_start_outside_hours_snaps_forward(self, cfg):
        assert add_business_duration(at(5, 10), 1, cfg) == at(7, 9)

    def test_ends_exactly_at_closing(self, cfg):
        assert add_business_duration(at(0, 8), 10, cfg) == at(0, 18)

    def test_fractional_hours(self, cfg):
        assert add_business_duration(at(0, 17, 30), 1.5, cfg) == at(1, 9)

    def test_zero_hours_returns_next_business_instant(self, cfg):
        assert add_business_duration(at(0, 20), 0, cfg) == at(1, 8)

    @pytest.mark.parametrize("start", [at(0, 10), at(0, 17, 45), at(4, 16), at(5, 11), at(2, 6)])
    @pytest.mark.parametrize("hours", [0.25, 1, 4, 9.5, 23, 61])
    def test_round_trip(self, cfg, start, hours):
        due = add_business_duration(start, hours, cfg)
        assert business_duration(start, due, cfg) == timedelta(hours=hours)

    def test_single_work_day_calendar(self):
        cfg = BusinessHoursConfig(start_hour=9, end_hour=17, work_days={2})
        due = add_business_duration(at(0, 10), 10, cfg)
        assert due == datetime(2024, 1, 17, 11)
        assert business_duration(at(0, 10), due, cfg) == 10 * HOUR
