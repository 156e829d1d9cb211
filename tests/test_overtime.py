from datetime import time

from timecard.models import DayRecord, DayType, PayPeriodTimesheet, TimeInterval
from timecard.overtime import PeriodAggregator, WeeklyThresholdRule, compute_totals, is_timesheet_blank


def week(*totals, day_type=DayType.REGULAR):
    days = [DayRecord(day_type=day_type, total=total) for total in totals]
    return days + [DayRecord() for _ in range(7 - len(days))]


def test_hourly_week_over_forty_hours_caps_period_contribution():
    totals = compute_totals(week(9, 9, 9, 9, 9), week())

    assert totals.week1_total == 45
    assert totals.overtime == 5.0
    assert totals.period_total == 40.0


def test_holiday_hours_do_not_count_toward_threshold():
    week1 = week(9, 9, 9, 9, 9)
    week1[5] = DayRecord(day_type=DayType.HOLIDAY, total=8.0)

    totals = compute_totals(week1, week())

    assert totals.week1_holiday == 8.0
    assert totals.overtime == 5.0
    assert totals.period_total == 48.0


def test_salary_mode_has_no_overtime():
    totals = compute_totals(week(10, 10, 10, 10, 10), week(9.5, 9.5, 9.5, 9.5), salary_mode=True)

    assert totals.week1_total == 50
    assert totals.week2_total == 38
    assert totals.period_total == 88
    assert totals.overtime == 0


def test_unset_day_totals_count_as_zero():
    totals = PeriodAggregator().compute_totals(week(None, 4, None), week(None), personal_leave=3)

    assert totals.period_total == 4
    assert totals.personal_leave == 3


def test_weekly_rule_threshold_is_configurable():
    rule = WeeklyThresholdRule(threshold=37.5)

    assert rule.classify_week(40, 0) == (37.5, 2.5)


def test_blank_timesheet_detection():
    timesheet = PayPeriodTimesheet()
    assert is_timesheet_blank(timesheet)
    assert is_timesheet_blank(None)

    timesheet.week2[3].day_type = DayType.HOLIDAY
    assert not is_timesheet_blank(timesheet)


def test_any_interval_endpoint_or_leave_makes_timesheet_non_blank():
    started = PayPeriodTimesheet()
    started.week1[0].intervals[0] = TimeInterval(start=time(9, 0))
    assert not is_timesheet_blank(started)

    with_leave = PayPeriodTimesheet(personal_leave=2)
    assert not is_timesheet_blank(with_leave)
