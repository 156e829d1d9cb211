from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .models import REGULAR_HOURS_PER_WEEK, DayRecord, DayType, PayPeriodTimesheet, PeriodTotals


@dataclass
class WeeklyThresholdRule:
    """Weekly overtime basis; holiday hours are paid but never count toward the threshold."""

    threshold: float = REGULAR_HOURS_PER_WEEK

    def classify_week(self, total_hours: float, holiday_hours: float) -> Tuple[float, float]:
        """Return (hours counted toward the period total, overtime hours)."""
        regular = total_hours - holiday_hours
        overtime = max(0.0, regular - self.threshold)
        return holiday_hours + min(regular, self.threshold), overtime


def week_total(days: Iterable[DayRecord]) -> float:
    return round(sum(day.total or 0.0 for day in days), 2)


def holiday_total(days: Iterable[DayRecord]) -> float:
    return round(sum(day.total or 0.0 for day in days if day.day_type is DayType.HOLIDAY), 2)


class PeriodAggregator:
    def __init__(self, weekly_rule: WeeklyThresholdRule | None = None, salary_mode: bool = False) -> None:
        self.weekly_rule = weekly_rule or WeeklyThresholdRule()
        self.salary_mode = salary_mode

    def compute_totals(
        self,
        week1: Sequence[DayRecord],
        week2: Sequence[DayRecord],
        personal_leave: float = 0.0,
    ) -> PeriodTotals:
        week1_total, week2_total = week_total(week1), week_total(week2)
        week1_holiday, week2_holiday = holiday_total(week1), holiday_total(week2)

        if self.salary_mode:
            # Overtime is not tracked for salaried employees.
            period_total = week1_total + week2_total
            overtime = 0.0
        else:
            counted1, overtime1 = self.weekly_rule.classify_week(week1_total, week1_holiday)
            counted2, overtime2 = self.weekly_rule.classify_week(week2_total, week2_holiday)
            period_total = counted1 + counted2
            overtime = overtime1 + overtime2

        return PeriodTotals(
            week1_total=week1_total,
            week2_total=week2_total,
            week1_holiday=week1_holiday,
            week2_holiday=week2_holiday,
            period_total=round(period_total, 2),
            overtime=round(overtime, 2),
            personal_leave=personal_leave,
        )

    def totals_for(self, timesheet: PayPeriodTimesheet) -> PeriodTotals:
        return self.compute_totals(timesheet.week1, timesheet.week2, timesheet.personal_leave)


def compute_totals(
    week1: Sequence[DayRecord],
    week2: Sequence[DayRecord],
    personal_leave: float = 0.0,
    salary_mode: bool = False,
) -> PeriodTotals:
    return PeriodAggregator(salary_mode=salary_mode).compute_totals(week1, week2, personal_leave)


def is_timesheet_blank(timesheet: PayPeriodTimesheet | None) -> bool:
    """Blank means nothing but the name and dates has been filled in."""
    if timesheet is None:
        return True
    for day in timesheet.days():
        if any(interval.start is not None or interval.stop is not None for interval in day.intervals):
            return False
        if day.day_type is not DayType.REGULAR:
            return False
    return timesheet.personal_leave <= 0
