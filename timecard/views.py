from __future__ import annotations
from typing import List, Optional

from .day import format_hours
from .models import DayRecord, PayPeriod, PayPeriodTimesheet, PeriodTotals


def _total_text(total: Optional[float]) -> str:
    return "" if total is None else f"{total:.2f}"


def _day_row(index: int, day: DayRecord) -> List[str]:
    lines = (day.summary or "-").split("\n")
    flag = " !" if day.has_conflict else ""
    rows = [f"{index:>2}  {day.date or '-':<15}  {day.day_type.value:<13}  {_total_text(day.total):>6}{flag}  {lines[0]}"]
    rows.extend(f"{'':>44}{line}" for line in lines[1:])
    return rows


def format_timesheet(timesheet: PayPeriodTimesheet, totals: PeriodTotals, salary_mode: bool = False) -> str:
    rows = [
        f"Timesheet: {timesheet.employee_name or '(no name)'}",
        f"Pay period: {timesheet.pay_period_label}",
        " #  Date             Day type        Hours  Entries",
    ]
    for index, day in enumerate(timesheet.week1):
        rows.extend(_day_row(index, day))
    rows.append(f"Week 1 total: {totals.week1_total:.2f}")
    for index, day in enumerate(timesheet.week2, start=len(timesheet.week1)):
        rows.extend(_day_row(index, day))
    rows.append(f"Week 2 total: {totals.week2_total:.2f}")
    rows.append(f"Personal leave: {format_hours(totals.personal_leave)}")
    rows.append(f"Period total: {totals.period_total:.2f}")
    if not salary_mode:
        rows.append(f"Overtime: {totals.overtime:.2f}")
    if any(day.has_conflict for day in timesheet.days()):
        rows.append("! Overlapping time entries")
    return "\n".join(rows)


def format_periods(periods: List[PayPeriod]) -> str:
    rows = []
    for period in periods:
        marker = "*" if period.is_current else " "
        rows.append(f"{marker} {period.label}")
    return "\n".join(rows)
