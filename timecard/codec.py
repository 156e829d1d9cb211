"""JSON wire format for timesheets, shared by the local store and the approval service.

Day-type tags and the ``"HH:MM"`` / ``""`` time encoding are part of the
contract. Totals are written for readers of the files but recomputed on load.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .day import apply_day
from .errors import CodecError
from .intervals import format_time_of_day, parse_time_of_day
from .models import DAYS_PER_WEEK, DayRecord, DayType, ManualHoursEntry, PayPeriodTimesheet, TimeInterval

Payload = Dict[str, Any]


def day_to_dict(day: DayRecord) -> Payload:
    return {
        "date": day.date,
        "dayType": day.day_type.value,
        "timePairs": [
            {"start": format_time_of_day(interval.start), "stop": format_time_of_day(interval.stop)}
            for interval in day.intervals
        ],
        "hoursEntries": [
            {"hours": entry.amount if entry.amount is not None else "", "description": entry.description}
            for entry in day.manual_entries
        ],
        "total": day.total or 0,
    }


def timesheet_to_dict(timesheet: PayPeriodTimesheet) -> Payload:
    return {
        "employeeName": timesheet.employee_name,
        "payPeriod": timesheet.pay_period_label,
        "week1": [day_to_dict(day) for day in timesheet.week1],
        "week2": [day_to_dict(day) for day in timesheet.week2],
        "personalLeave": timesheet.personal_leave,
    }


def _parse_amount(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise CodecError(f"Invalid hours amount {value!r}") from exc
    if not math.isfinite(amount):
        raise CodecError(f"Invalid hours amount {value!r}")
    if amount < 0:
        raise CodecError(f"Hours amount must be non-negative, got {amount}")
    return amount


def _parse_time(value: Any):
    if value is not None and not isinstance(value, str):
        raise CodecError(f"Invalid time value {value!r}")
    try:
        return parse_time_of_day(value)
    except ValueError as exc:
        raise CodecError(f"Invalid time value {value!r}") from exc


def _objects(items: Any, name: str) -> List[Payload]:
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise CodecError(f"{name} must be a list of objects")
    return items


def day_from_dict(data: Payload) -> DayRecord:
    if not isinstance(data, dict):
        raise CodecError("Day entry must be an object")
    try:
        day_type = DayType(data.get("dayType") or DayType.REGULAR.value)
    except ValueError as exc:
        raise CodecError(f"Unknown day type {data.get('dayType')!r}") from exc

    pairs = data.get("timePairs")
    if pairs is None:
        intervals = [TimeInterval()]
    else:
        intervals = [
            TimeInterval(start=_parse_time(pair.get("start")), stop=_parse_time(pair.get("stop")))
            for pair in _objects(pairs, "timePairs")
        ]

    entries = [
        ManualHoursEntry(amount=_parse_amount(entry.get("hours")), description=entry.get("description") or "")
        for entry in _objects(data.get("hoursEntries") or [], "hoursEntries")
    ]
    day = DayRecord(date=data.get("date") or "", day_type=day_type, intervals=intervals, manual_entries=entries)
    return apply_day(day)


def _week_from_list(days: Any, name: str) -> List[DayRecord]:
    if days is None:
        days = []
    if not isinstance(days, list):
        raise CodecError(f"{name} must be a list of days")
    if len(days) > DAYS_PER_WEEK:
        raise CodecError(f"{name} holds {len(days)} days, expected at most {DAYS_PER_WEEK}")
    week = [day_from_dict(day or {}) for day in days]
    week.extend(apply_day(DayRecord()) for _ in range(DAYS_PER_WEEK - len(week)))
    return week


def timesheet_from_dict(data: Payload) -> PayPeriodTimesheet:
    if not isinstance(data, dict):
        raise CodecError("Timesheet payload must be an object")
    leave = _parse_amount(data.get("personalLeave")) or 0.0
    return PayPeriodTimesheet(
        employee_name=data.get("employeeName") or "",
        pay_period_label=data.get("payPeriod") or "",
        week1=_week_from_list(data.get("week1"), "week1"),
        week2=_week_from_list(data.get("week2"), "week2"),
        personal_leave=leave,
    )
