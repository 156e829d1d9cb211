from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

DAYS_PER_WEEK = 7
DAYS_PER_PERIOD = 14
REGULAR_HOURS_PER_WEEK = 40.0
TEMPLATE_LABEL = "Template"


class DayType(str, Enum):
    REGULAR = "regular"
    ON_CALL = "on-call"
    HOLIDAY = "holiday"
    CALLED_OFF = "called-off"
    OFFICE_CLOSED = "office-closed"
    VACATION = "vacation"


# Day types whose total is set directly instead of computed from entries.
FIXED_HOURS: Dict[DayType, float] = {
    DayType.HOLIDAY: 8.0,
    DayType.CALLED_OFF: 0.0,
    DayType.VACATION: 0.0,
    DayType.OFFICE_CLOSED: 8.0,
}


@dataclass
class TimeInterval:
    start: Optional[time] = None
    stop: Optional[time] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.stop is not None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.stop is None

    @property
    def is_open(self) -> bool:
        """Started but not yet stopped, i.e. clocked in."""
        return self.start is not None and self.stop is None


@dataclass
class ManualHoursEntry:
    amount: Optional[float] = None
    description: str = ""

    @property
    def has_value(self) -> bool:
        return self.amount is not None


@dataclass
class DayRecord:
    date: str = ""
    day_type: DayType = DayType.REGULAR
    intervals: List[TimeInterval] = field(default_factory=lambda: [TimeInterval()])
    manual_entries: List[ManualHoursEntry] = field(default_factory=list)
    total: Optional[float] = None
    # Derived on every recompute, never persisted.
    summary: str = ""
    has_conflict: bool = False


Week = List[DayRecord]


def blank_week(dates: Optional[List[str]] = None) -> Week:
    dates = dates or [""] * DAYS_PER_WEEK
    return [DayRecord(date=dates[i]) for i in range(DAYS_PER_WEEK)]


@dataclass
class PayPeriodTimesheet:
    employee_name: str = ""
    pay_period_label: str = ""
    week1: Week = field(default_factory=blank_week)
    week2: Week = field(default_factory=blank_week)
    personal_leave: float = 0.0

    def __post_init__(self) -> None:
        for name in ("week1", "week2"):
            week = getattr(self, name)
            if len(week) != DAYS_PER_WEEK:
                raise ValueError(f"{name} must hold exactly {DAYS_PER_WEEK} days, got {len(week)}")
        if self.personal_leave < 0:
            raise ValueError("personal_leave must be non-negative")

    @property
    def is_template(self) -> bool:
        return self.pay_period_label == TEMPLATE_LABEL

    def day(self, index: int) -> DayRecord:
        week, day = locate_day(index)
        return (self.week1 if week == 1 else self.week2)[day]

    def days(self) -> Iterator[DayRecord]:
        yield from self.week1
        yield from self.week2


def locate_day(index: int) -> Tuple[int, int]:
    """Map a period day index (0-13) to (week number, day within week)."""
    if not 0 <= index < DAYS_PER_PERIOD:
        raise IndexError(f"Day index {index} outside pay period")
    return (1, index) if index < DAYS_PER_WEEK else (2, index - DAYS_PER_WEEK)


@dataclass(frozen=True)
class PayPeriod:
    start: Optional[date]
    end: Optional[date]
    label: str
    is_current: bool = False

    @property
    def is_template(self) -> bool:
        return self.start is None


@dataclass(frozen=True)
class PeriodTotals:
    week1_total: float = 0.0
    week2_total: float = 0.0
    week1_holiday: float = 0.0
    week2_holiday: float = 0.0
    period_total: float = 0.0
    overtime: float = 0.0
    personal_leave: float = 0.0
