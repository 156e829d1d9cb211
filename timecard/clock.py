from __future__ import annotations
from copy import deepcopy
from datetime import datetime, timedelta
from enum import Enum

from .core.logging import get_logger
from .day import apply_day
from .errors import ClockError
from .models import DayRecord, PayPeriod, PayPeriodTimesheet, TimeInterval
from .pay_periods import day_index_within

logger = get_logger(__name__)

CLOCK_ROUNDING_MINUTES = 15


class ClockState(str, Enum):
    CLOCKED_OUT = "clocked-out"
    CLOCKED_IN = "clocked-in"


def round_to_quarter_hour(moment: datetime) -> datetime:
    """Round half up on the minutes component; seconds are ignored."""
    minutes = (moment.minute + CLOCK_ROUNDING_MINUTES // 2) // CLOCK_ROUNDING_MINUTES * CLOCK_ROUNDING_MINUTES
    return moment.replace(minute=0, second=0, microsecond=0) + timedelta(minutes=minutes)


def clock_state(day: DayRecord) -> ClockState:
    if any(interval.is_open for interval in day.intervals):
        return ClockState.CLOCKED_IN
    return ClockState.CLOCKED_OUT


def state_for(timesheet: PayPeriodTimesheet, period: PayPeriod, now: datetime) -> ClockState:
    index = day_index_within(period, now.date())
    if index is None:
        return ClockState.CLOCKED_OUT
    return clock_state(timesheet.day(index))


def can_clock(period: PayPeriod, now: datetime) -> bool:
    return day_index_within(period, now.date()) is not None


def clock_in(timesheet: PayPeriodTimesheet, period: PayPeriod, now: datetime) -> PayPeriodTimesheet:
    """Return a copy of ``timesheet`` with today's punch started."""
    index = day_index_within(period, now.date())
    if index is None:
        logger.info("clock_in_rejected", reason="outside_period", period=period.label)
        raise ClockError("Cannot clock in - not within current pay period")

    updated = deepcopy(timesheet)
    day = updated.day(index)
    if clock_state(day) is ClockState.CLOCKED_IN:
        logger.info("clock_in_rejected", reason="already_clocked_in", date=day.date)
        raise ClockError("You are already clocked in!")

    target = next((interval for interval in day.intervals if interval.is_empty), None)
    if target is None:
        target = TimeInterval()
        day.intervals.append(target)
    target.start = round_to_quarter_hour(now).time()
    apply_day(day)
    logger.info("clocked_in", date=day.date, start=target.start.isoformat(timespec="minutes"))
    return updated


def clock_out(timesheet: PayPeriodTimesheet, period: PayPeriod, now: datetime) -> PayPeriodTimesheet:
    """Return a copy of ``timesheet`` with the open punch stopped."""
    index = day_index_within(period, now.date())
    if index is None:
        logger.info("clock_out_rejected", reason="outside_period", period=period.label)
        raise ClockError("Cannot clock out - not within current pay period")

    updated = deepcopy(timesheet)
    day = updated.day(index)
    target = next((interval for interval in day.intervals if interval.is_open), None)
    if target is None:
        logger.info("clock_out_rejected", reason="not_clocked_in", date=day.date)
        raise ClockError("You are not clocked in!")

    target.stop = round_to_quarter_hour(now).time()
    apply_day(day)
    logger.info("clocked_out", date=day.date, stop=target.stop.isoformat(timespec="minutes"))
    return updated
