from datetime import datetime, time

import pytest

from timecard.clock import ClockState, clock_in, clock_out, round_to_quarter_hour, state_for
from timecard.controller import blank_timesheet
from timecard.errors import ClockError
from timecard.intervals import duration
from timecard.models import TimeInterval
from timecard.pay_periods import EPOCH, make_period

PERIOD = make_period(EPOCH, is_current=True)
MONDAY_MORNING = datetime(2025, 11, 3, 9, 7)
MONDAY_EVENING = datetime(2025, 11, 3, 17, 8)


def test_round_to_quarter_hour_half_up():
    assert round_to_quarter_hour(datetime(2025, 11, 3, 9, 7)) == datetime(2025, 11, 3, 9, 0)
    assert round_to_quarter_hour(datetime(2025, 11, 3, 9, 8)) == datetime(2025, 11, 3, 9, 15)
    assert round_to_quarter_hour(datetime(2025, 11, 3, 9, 53, 59)) == datetime(2025, 11, 3, 10, 0)


def test_clock_in_then_out_records_rounded_interval():
    timesheet = blank_timesheet(PERIOD)

    started = clock_in(timesheet, PERIOD, MONDAY_MORNING)
    assert state_for(started, PERIOD, MONDAY_MORNING) is ClockState.CLOCKED_IN
    assert started.day(1).intervals[0].start == time(9, 0)

    finished = clock_out(started, PERIOD, MONDAY_EVENING)
    interval = finished.day(1).intervals[0]
    assert interval == TimeInterval(time(9, 0), time(17, 15))
    assert finished.day(1).total == duration(interval) == 8.25
    assert state_for(finished, PERIOD, MONDAY_EVENING) is ClockState.CLOCKED_OUT


def test_clock_in_does_not_mutate_input():
    timesheet = blank_timesheet(PERIOD)

    clock_in(timesheet, PERIOD, MONDAY_MORNING)

    assert timesheet.day(1).intervals == [TimeInterval()]


def test_clock_in_appends_when_no_empty_interval():
    timesheet = blank_timesheet(PERIOD)
    timesheet.day(1).intervals[0] = TimeInterval(time(7, 0), time(8, 0))

    started = clock_in(timesheet, PERIOD, MONDAY_MORNING)

    assert len(started.day(1).intervals) == 2
    assert started.day(1).intervals[1].start == time(9, 0)


def test_double_clock_in_is_rejected():
    started = clock_in(blank_timesheet(PERIOD), PERIOD, MONDAY_MORNING)

    with pytest.raises(ClockError, match="You are already clocked in!"):
        clock_in(started, PERIOD, MONDAY_EVENING)


def test_clock_out_without_clock_in_is_rejected():
    with pytest.raises(ClockError, match="You are not clocked in!"):
        clock_out(blank_timesheet(PERIOD), PERIOD, MONDAY_EVENING)


def test_clock_outside_period_is_rejected():
    outside = datetime(2025, 12, 25, 9, 0)

    with pytest.raises(ClockError, match="Cannot clock in - not within current pay period"):
        clock_in(blank_timesheet(PERIOD), PERIOD, outside)
    with pytest.raises(ClockError, match="Cannot clock out - not within current pay period"):
        clock_out(blank_timesheet(PERIOD), PERIOD, outside)
