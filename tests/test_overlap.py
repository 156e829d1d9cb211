from datetime import time

from timecard.models import TimeInterval
from timecard.overlap import find_overlap, has_conflict, ranges_overlap, validate_day


def interval(start: str, stop: str) -> TimeInterval:
    return TimeInterval(time.fromisoformat(start), time.fromisoformat(stop))


def test_overlapping_ranges_conflict():
    assert has_conflict([interval("09:00", "12:00"), interval("11:00", "13:00")])
    assert not validate_day([interval("09:00", "12:00"), interval("11:00", "13:00")])


def test_touching_ranges_do_not_conflict():
    assert not has_conflict([interval("09:00", "12:00"), interval("12:00", "15:00")])
    assert validate_day([interval("09:00", "12:00"), interval("12:00", "15:00")])


def test_incomplete_intervals_are_ignored():
    day = [interval("09:00", "12:00"), TimeInterval(start=time(10, 0)), TimeInterval()]

    assert not has_conflict(day)


def test_find_overlap_reports_first_conflicting_positions():
    day = [interval("08:00", "09:00"), TimeInterval(), interval("10:00", "12:00"), interval("11:30", "12:30")]

    assert find_overlap(day) == (2, 3)


def test_overnight_interval_compared_on_raw_minutes():
    # 22:00-02:00 reads as a backwards range, so an early-morning punch does not collide with it.
    assert not has_conflict([interval("22:00", "02:00"), interval("01:00", "03:00")])
    assert ranges_overlap(600, 720, 660, 780)
