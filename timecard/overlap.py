from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from .intervals import to_minutes
from .models import TimeInterval


def ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open ranges in minutes; touching endpoints do not overlap."""
    return start1 < end2 and start2 < end1


def find_overlap(intervals: Iterable[TimeInterval]) -> Optional[Tuple[int, int]]:
    """Return the positions of the first conflicting pair, if any.

    Incomplete intervals are skipped. Minutes are compared as entered, without
    overnight normalization.
    """
    ranges: List[Tuple[int, int, int]] = [
        (position, to_minutes(interval.start), to_minutes(interval.stop))
        for position, interval in enumerate(intervals)
        if interval.is_complete
    ]
    for i in range(len(ranges)):
        for j in range(i + 1, len(ranges)):
            first, second = ranges[i], ranges[j]
            if ranges_overlap(first[1], first[2], second[1], second[2]):
                return first[0], second[0]
    return None


def has_conflict(intervals: Iterable[TimeInterval]) -> bool:
    return find_overlap(intervals) is not None


def validate_day(intervals: Iterable[TimeInterval]) -> bool:
    """True when the day's complete intervals are conflict free."""
    return not has_conflict(intervals)
