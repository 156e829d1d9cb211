"""Time-of-day handling and interval durations.

Durations are taken on the raw minutes and then rounded half up to the
nearest quarter hour. A stop earlier than its start is an overnight shift and
wraps by 24h before rounding.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Union

from .core.logging import get_logger
from .models import TimeInterval

logger = get_logger(__name__)

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR
QUARTER_HOUR_MINUTES = 15

TimeLike = Union[time, str, None]


def parse_time_of_day(value: TimeLike) -> Optional[time]:
    """Parse a wire-format ``HH:MM`` value; empty means absent."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    text = value.strip()
    if not text:
        return None
    try:
        parsed = time.fromisoformat(text)
    except ValueError:
        parsed = datetime.strptime(text, "%H:%M").time()
    return parsed.replace(second=0, microsecond=0)


def format_time_of_day(value: Optional[time]) -> str:
    if value is None:
        return ""
    return f"{value.hour:02d}:{value.minute:02d}"


def format_time_for_print(value: Optional[time]) -> str:
    """Render ``13:05`` as ``1:05PM``."""
    if value is None:
        return ""
    period = "PM" if value.hour >= 12 else "AM"
    hours12 = 12 if value.hour == 0 else value.hour - 12 if value.hour > 12 else value.hour
    return f"{hours12}:{value.minute:02d}{period}"


def format_range_for_print(interval: TimeInterval) -> str:
    return f"{format_time_for_print(interval.start)} - {format_time_for_print(interval.stop)}"


def to_minutes(value: time) -> int:
    return value.hour * MINUTES_PER_HOUR + value.minute


def round_to_quarter(minutes: int) -> int:
    """Round a non-negative span in minutes half up to a multiple of 15."""
    return (2 * minutes + QUARTER_HOUR_MINUTES) // (2 * QUARTER_HOUR_MINUTES) * QUARTER_HOUR_MINUTES


def duration_minutes(start: time, stop: time) -> int:
    span = to_minutes(stop) - to_minutes(start)
    if span < 0:
        span += MINUTES_PER_DAY
    return round_to_quarter(span)


def duration(interval: Union[TimeInterval, TimeLike], stop: TimeLike = None) -> float:
    """Hours covered by an interval, or by a ``(start, stop)`` pair.

    Returns 0 when either endpoint is missing.
    """
    if isinstance(interval, TimeInterval):
        start_time, stop_time = interval.start, interval.stop
    else:
        start_time, stop_time = parse_time_of_day(interval), parse_time_of_day(stop)
    if start_time is None or stop_time is None:
        return 0.0
    return duration_minutes(start_time, stop_time) / MINUTES_PER_HOUR


@dataclass(frozen=True)
class ParsedRange:
    start: time
    stop: time

    @property
    def hours(self) -> float:
        return duration(self.start, self.stop)

    def as_interval(self) -> TimeInterval:
        return TimeInterval(start=self.start, stop=self.stop)


@dataclass(frozen=True)
class Unparseable:
    text: str
    reason: str


RangeParseResult = Union[ParsedRange, Unparseable]

_NON_CLOCK_CHARS = re.compile(r"[^\d:]")


def _parse_clock_text(text: str) -> Optional[time]:
    lowered = text.lower()
    is_pm = "pm" in lowered
    is_am = "am" in lowered
    pieces = _NON_CLOCK_CHARS.sub("", text).split(":")
    if not pieces[0]:
        return None
    hours = int(pieces[0])
    minutes = int(pieces[1]) if len(pieces) > 1 and pieces[1] else 0
    if is_pm and hours != 12:
        hours += 12
    if is_am and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None
    return time(hours, minutes)


def parse_range(text: Optional[str]) -> RangeParseResult:
    """Parse free text such as ``"9:00 AM - 5:30 PM"``."""
    if not text or "-" not in text:
        return Unparseable(text or "", "missing separator")
    parts = [part.strip() for part in text.split("-")]
    if len(parts) != 2:
        return Unparseable(text, "expected exactly one separator")
    start = _parse_clock_text(parts[0])
    if start is None:
        return Unparseable(text, f"unreadable start time {parts[0]!r}")
    stop = _parse_clock_text(parts[1])
    if stop is None:
        return Unparseable(text, f"unreadable stop time {parts[1]!r}")
    return ParsedRange(start=start, stop=stop)


def hours_from_range(text: Optional[str]) -> float:
    result = parse_range(text)
    if isinstance(result, Unparseable):
        logger.info("range_unparseable", text=result.text, reason=result.reason)
        return 0.0
    return result.hours
