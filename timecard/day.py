from __future__ import annotations
from typing import Iterable, List, NamedTuple, Optional, Sequence

from .core.logging import get_logger
from .intervals import duration, format_range_for_print
from .models import FIXED_HOURS, DayRecord, DayType, ManualHoursEntry, TimeInterval
from .overlap import has_conflict

logger = get_logger(__name__)

FIXED_SUMMARIES = {
    DayType.HOLIDAY: "Holiday",
    DayType.CALLED_OFF: "Called off",
    DayType.VACATION: "Vacation/Time Off",
}
OFFICE_CLOSED_NOTE = "Office closed early"
ON_CALL_NOTE = "On Call"


class DayResult(NamedTuple):
    total: Optional[float]
    summary: str


def format_hours(amount: float) -> str:
    """Shortest decimal form: 2.0 -> "2", 1.50 -> "1.5"."""
    return ("%f" % amount).rstrip("0").rstrip(".")


def _manual_entry_text(entry: ManualHoursEntry) -> str:
    text = f"{format_hours(entry.amount)}h"
    return f"{text} {entry.description}" if entry.description else text


def _with_note(text: str, note: str) -> str:
    return f"{text}\n{note}" if text else note


def compute_day(
    day_type: DayType | str,
    intervals: Sequence[TimeInterval],
    manual_entries: Iterable[ManualHoursEntry] = (),
) -> DayResult:
    day_type = DayType(day_type)
    ranges = [format_range_for_print(interval) for interval in intervals if interval.is_complete]

    if day_type in FIXED_SUMMARIES:
        return DayResult(FIXED_HOURS[day_type], FIXED_SUMMARIES[day_type])
    if day_type is DayType.OFFICE_CLOSED:
        return DayResult(FIXED_HOURS[day_type], _with_note(" ".join(ranges), OFFICE_CLOSED_NOTE))

    filled: List[ManualHoursEntry] = [entry for entry in manual_entries if entry.has_value]
    total = sum(duration(interval) for interval in intervals) + sum(entry.amount for entry in filled)
    text = " ".join(ranges + [_manual_entry_text(entry) for entry in filled])

    if day_type is DayType.ON_CALL:
        return DayResult(round(total, 2), _with_note(text, ON_CALL_NOTE))

    # Regular day: nothing entered is reported as unset rather than zero.
    if not ranges and not filled:
        return DayResult(None, text)
    return DayResult(round(total, 2), text)


def apply_day(record: DayRecord) -> DayRecord:
    """Recompute a record's derived fields in place and return it."""
    result = compute_day(record.day_type, record.intervals, record.manual_entries)
    record.total = result.total
    record.summary = result.summary
    record.has_conflict = has_conflict(record.intervals)
    if record.has_conflict:
        logger.info("day_conflict", date=record.date, day_type=record.day_type.value)
    return record
