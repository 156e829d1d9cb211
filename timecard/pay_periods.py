"""Fixed 14-day pay-period calendar anchored on a known period start."""
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Tuple

from .models import DAYS_PER_PERIOD, DAYS_PER_WEEK, TEMPLATE_LABEL, PayPeriod

EPOCH = date(2025, 11, 2)  # a Sunday; periods run Sunday through the second Saturday
PERIOD_LENGTH = timedelta(days=DAYS_PER_PERIOD)
CANDIDATE_OFFSETS = range(-3, 3)  # three past, current, two upcoming

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

TEMPLATE_PERIOD = PayPeriod(start=None, end=None, label=TEMPLATE_LABEL, is_current=False)


def format_label_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def format_day_date(value: date) -> str:
    """Date string stored on each day record, e.g. ``11/02/2025 Sun``."""
    return f"{value.month:02d}/{value.day:02d}/{value.year} {DAY_NAMES[value.weekday()]}"


def period_containing(reference: date, epoch: date = EPOCH) -> date:
    """Start date of the period that contains ``reference``."""
    periods = (reference - epoch).days // DAYS_PER_PERIOD
    return epoch + periods * PERIOD_LENGTH


def make_period(start: date, is_current: bool = False) -> PayPeriod:
    end = start + timedelta(days=DAYS_PER_PERIOD - 1)
    return PayPeriod(
        start=start,
        end=end,
        label=f"{format_label_date(start)} - {format_label_date(end)}",
        is_current=is_current,
    )


def candidate_periods(reference: Optional[date] = None, epoch: date = EPOCH) -> List[PayPeriod]:
    """Template pseudo-period followed by the selectable dated periods."""
    reference = reference or date.today()
    current_start = period_containing(reference, epoch)
    periods = [TEMPLATE_PERIOD]
    for offset in CANDIDATE_OFFSETS:
        periods.append(make_period(current_start + offset * PERIOD_LENGTH, is_current=offset == 0))
    return periods


def current_period(reference: Optional[date] = None, epoch: date = EPOCH) -> PayPeriod:
    return make_period(period_containing(reference or date.today(), epoch), is_current=True)


def find_period(label: str, reference: Optional[date] = None) -> Optional[PayPeriod]:
    for period in candidate_periods(reference):
        if period.label == label:
            return period
    return None


def day_index_within(period: PayPeriod, day: date) -> Optional[int]:
    """Offset of ``day`` from the period start, or None when outside the period."""
    if period.is_template:
        return None
    index = (day - period.start).days
    if index < 0 or index >= DAYS_PER_PERIOD:
        return None
    return index


def period_dates(period: PayPeriod) -> List[date]:
    if period.is_template:
        return []
    return [period.start + timedelta(days=offset) for offset in range(DAYS_PER_PERIOD)]


def week_date_labels(period: PayPeriod) -> Tuple[List[str], List[str]]:
    """Day-record date strings for week 1 and week 2; empty for the template."""
    if period.is_template:
        return [""] * DAYS_PER_WEEK, [""] * DAYS_PER_WEEK
    labels = [format_day_date(value) for value in period_dates(period)]
    return labels[:DAYS_PER_WEEK], labels[DAYS_PER_WEEK:]
