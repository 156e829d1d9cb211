"""Timesheet state, edit events and the controller that persists them.

Edits are plain event objects applied by ``reduce``, which never mutates its
input. ``TimesheetController`` owns the current state and re-arms the
debounced save after every successful edit.
"""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, Optional, Type

from .clock import clock_in, clock_out
from .core.config import Settings
from .core.logging import get_logger
from .day import apply_day
from .errors import TimecardError
from .intervals import TimeLike, parse_time_of_day
from .models import (
    DayRecord,
    DayType,
    ManualHoursEntry,
    PayPeriod,
    PayPeriodTimesheet,
    PeriodTotals,
    TEMPLATE_LABEL,
    TimeInterval,
    blank_week,
)
from .overtime import PeriodAggregator, is_timesheet_blank
from .pay_periods import week_date_labels
from .preferences import Preferences, PreferencesStore
from .scheduler import Debouncer, Scheduler, TimerScheduler
from .storage import SaveResult, TimesheetStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class TimesheetState:
    period: PayPeriod
    timesheet: PayPeriodTimesheet
    totals: PeriodTotals


# Events. ``day`` is the period day index, 0-13.


@dataclass(frozen=True)
class SetInterval:
    day: int
    position: int
    start: TimeLike = None
    stop: TimeLike = None


@dataclass(frozen=True)
class AddInterval:
    day: int


@dataclass(frozen=True)
class RemoveInterval:
    day: int
    position: int


@dataclass(frozen=True)
class AddManualEntry:
    day: int
    amount: Optional[float] = None
    description: str = ""


@dataclass(frozen=True)
class UpdateManualEntry:
    day: int
    position: int
    amount: Optional[float] = None
    description: str = ""


@dataclass(frozen=True)
class RemoveManualEntry:
    day: int
    position: int


@dataclass(frozen=True)
class SetDayType:
    day: int
    day_type: DayType


@dataclass(frozen=True)
class SetPersonalLeave:
    amount: float


@dataclass(frozen=True)
class SetEmployeeName:
    name: str


@dataclass(frozen=True)
class ClockIn:
    now: datetime


@dataclass(frozen=True)
class ClockOut:
    now: datetime


def _parse_time(value: TimeLike):
    try:
        return parse_time_of_day(value)
    except ValueError as exc:
        raise TimecardError(f"Invalid time {value!r}, expected HH:MM") from exc


def _check_amount(amount: Optional[float]) -> Optional[float]:
    if amount is not None and amount < 0:
        raise TimecardError("Hours must be non-negative")
    return amount


def _day(timesheet: PayPeriodTimesheet, index: int) -> DayRecord:
    try:
        return timesheet.day(index)
    except IndexError as exc:
        raise TimecardError(str(exc)) from exc


def _item(items: list, position: int, what: str):
    if not 0 <= position < len(items):
        raise TimecardError(f"No {what} at position {position}")
    return items[position]


def _set_interval(timesheet: PayPeriodTimesheet, event: SetInterval) -> DayRecord:
    day = _day(timesheet, event.day)
    if event.position == len(day.intervals):
        day.intervals.append(TimeInterval())
    interval = _item(day.intervals, event.position, "time entry")
    interval.start = _parse_time(event.start)
    interval.stop = _parse_time(event.stop)
    return day


def _add_interval(timesheet: PayPeriodTimesheet, event: AddInterval) -> DayRecord:
    day = _day(timesheet, event.day)
    day.intervals.append(TimeInterval())
    return day


def _remove_interval(timesheet: PayPeriodTimesheet, event: RemoveInterval) -> DayRecord:
    day = _day(timesheet, event.day)
    _item(day.intervals, event.position, "time entry")
    del day.intervals[event.position]
    if not day.intervals:
        # A day always offers one entry row.
        day.intervals.append(TimeInterval())
    return day


def _add_manual_entry(timesheet: PayPeriodTimesheet, event: AddManualEntry) -> DayRecord:
    day = _day(timesheet, event.day)
    day.manual_entries.append(ManualHoursEntry(amount=_check_amount(event.amount), description=event.description))
    return day


def _update_manual_entry(timesheet: PayPeriodTimesheet, event: UpdateManualEntry) -> DayRecord:
    day = _day(timesheet, event.day)
    entry = _item(day.manual_entries, event.position, "hours entry")
    entry.amount = _check_amount(event.amount)
    entry.description = event.description
    return day


def _remove_manual_entry(timesheet: PayPeriodTimesheet, event: RemoveManualEntry) -> DayRecord:
    day = _day(timesheet, event.day)
    _item(day.manual_entries, event.position, "hours entry")
    del day.manual_entries[event.position]
    return day


def _set_day_type(timesheet: PayPeriodTimesheet, event: SetDayType) -> DayRecord:
    day = _day(timesheet, event.day)
    try:
        day.day_type = DayType(event.day_type)
    except ValueError as exc:
        raise TimecardError(f"Unknown day type {event.day_type!r}") from exc
    return day


DayHandler = Callable[[PayPeriodTimesheet, object], DayRecord]

_DAY_HANDLERS: Dict[Type, DayHandler] = {
    SetInterval: _set_interval,
    AddInterval: _add_interval,
    RemoveInterval: _remove_interval,
    AddManualEntry: _add_manual_entry,
    UpdateManualEntry: _update_manual_entry,
    RemoveManualEntry: _remove_manual_entry,
    SetDayType: _set_day_type,
}


def reduce(state: TimesheetState, event: object, aggregator: Optional[PeriodAggregator] = None) -> TimesheetState:
    """Apply ``event`` to ``state`` and return the new state.

    Raises ``TimecardError`` (``ClockError`` for clock events) when the event
    cannot be applied; ``state`` is left untouched either way.
    """
    aggregator = aggregator or PeriodAggregator()

    if isinstance(event, ClockIn):
        timesheet = clock_in(state.timesheet, state.period, event.now)
    elif isinstance(event, ClockOut):
        timesheet = clock_out(state.timesheet, state.period, event.now)
    elif isinstance(event, SetPersonalLeave):
        if event.amount < 0:
            raise TimecardError("Personal leave must be non-negative")
        timesheet = replace(deepcopy(state.timesheet), personal_leave=float(event.amount))
    elif isinstance(event, SetEmployeeName):
        timesheet = replace(deepcopy(state.timesheet), employee_name=event.name)
    else:
        handler = _DAY_HANDLERS.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event {event!r}")
        timesheet = deepcopy(state.timesheet)
        apply_day(handler(timesheet, event))

    return TimesheetState(period=state.period, timesheet=timesheet, totals=aggregator.totals_for(timesheet))


def blank_timesheet(period: PayPeriod, employee_name: str = "") -> PayPeriodTimesheet:
    week1_dates, week2_dates = week_date_labels(period)
    timesheet = PayPeriodTimesheet(
        employee_name=employee_name,
        pay_period_label=period.label,
        week1=blank_week(week1_dates),
        week2=blank_week(week2_dates),
    )
    for day in timesheet.days():
        apply_day(day)
    return timesheet


def fill_from_template(template: PayPeriodTimesheet, period: PayPeriod, employee_name: str = "") -> PayPeriodTimesheet:
    """Copy the template's entries into ``period``, keeping the period's own dates and label."""
    week1_dates, week2_dates = week_date_labels(period)
    timesheet = deepcopy(template)
    for day, value in zip(timesheet.week1 + timesheet.week2, week1_dates + week2_dates):
        day.date = value
    timesheet.pay_period_label = period.label
    timesheet.employee_name = template.employee_name or employee_name
    return timesheet


class TimesheetController:
    """Owns the selected period's state and its debounced persistence."""

    def __init__(
        self,
        store: TimesheetStore,
        preferences: PreferencesStore,
        scheduler: Optional[Scheduler] = None,
        autosave_delay: float = 1.0,
    ) -> None:
        self.store = store
        self.preferences = preferences
        self.debouncer = Debouncer(scheduler or TimerScheduler(), autosave_delay, self.save)
        self.aggregator = PeriodAggregator()
        self.state: Optional[TimesheetState] = None
        self.last_save: Optional[SaveResult] = None

    @classmethod
    def from_settings(cls, settings: Settings, scheduler: Optional[Scheduler] = None) -> "TimesheetController":
        return cls(
            TimesheetStore(settings.saves_dir),
            PreferencesStore(settings.preferences_path),
            scheduler=scheduler,
            autosave_delay=settings.autosave_delay_seconds,
        )

    @property
    def timesheet(self) -> PayPeriodTimesheet:
        return self._require_state().timesheet

    @property
    def totals(self) -> PeriodTotals:
        return self._require_state().totals

    def _require_state(self) -> TimesheetState:
        if self.state is None:
            raise TimecardError("No pay period selected")
        return self.state

    def select_period(self, period: PayPeriod) -> TimesheetState:
        """Load the saved timesheet for ``period``, or start a new one.

        A missing or blank saved timesheet is replaced by the template when
        auto-fill is enabled, otherwise by a blank timesheet.
        """
        if self.state is not None:
            self.flush()

        preferences = self.preferences.load()
        self.aggregator = PeriodAggregator(salary_mode=preferences.salary_mode)

        timesheet = self.store.load(period.label)
        if is_timesheet_blank(timesheet):
            timesheet = self._new_timesheet(period, preferences, existing=timesheet)
            source = "new"
        else:
            timesheet.pay_period_label = period.label
            source = "saved"

        self.state = TimesheetState(period=period, timesheet=timesheet, totals=self.aggregator.totals_for(timesheet))
        logger.info("period_selected", period=period.label, source=source, salary_mode=preferences.salary_mode)
        return self.state

    def _new_timesheet(
        self,
        period: PayPeriod,
        preferences: Preferences,
        existing: Optional[PayPeriodTimesheet] = None,
    ) -> PayPeriodTimesheet:
        employee_name = (existing.employee_name if existing else "") or preferences.employee_name
        if period.label != TEMPLATE_LABEL and preferences.auto_fill_from_template:
            template = self.store.load(TEMPLATE_LABEL)
            if template is not None:
                logger.info("template_applied", period=period.label)
                return fill_from_template(template, period, employee_name)
        return blank_timesheet(period, employee_name)

    def dispatch(self, event: object) -> TimesheetState:
        """Apply ``event``, then re-arm the debounced save."""
        self.state = reduce(self._require_state(), event, self.aggregator)
        self.debouncer.trigger()
        return self.state

    def save(self) -> SaveResult:
        state = self._require_state()
        result = self.store.save(state.period.label, state.timesheet)
        self.last_save = result
        if not result.success:
            logger.warning("autosave_failed", period=state.period.label, error=result.error)
        return result

    def flush(self) -> Optional[SaveResult]:
        """Run a pending debounced save now; None when nothing was pending."""
        if self.debouncer.flush():
            return self.last_save
        return None
