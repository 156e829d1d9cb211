from __future__ import annotations


class TimecardError(Exception):
    """Base class for timecard domain errors."""


class ClockError(TimecardError):
    """Clock in/out rejected; the message is shown to the user as-is."""


class CodecError(TimecardError):
    """A persisted or submitted timesheet payload could not be decoded."""
