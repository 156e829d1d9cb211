"""Timesheet entry, time accounting and approval workflow."""

__version__ = "0.1.0"
