from .supervisor import Supervisor, SupervisorSession
from .timesheet import TimesheetSubmission

__all__ = ["Supervisor", "SupervisorSession", "TimesheetSubmission"]
