from __future__ import annotations
import argparse
import getpass
import sys
from datetime import date, datetime
from typing import Optional

from .approval_client import TIMESHEET_STATUSES, ApiResult, ApprovalClient
from .controller import (
    AddManualEntry,
    ClockIn,
    ClockOut,
    RemoveInterval,
    RemoveManualEntry,
    SetDayType,
    SetEmployeeName,
    SetInterval,
    SetPersonalLeave,
    TimesheetController,
)
from .core.config import get_settings
from .core.logging import configure_logging
from .errors import TimecardError
from .models import DayType, PayPeriod
from .pay_periods import candidate_periods, current_period, find_period
from .preferences import PreferencesStore
from .views import format_periods, format_timesheet


def parse_moment(value: Optional[str]) -> datetime:
    return datetime.fromisoformat(value) if value else datetime.now()


def resolve_period(args: argparse.Namespace) -> PayPeriod:
    if not getattr(args, "period", None):
        return current_period()
    period = find_period(args.period, date.today())
    if period is None:
        raise TimecardError(f"Unknown pay period {args.period!r}")
    return period


def open_controller(args: argparse.Namespace) -> TimesheetController:
    controller = TimesheetController.from_settings(get_settings())
    controller.select_period(resolve_period(args))
    return controller


def apply_event(args: argparse.Namespace, event: object) -> None:
    controller = open_controller(args)
    try:
        controller.dispatch(event)
    finally:
        result = controller.flush()
    if result is not None and not result.success:
        raise TimecardError(f"Could not save timesheet: {result.error}")
    prefs = controller.preferences.load()
    print(format_timesheet(controller.timesheet, controller.totals, salary_mode=prefs.salary_mode))


def open_client(args: argparse.Namespace) -> ApprovalClient:
    settings = get_settings()
    prefs = PreferencesStore(settings.preferences_path).load()
    if not prefs.server_url:
        raise TimecardError("Server URL not configured; run `timecard prefs --server-url URL`")
    return ApprovalClient(prefs.server_url, token=prefs.supervisor_token, timeout=settings.request_timeout_seconds)


def check(result: ApiResult) -> ApiResult:
    if not result.success:
        raise TimecardError(result.error or "Request failed")
    return result


def cmd_periods(args: argparse.Namespace) -> None:
    print(format_periods(candidate_periods()))


def cmd_show(args: argparse.Namespace) -> None:
    controller = open_controller(args)
    prefs = controller.preferences.load()
    print(format_timesheet(controller.timesheet, controller.totals, salary_mode=prefs.salary_mode))


def cmd_set_time(args: argparse.Namespace) -> None:
    apply_event(args, SetInterval(day=args.day, position=args.position, start=args.start, stop=args.stop))


def cmd_remove_time(args: argparse.Namespace) -> None:
    apply_event(args, RemoveInterval(day=args.day, position=args.position))


def cmd_add_hours(args: argparse.Namespace) -> None:
    apply_event(args, AddManualEntry(day=args.day, amount=args.hours, description=args.description))


def cmd_remove_hours(args: argparse.Namespace) -> None:
    apply_event(args, RemoveManualEntry(day=args.day, position=args.position))


def cmd_day_type(args: argparse.Namespace) -> None:
    apply_event(args, SetDayType(day=args.day, day_type=DayType(args.day_type)))


def cmd_leave(args: argparse.Namespace) -> None:
    apply_event(args, SetPersonalLeave(amount=args.hours))


def cmd_name(args: argparse.Namespace) -> None:
    apply_event(args, SetEmployeeName(name=args.name))


def cmd_clock_in(args: argparse.Namespace) -> None:
    args.period = None
    apply_event(args, ClockIn(now=parse_moment(args.at)))


def cmd_clock_out(args: argparse.Namespace) -> None:
    args.period = None
    apply_event(args, ClockOut(now=parse_moment(args.at)))


def cmd_prefs(args: argparse.Namespace) -> None:
    store = PreferencesStore(get_settings().preferences_path)
    changes = {
        name: value
        for name, value in {
            "employee_name": args.employee_name,
            "auto_fill_from_template": args.auto_fill,
            "show_add_hours_button": args.show_add_hours,
            "salary_mode": args.salary_mode,
            "server_url": args.server_url,
        }.items()
        if value is not None
    }
    prefs = store.update(**changes) if changes else store.load()
    for key, value in prefs.model_dump(by_alias=True, exclude={"supervisor_token"}).items():
        print(f"{key}: {value}")


def cmd_submit(args: argparse.Namespace) -> None:
    controller = open_controller(args)
    if controller.timesheet.is_template:
        raise TimecardError("The template cannot be submitted")
    with open_client(args) as client:
        result = check(
            client.submit_timesheet(
                controller.timesheet,
                supervisor_id=args.supervisor,
                employee_signature=args.signature,
                employee_signature_date=args.signature_date or date.today().isoformat(),
            )
        )
    print(f"Submitted timesheet {result.data.get('id')} for {controller.timesheet.pay_period_label}")


def cmd_supervisors(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        result = check(client.list_supervisors())
    for supervisor in result.data.get("supervisors", []):
        print(f"{supervisor['id']} {supervisor['name']}")


def cmd_login(args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    with open_client(args) as client:
        result = check(client.login(args.username, password))
    PreferencesStore(get_settings().preferences_path).update(supervisor_token=client.token)
    print(f"Logged in as {result.data.get('supervisor', {}).get('name', args.username)}")


def cmd_logout(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        check(client.logout())
    PreferencesStore(get_settings().preferences_path).update(supervisor_token=None)
    print("Logged out")


def cmd_review(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        result = check(client.list_timesheets(args.status))
    for row in result.data.get("timesheets", []):
        print(f"{row['id']} {row['employee_name']} {row['pay_period']} {row['status']} {row['total_hours']:.2f}h")


def cmd_approve(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        check(client.approve(args.id, args.signature, args.signature_date or date.today().isoformat()))
    print(f"Approved timesheet {args.id}")


def cmd_reject(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        check(client.reject(args.id, args.reason))
    print(f"Rejected timesheet {args.id}")


def cmd_delete(args: argparse.Namespace) -> None:
    with open_client(args) as client:
        check(client.delete(args.id))
    print(f"Deleted timesheet {args.id}")


def add_day_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("day", type=int, help="Day of the pay period, 0-13")


def add_period_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--period", help='Pay period label, e.g. "11/2/2025 - 11/15/2025", or Template')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Timesheet entry and approval CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    periods = sub.add_parser("periods", help="List selectable pay periods")
    periods.set_defaults(func=cmd_periods)

    show = sub.add_parser("show", help="Render a pay period's timesheet")
    add_period_option(show)
    show.set_defaults(func=cmd_show)

    set_time = sub.add_parser("set-time", help="Set a start/stop time entry")
    add_day_argument(set_time)
    set_time.add_argument("start", help="HH:MM, or '' to clear")
    set_time.add_argument("stop", help="HH:MM, or '' to clear")
    set_time.add_argument("--position", type=int, default=0, help="Time entry on the day")
    add_period_option(set_time)
    set_time.set_defaults(func=cmd_set_time)

    remove_time = sub.add_parser("remove-time", help="Remove a time entry")
    add_day_argument(remove_time)
    remove_time.add_argument("position", type=int)
    add_period_option(remove_time)
    remove_time.set_defaults(func=cmd_remove_time)

    add_hours = sub.add_parser("add-hours", help="Add a manual hours entry")
    add_day_argument(add_hours)
    add_hours.add_argument("hours", type=float)
    add_hours.add_argument("--description", default="")
    add_period_option(add_hours)
    add_hours.set_defaults(func=cmd_add_hours)

    remove_hours = sub.add_parser("remove-hours", help="Remove a manual hours entry")
    add_day_argument(remove_hours)
    remove_hours.add_argument("position", type=int)
    add_period_option(remove_hours)
    remove_hours.set_defaults(func=cmd_remove_hours)

    day_type = sub.add_parser("day-type", help="Classify a day")
    add_day_argument(day_type)
    day_type.add_argument("day_type", choices=[value.value for value in DayType])
    add_period_option(day_type)
    day_type.set_defaults(func=cmd_day_type)

    leave = sub.add_parser("leave", help="Set personal leave hours")
    leave.add_argument("hours", type=float)
    add_period_option(leave)
    leave.set_defaults(func=cmd_leave)

    name = sub.add_parser("name", help="Set the employee name on the timesheet")
    name.add_argument("name")
    add_period_option(name)
    name.set_defaults(func=cmd_name)

    clock_in = sub.add_parser("clock-in", help="Start a punch for today")
    clock_in.add_argument("--at", help="ISO timestamp to use instead of now")
    clock_in.set_defaults(func=cmd_clock_in)

    clock_out = sub.add_parser("clock-out", help="Stop today's open punch")
    clock_out.add_argument("--at", help="ISO timestamp to use instead of now")
    clock_out.set_defaults(func=cmd_clock_out)

    prefs = sub.add_parser("prefs", help="Show or change preferences")
    prefs.add_argument("--employee-name")
    prefs.add_argument("--auto-fill", action=argparse.BooleanOptionalAction, default=None, help="Fill new periods from the template")
    prefs.add_argument("--show-add-hours", action=argparse.BooleanOptionalAction, default=None)
    prefs.add_argument("--salary-mode", action=argparse.BooleanOptionalAction, default=None)
    prefs.add_argument("--server-url")
    prefs.set_defaults(func=cmd_prefs)

    submit = sub.add_parser("submit", help="Submit a timesheet for approval")
    add_period_option(submit)
    submit.add_argument("--supervisor", type=int)
    submit.add_argument("--signature")
    submit.add_argument("--signature-date")
    submit.set_defaults(func=cmd_submit)

    supervisors = sub.add_parser("supervisors", help="List supervisors on the approval server")
    supervisors.set_defaults(func=cmd_supervisors)

    login = sub.add_parser("login", help="Supervisor login")
    login.add_argument("username")
    login.add_argument("--password")
    login.set_defaults(func=cmd_login)

    logout = sub.add_parser("logout", help="Supervisor logout")
    logout.set_defaults(func=cmd_logout)

    review = sub.add_parser("review", help="List submitted timesheets")
    review.add_argument("--status", choices=TIMESHEET_STATUSES, default="pending")
    review.set_defaults(func=cmd_review)

    approve = sub.add_parser("approve", help="Approve a pending timesheet")
    approve.add_argument("id", type=int)
    approve.add_argument("--signature", required=True)
    approve.add_argument("--signature-date")
    approve.set_defaults(func=cmd_approve)

    reject = sub.add_parser("reject", help="Reject a pending timesheet")
    reject.add_argument("id", type=int)
    reject.add_argument("--reason", required=True)
    reject.set_defaults(func=cmd_reject)

    delete = sub.add_parser("delete", help="Delete a submitted timesheet")
    delete.add_argument("id", type=int)
    delete.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        args.func(args)
    except TimecardError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
