from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from approval_service.core.observability import timesheets_reviewed, timesheets_submitted
from approval_service.db.session import get_session, utcnow
from approval_service.domains.auth.dependencies import current_supervisor
from approval_service.models import Supervisor, TimesheetSubmission
from approval_service.models.timesheet import APPROVED, PENDING, REJECTED
from timecard.codec import timesheet_from_dict
from timecard.core.logging import get_logger
from timecard.errors import CodecError
from timecard.overtime import PeriodAggregator

router = APIRouter(prefix="/api/timesheets", tags=["timesheets"])
logger = get_logger(__name__)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitRequest(CamelModel):
    employee_name: str = Field(..., min_length=1)
    pay_period: str = Field(..., min_length=1)
    timesheet_data: dict[str, Any]
    supervisor_id: Optional[int] = None
    employee_signature: Optional[str] = None
    employee_signature_date: Optional[str] = None


class ApproveRequest(CamelModel):
    supervisor_signature: str = Field(..., min_length=1)
    supervisor_signature_date: str = Field(..., min_length=1)


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


def _total_hours(data: dict[str, Any]) -> float:
    try:
        timesheet = timesheet_from_dict(data)
    except (CodecError, ValueError):
        return 0.0
    totals = PeriodAggregator().totals_for(timesheet)
    return round(totals.week1_total + totals.week2_total, 2)


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value else None


def _serialize(submission: TimesheetSubmission) -> dict[str, Any]:
    return {
        "id": submission.id,
        "employee_name": submission.employee_name,
        "pay_period": submission.pay_period,
        "status": submission.status,
        "timesheet_data": submission.timesheet_data,
        "total_hours": _total_hours(submission.timesheet_data),
        "supervisor_id": submission.supervisor_id,
        "employee_signature": submission.employee_signature,
        "employee_signature_date": submission.employee_signature_date,
        "supervisor_signature": submission.supervisor_signature,
        "supervisor_signature_date": submission.supervisor_signature_date,
        "rejection_reason": submission.rejection_reason,
        "submitted_at": _timestamp(submission.submitted_at),
        "approved_at": _timestamp(submission.approved_at),
        "rejected_at": _timestamp(submission.rejected_at),
    }


def _get_submission(db: Session, timesheet_id: int) -> TimesheetSubmission:
    submission = db.get(TimesheetSubmission, timesheet_id)
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timesheet not found")
    return submission


def _get_pending(db: Session, timesheet_id: int) -> TimesheetSubmission:
    submission = _get_submission(db, timesheet_id)
    if submission.status != PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Timesheet is already {submission.status}",
        )
    return submission


def _list_by_status(db: Session, state: str) -> dict[str, Any]:
    submissions = (
        db.query(TimesheetSubmission)
        .filter(TimesheetSubmission.status == state)
        .order_by(TimesheetSubmission.submitted_at.desc(), TimesheetSubmission.id.desc())
        .all()
    )
    return {"success": True, "timesheets": [_serialize(submission) for submission in submissions]}


@router.post("/submit", status_code=status.HTTP_201_CREATED)
def submit_timesheet(payload: SubmitRequest, db: Session = Depends(get_session)) -> dict[str, Any]:
    try:
        timesheet_from_dict(payload.timesheet_data)
    except (CodecError, ValueError) as exc:
        logger.info("timesheet_submit_invalid", pay_period=payload.pay_period, error=str(exc))
        raise HTTPException(status_code=422, detail=f"Invalid timesheet data: {exc}")

    if payload.supervisor_id is not None and db.get(Supervisor, payload.supervisor_id) is None:
        raise HTTPException(status_code=422, detail="Unknown supervisor")

    submission = TimesheetSubmission(
        employee_name=payload.employee_name.strip(),
        pay_period=payload.pay_period,
        timesheet_data=payload.timesheet_data,
        supervisor_id=payload.supervisor_id,
        employee_signature=payload.employee_signature,
        employee_signature_date=payload.employee_signature_date,
        status=PENDING,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)

    timesheets_submitted.add(1)
    logger.info("timesheet_received", id=submission.id, employee=submission.employee_name, pay_period=submission.pay_period)
    return {"success": True, "id": submission.id}


@router.get("/pending")
def list_pending(db: Session = Depends(get_session), supervisor: Supervisor = Depends(current_supervisor)) -> dict[str, Any]:
    return _list_by_status(db, PENDING)


@router.get("/approved")
def list_approved(db: Session = Depends(get_session), supervisor: Supervisor = Depends(current_supervisor)) -> dict[str, Any]:
    return _list_by_status(db, APPROVED)


@router.get("/rejected")
def list_rejected(db: Session = Depends(get_session), supervisor: Supervisor = Depends(current_supervisor)) -> dict[str, Any]:
    return _list_by_status(db, REJECTED)


@router.get("/{timesheet_id}")
def get_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_session),
    supervisor: Supervisor = Depends(current_supervisor),
) -> dict[str, Any]:
    return {"success": True, "timesheet": _serialize(_get_submission(db, timesheet_id))}


@router.post("/{timesheet_id}/approve")
def approve_timesheet(
    timesheet_id: int,
    payload: ApproveRequest,
    db: Session = Depends(get_session),
    supervisor: Supervisor = Depends(current_supervisor),
) -> dict[str, Any]:
    submission = _get_pending(db, timesheet_id)
    submission.status = APPROVED
    submission.supervisor_signature = payload.supervisor_signature
    submission.supervisor_signature_date = payload.supervisor_signature_date
    submission.approved_at = utcnow()
    submission.reviewed_by_id = supervisor.id
    db.commit()

    timesheets_reviewed.add(1, {"outcome": APPROVED})
    logger.info("timesheet_approved", id=timesheet_id, supervisor=supervisor.username)
    return {"success": True}


@router.post("/{timesheet_id}/reject")
def reject_timesheet(
    timesheet_id: int,
    payload: RejectRequest,
    db: Session = Depends(get_session),
    supervisor: Supervisor = Depends(current_supervisor),
) -> dict[str, Any]:
    submission = _get_pending(db, timesheet_id)
    submission.status = REJECTED
    submission.rejection_reason = payload.reason.strip()
    submission.rejected_at = utcnow()
    submission.reviewed_by_id = supervisor.id
    db.commit()

    timesheets_reviewed.add(1, {"outcome": REJECTED})
    logger.info("timesheet_rejected", id=timesheet_id, supervisor=supervisor.username)
    return {"success": True}


@router.delete("/{timesheet_id}")
def delete_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_session),
    supervisor: Supervisor = Depends(current_supervisor),
) -> dict[str, Any]:
    submission = _get_submission(db, timesheet_id)
    db.delete(submission)
    db.commit()
    logger.info("timesheet_deleted", id=timesheet_id, supervisor=supervisor.username)
    return {"success": True}
