from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from approval_service.db.session import get_session
from approval_service.models import Supervisor

router = APIRouter(prefix="/api/supervisors", tags=["supervisors"])


@router.get("/list")
def list_supervisors(db: Session = Depends(get_session)) -> dict:
    supervisors = db.query(Supervisor).order_by(Supervisor.name, Supervisor.id).all()
    return {
        "success": True,
        "supervisors": [{"id": supervisor.id, "name": supervisor.name} for supervisor in supervisors],
    }
