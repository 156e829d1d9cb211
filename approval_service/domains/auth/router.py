from __future__ import annotations

import secrets
from hashlib import sha256
from hmac import compare_digest

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from approval_service.db.session import get_session
from approval_service.domains.auth.dependencies import bearer_token
from approval_service.models import Supervisor, SupervisorSession
from timecard.core.logging import get_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)


class LoginRequest(BaseModel):
    username: str
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, value: str) -> str:
        username = value.strip()
        if not username:
            raise ValueError("Username is required")
        return username


class SupervisorOut(BaseModel):
    id: int
    name: str
    username: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    supervisor: SupervisorOut


def hash_password(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_session)) -> LoginResponse:
    logger.info("login_attempt", username=payload.username)
    supervisor = (
        db.query(Supervisor)
        .filter(func.lower(Supervisor.username) == payload.username.lower())
        .one_or_none()
    )

    if not supervisor or not compare_digest(supervisor.hashed_password, hash_password(payload.password)):
        logger.info("login_failed", username=payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = secrets.token_urlsafe(32)
    db.add(SupervisorSession(token=token, supervisor_id=supervisor.id))
    db.commit()
    logger.info("login_success", username=supervisor.username)

    return LoginResponse(
        token=token,
        supervisor=SupervisorOut(id=supervisor.id, name=supervisor.name, username=supervisor.username),
    )


@router.post("/logout")
def logout(token: str = Depends(bearer_token), db: Session = Depends(get_session)) -> dict[str, bool]:
    deleted = db.query(SupervisorSession).filter(SupervisorSession.token == token).delete()
    db.commit()
    logger.info("logout", sessions_closed=deleted)
    return {"success": True}
