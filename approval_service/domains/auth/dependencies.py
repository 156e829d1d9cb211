from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from approval_service.db.session import get_session
from approval_service.models import Supervisor, SupervisorSession


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return token.strip()


def current_supervisor(token: str = Depends(bearer_token), db: Session = Depends(get_session)) -> Supervisor:
    session = db.query(SupervisorSession).filter(SupervisorSession.token == token).one_or_none()
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session")
    return session.supervisor
