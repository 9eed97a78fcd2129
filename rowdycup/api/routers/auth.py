from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from rowdycup.auth.sessions import (
    Session,
    check_admin_password,
    issue_session,
    revoke_session,
)
from rowdycup.security import require_admin_session
from rowdycup.telemetry.events import record_login

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


class LoginIn(BaseModel):
    password: str


class SessionOut(BaseModel):
    token: str
    exp: int
    sessionId: str
    role: str


class MeOut(BaseModel):
    sessionId: str
    role: str
    exp: int


@router.post("/login", response_model=SessionOut)
def login(payload: LoginIn):
    if not check_admin_password(payload.password):
        record_login(success=False)
        logger.warning("rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_credentials"
        )
    issued = issue_session()
    record_login(success=True, session_id=str(issued["sessionId"]))
    return SessionOut(**issued)


@router.post("/logout")
def logout(session: Session = Depends(require_admin_session)):
    revoke_session(session)
    return {"success": True}


@router.get("/me", response_model=MeOut)
def me(session: Session = Depends(require_admin_session)):
    return MeOut(sessionId=session.session_id, role=session.role, exp=session.exp)
