"""Admin session issuing and verification."""

from .sessions import (
    ADMIN_ROLE,
    Session,
    check_admin_password,
    issue_session,
    revoke_session,
    verify_session,
)

__all__ = [
    "ADMIN_ROLE",
    "Session",
    "check_admin_password",
    "issue_session",
    "revoke_session",
    "verify_session",
]
