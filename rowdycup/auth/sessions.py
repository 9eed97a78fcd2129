"""Signed admin session tokens.

A token is ``<session_id>.<exp>.<signature>`` where the signature is an
HMAC-SHA256 over ``session_id|role|exp``. Tokens are checked on the server
for signature, expiry and revocation; the client holds nothing it can
upgrade on its own.
"""

from __future__ import annotations

import base64
import hmac
import secrets
from dataclasses import dataclass
from hashlib import sha256
from threading import Lock
from time import time
from typing import Dict, Optional, Tuple
from uuid import uuid4

from rowdycup.config import get_settings

ADMIN_ROLE = "admin"
_SEPARATOR = "."

_REVOKED: Dict[str, int] = {}
_LOCK = Lock()
_FALLBACK_KEY = secrets.token_bytes(32)


@dataclass(frozen=True)
class Session:
    session_id: str
    role: str
    exp: int


def _get_sign_key() -> bytes:
    secret = get_settings().session_secret
    if not secret:
        # Without a configured secret, tokens only survive this process.
        return _FALLBACK_KEY
    return secret.encode("utf-8")


def _sign_payload(session_id: str, role: str, exp: int) -> str:
    payload = f"{session_id}|{role}|{exp}".encode("utf-8")
    digest = hmac.new(_get_sign_key(), payload, sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def _pack_token(session_id: str, exp: int, signature: str) -> str:
    return _SEPARATOR.join([session_id, str(exp), signature])


def _unpack_token(token: str) -> Tuple[str, int, str]:
    parts = token.split(_SEPARATOR)
    if len(parts) != 3:
        raise ValueError("invalid token format")
    session_id, exp_raw, signature = parts
    return session_id, int(exp_raw), signature


def check_admin_password(candidate: str | None) -> bool:
    expected = get_settings().admin_password
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def issue_session(role: str = ADMIN_ROLE, ttl_s: int | None = None) -> Dict[str, object]:
    ttl = ttl_s if ttl_s is not None else get_settings().session_ttl_seconds
    session_id = uuid4().hex
    exp = int(time()) + int(max(ttl, 1))
    token = _pack_token(session_id, exp, _sign_payload(session_id, role, exp))
    return {"token": token, "exp": exp, "sessionId": session_id, "role": role}


def verify_session(token: str | None, role: str = ADMIN_ROLE) -> Optional[Session]:
    """Return the session for a valid, unexpired, unrevoked token; else None."""

    if not token:
        return None
    try:
        session_id, exp, signature = _unpack_token(token)
    except (ValueError, TypeError):
        return None

    if exp <= int(time()):
        return None

    expected = _sign_payload(session_id, role, exp)
    if not hmac.compare_digest(signature, expected):
        return None

    with _LOCK:
        if session_id in _REVOKED:
            return None
    return Session(session_id=session_id, role=role, exp=exp)


def revoke_session(session: Session) -> None:
    now = int(time())
    with _LOCK:
        _REVOKED[session.session_id] = session.exp
        for key, exp in list(_REVOKED.items()):
            if exp <= now:
                del _REVOKED[key]


def reset() -> None:
    """Forget revoked sessions (used in tests)."""

    with _LOCK:
        _REVOKED.clear()


__all__ = [
    "ADMIN_ROLE",
    "Session",
    "check_admin_password",
    "issue_session",
    "reset",
    "revoke_session",
    "verify_session",
]
