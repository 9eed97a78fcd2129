"""Security helpers for API authentication."""

from __future__ import annotations

import os

from fastapi import Header, HTTPException, Query, status

from rowdycup.auth.sessions import Session, verify_session
from rowdycup.config import env_bool


def _allowed_api_keys() -> set[str]:
    raw = os.getenv("API_KEYS", "")
    keys = {key.strip() for key in raw.split(",") if key.strip()}
    primary = os.getenv("API_KEY")
    if primary:
        keys.add(primary)
    return keys


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    api_key_query: str | None = Query(default=None, alias="apiKey"),
) -> str | None:
    """Require a matching API key header when enabled via env."""

    candidate = x_api_key or api_key_query

    if not env_bool("REQUIRE_API_KEY"):
        return candidate

    allowed_keys = _allowed_api_keys()
    if not allowed_keys or candidate not in allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )

    return candidate


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_admin_session(
    authorization: str | None = Header(default=None, alias="authorization"),
) -> Session:
    """Resolve the admin session from an ``Authorization: Bearer`` header."""

    session = verify_session(bearer_token(authorization))
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="admin session required",
        )
    return session


__all__ = ["bearer_token", "require_admin_session", "require_api_key"]
