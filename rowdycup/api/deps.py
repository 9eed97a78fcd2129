"""Shared router dependencies and store error translation."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, status
from pydantic import BaseModel

from rowdycup.config import get_settings
from rowdycup.scoring.formats import MatchFormat
from rowdycup.tournament.store import (
    Conflict,
    InvalidEntry,
    NotFound,
    StoreError,
    TournamentStore,
    get_store,
)


def get_allowances() -> Dict[MatchFormat, int]:
    return get_settings().allowances()


def dump(model: BaseModel) -> Dict[str, Any]:
    """JSON-ready camelCase payload for push events."""

    return model.model_dump(by_alias=True, mode="json")


def http_error(exc: StoreError, *, invalid_detail: str | None = None) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, Conflict):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, InvalidEntry):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=invalid_detail or str(exc)
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="store_error"
    )


__all__ = ["TournamentStore", "dump", "get_allowances", "get_store", "http_error"]
