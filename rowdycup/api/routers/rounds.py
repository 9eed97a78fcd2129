from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from rowdycup.api.deps import dump, get_allowances, get_store, http_error
from rowdycup.routes.ws_live import broadcast_event
from rowdycup.scoring.formats import normalize_format
from rowdycup.security import require_admin_session, require_api_key
from rowdycup.tournament.events import LiveEvent
from rowdycup.tournament.models import Match, Round, RoundStatus, camel_alias
from rowdycup.tournament.standings import build_standings
from rowdycup.tournament.store import StoreError, TournamentStore

router = APIRouter(
    prefix="/api/rounds",
    tags=["rounds"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class RoundCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(..., ge=1)
    course_id: Optional[int] = Field(default=None, **camel_alias("course_id", "courseId"))
    format: str = "best_ball"
    date: Optional[datetime] = None
    tee_time: Optional[str] = Field(default=None, **camel_alias("tee_time", "teeTime"))
    tournament_id: Optional[int] = Field(
        default=None, **camel_alias("tournament_id", "tournamentId")
    )


class RoundStatusIn(BaseModel):
    status: RoundStatus


class LockIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_locked: bool = Field(..., **camel_alias("is_locked", "isLocked"))


@router.get("", response_model=List[Round])
def list_rounds(
    tournament_id: Optional[int] = Query(default=None, alias="tournamentId"),
    store: TournamentStore = Depends(get_store),
):
    return store.list_rounds(tournament_id)


@router.post("", response_model=Round, dependencies=[Depends(require_admin_session)])
async def create_round(payload: RoundCreateIn, store: TournamentStore = Depends(get_store)):
    try:
        round_ = store.create_round(
            number=payload.number,
            course_id=payload.course_id,
            format=normalize_format(payload.format),
            date=payload.date,
            tee_time=payload.tee_time,
            tournament_id=payload.tournament_id,
        )
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("created round %s (%s)", round_.id, round_.format.value)
    await broadcast_event(LiveEvent.ROUND_CREATED, dump(round_))
    return round_


@router.get("/{round_id}", response_model=Round)
def get_round(round_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.get_round(round_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.delete("/{round_id}", dependencies=[Depends(require_admin_session)])
async def delete_round(round_id: int, store: TournamentStore = Depends(get_store)):
    try:
        store.delete_round(round_id)
    except StoreError as exc:
        raise http_error(exc) from exc
    await broadcast_event(LiveEvent.ROUND_DELETED, {"id": round_id})
    standings = await run_in_threadpool(build_standings, store, get_allowances())
    await broadcast_event(LiveEvent.STANDINGS_UPDATED, [dump(s) for s in standings])
    return {"success": True}


@router.patch(
    "/{round_id}/status",
    response_model=Round,
    dependencies=[Depends(require_admin_session)],
)
async def set_round_status(
    round_id: int, payload: RoundStatusIn, store: TournamentStore = Depends(get_store)
):
    try:
        round_ = store.set_round_status(round_id, payload.status)
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("round %s status=%s", round_id, round_.status.value)
    await broadcast_event(LiveEvent.ROUND_STATUS_UPDATED, dump(round_))
    return round_


@router.patch(
    "/{round_id}/lock",
    response_model=Round,
    dependencies=[Depends(require_admin_session)],
)
async def set_round_lock(
    round_id: int, payload: LockIn, store: TournamentStore = Depends(get_store)
):
    try:
        round_ = store.set_round_lock(round_id, payload.is_locked)
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("round %s locked=%s", round_id, round_.is_locked)
    await broadcast_event(LiveEvent.ROUND_LOCK_UPDATED, dump(round_))
    return round_


@router.get("/{round_id}/matches", response_model=List[Match])
def list_round_matches(round_id: int, store: TournamentStore = Depends(get_store)):
    try:
        store.get_round(round_id)
    except StoreError as exc:
        raise http_error(exc) from exc
    return store.list_matches(round_id)
