from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from rowdycup.api.deps import dump, get_store, http_error
from rowdycup.routes.ws_live import broadcast_event
from rowdycup.security import require_admin_session, require_api_key
from rowdycup.tournament.events import LiveEvent
from rowdycup.tournament.models import Tournament, camel_alias
from rowdycup.tournament.store import StoreError, TournamentStore

router = APIRouter(
    prefix="/api/tournaments",
    tags=["tournaments"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class TournamentCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    year: int
    start_date: datetime = Field(..., **camel_alias("start_date", "startDate"))
    end_date: datetime = Field(..., **camel_alias("end_date", "endDate"))
    location: Optional[str] = None
    is_active: bool = Field(default=False, **camel_alias("is_active", "isActive"))


class ActiveIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_active: bool = Field(..., **camel_alias("is_active", "isActive"))


@router.get("", response_model=List[Tournament])
def list_tournaments(store: TournamentStore = Depends(get_store)):
    return store.list_tournaments()


@router.post("", response_model=Tournament, dependencies=[Depends(require_admin_session)])
async def create_tournament(
    payload: TournamentCreateIn, store: TournamentStore = Depends(get_store)
):
    if payload.end_date < payload.start_date:
        raise HTTPException(status_code=400, detail="invalid_dates")
    tournament = store.create_tournament(
        name=payload.name.strip(),
        year=payload.year,
        start_date=payload.start_date,
        end_date=payload.end_date,
        location=payload.location,
        is_active=payload.is_active,
    )
    logger.info("created tournament %s (%s)", tournament.id, tournament.name)
    await broadcast_event(LiveEvent.TOURNAMENT_CREATED, dump(tournament))
    return tournament


@router.get("/active", response_model=Tournament)
def get_active_tournament(store: TournamentStore = Depends(get_store)):
    tournament = store.get_active_tournament()
    if tournament is None:
        raise HTTPException(status_code=404, detail="tournament_not_found")
    return tournament


@router.get("/{tournament_id}", response_model=Tournament)
def get_tournament(tournament_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.get_tournament(tournament_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.patch(
    "/{tournament_id}/active",
    response_model=Tournament,
    dependencies=[Depends(require_admin_session)],
)
async def set_tournament_active(
    tournament_id: int, payload: ActiveIn, store: TournamentStore = Depends(get_store)
):
    try:
        tournament = store.set_tournament_active(tournament_id, payload.is_active)
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("tournament %s active=%s", tournament_id, payload.is_active)
    await broadcast_event(
        LiveEvent.TOURNAMENT_ACTIVE_UPDATED, dump(tournament)
    )
    return tournament
