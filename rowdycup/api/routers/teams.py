from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rowdycup.api.deps import dump, get_store, http_error
from rowdycup.routes.ws_live import broadcast_event
from rowdycup.security import require_admin_session, require_api_key
from rowdycup.tournament.events import LiveEvent
from rowdycup.tournament.models import Player, Team, camel_alias
from rowdycup.tournament.store import StoreError, TournamentStore

router = APIRouter(
    prefix="/api",
    tags=["teams"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class TeamCreateIn(BaseModel):
    name: str = Field(..., min_length=1)
    captain: str
    color: str
    logo: Optional[str] = None


class PlayerCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    team_id: Optional[int] = Field(default=None, **camel_alias("team_id", "teamId"))
    handicap_index: Optional[float] = Field(
        default=None,
        ge=-10,
        le=54,
        validation_alias=AliasChoices("handicap_index", "handicapIndex", "handicap"),
    )
    photo: Optional[str] = None


@router.get("/teams", response_model=List[Team])
def list_teams(store: TournamentStore = Depends(get_store)):
    return store.list_teams()


@router.post("/teams", response_model=Team, dependencies=[Depends(require_admin_session)])
async def create_team(payload: TeamCreateIn, store: TournamentStore = Depends(get_store)):
    team = store.create_team(
        name=payload.name.strip(),
        captain=payload.captain,
        color=payload.color,
        logo=payload.logo,
    )
    logger.info("created team %s (%s)", team.id, team.name)
    await broadcast_event(LiveEvent.TEAM_CREATED, dump(team))
    return team


@router.get("/teams/{team_id}/players", response_model=List[Player])
def list_team_players(team_id: int, store: TournamentStore = Depends(get_store)):
    try:
        store.get_team(team_id)
    except StoreError as exc:
        raise http_error(exc) from exc
    return store.list_players(team_id)


@router.get("/players", response_model=List[Player])
def list_players(
    team_id: Optional[int] = Query(default=None, alias="teamId"),
    store: TournamentStore = Depends(get_store),
):
    return store.list_players(team_id)


@router.post("/players", response_model=Player, dependencies=[Depends(require_admin_session)])
async def create_player(payload: PlayerCreateIn, store: TournamentStore = Depends(get_store)):
    try:
        player = store.create_player(
            name=payload.name.strip(),
            team_id=payload.team_id,
            handicap_index=payload.handicap_index,
            photo=payload.photo,
        )
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("created player %s on team %s", player.id, player.team_id)
    await broadcast_event(LiveEvent.PLAYER_CREATED, dump(player))
    return player
