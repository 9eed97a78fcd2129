from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from rowdycup.api.deps import get_allowances, get_store
from rowdycup.scoring.formats import MatchFormat
from rowdycup.security import require_api_key
from rowdycup.tournament.models import TeamStanding
from rowdycup.tournament.standings import build_standings
from rowdycup.tournament.store import TournamentStore

router = APIRouter(
    prefix="/api/standings",
    tags=["standings"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=List[TeamStanding])
def get_standings(
    tournament_id: Optional[int] = Query(default=None, alias="tournamentId"),
    store: TournamentStore = Depends(get_store),
    allowances: Dict[MatchFormat, int] = Depends(get_allowances),
):
    return build_standings(store, allowances, tournament_id)
