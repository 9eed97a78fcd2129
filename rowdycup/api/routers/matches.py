from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from rowdycup.api.deps import dump, get_allowances, get_store, http_error
from rowdycup.metrics import SCORE_WRITES
from rowdycup.routes.ws_live import broadcast_event
from rowdycup.scoring.formats import MatchFormat
from rowdycup.security import require_admin_session, require_api_key
from rowdycup.telemetry.events import record_match_closed, record_score_write
from rowdycup.tournament.events import LiveEvent
from rowdycup.tournament.models import (
    HoleScore,
    Match,
    MatchPlayer,
    TeamStanding,
    camel_alias,
)
from rowdycup.tournament.standings import build_standings
from rowdycup.tournament.store import (
    Conflict,
    InvalidEntry,
    ScoreEntry,
    StoreError,
    TournamentStore,
)
from rowdycup.tournament.views import MatchScorecard, build_match_scorecard

router = APIRouter(
    prefix="/api/matches",
    tags=["matches"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class MatchCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    round_id: int = Field(..., **camel_alias("round_id", "roundId"))
    team1_id: int = Field(..., **camel_alias("team1_id", "team1Id"))
    team2_id: int = Field(..., **camel_alias("team2_id", "team2Id"))
    points: float = Field(default=1.0, gt=0)


class MatchPlayerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_id: int = Field(..., **camel_alias("player_id", "playerId"))
    team_id: Optional[int] = Field(default=None, **camel_alias("team_id", "teamId"))


class LockIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_locked: bool = Field(..., **camel_alias("is_locked", "isLocked"))


class ScoreEntryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_id: int = Field(..., **camel_alias("player_id", "playerId"))
    hole: int
    strokes: Optional[int] = None


class ScoresIn(BaseModel):
    scores: List[ScoreEntryIn] = Field(..., min_length=1)


def _card(
    store: TournamentStore, match_id: int, allowances: Mapping[MatchFormat, int]
) -> MatchScorecard:
    try:
        return build_match_scorecard(store, match_id, allowances)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.get("", response_model=List[Match])
def list_matches(
    round_id: Optional[int] = Query(default=None, alias="roundId"),
    store: TournamentStore = Depends(get_store),
):
    return store.list_matches(round_id)


@router.post("", response_model=Match, dependencies=[Depends(require_admin_session)])
async def create_match(payload: MatchCreateIn, store: TournamentStore = Depends(get_store)):
    try:
        match = store.create_match(
            round_id=payload.round_id,
            team1_id=payload.team1_id,
            team2_id=payload.team2_id,
            points=payload.points,
        )
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("created match %s in round %s", match.id, match.round_id)
    await broadcast_event(LiveEvent.MATCH_CREATED, dump(match))
    return match


@router.get("/{match_id}", response_model=Match)
def get_match(match_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.get_match(match_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.patch(
    "/{match_id}/lock",
    response_model=Match,
    dependencies=[Depends(require_admin_session)],
)
async def set_match_lock(
    match_id: int, payload: LockIn, store: TournamentStore = Depends(get_store)
):
    try:
        match = store.set_match_lock(match_id, payload.is_locked)
    except StoreError as exc:
        raise http_error(exc) from exc
    logger.info("match %s locked=%s", match_id, match.is_locked)
    await broadcast_event(LiveEvent.MATCH_LOCK_UPDATED, dump(match))
    return match


@router.get("/{match_id}/players", response_model=List[MatchPlayer])
def list_match_players(match_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.list_match_players(match_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.post(
    "/{match_id}/players",
    response_model=MatchPlayer,
    dependencies=[Depends(require_admin_session)],
)
async def add_match_player(
    match_id: int, payload: MatchPlayerIn, store: TournamentStore = Depends(get_store)
):
    try:
        match_player = store.add_match_player(
            match_id, player_id=payload.player_id, team_id=payload.team_id
        )
    except StoreError as exc:
        raise http_error(exc) from exc
    await broadcast_event(LiveEvent.MATCH_PLAYER_ADDED, dump(match_player))
    return match_player


@router.get("/{match_id}/scores", response_model=List[HoleScore])
def list_scores(match_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.list_hole_scores(match_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.get("/{match_id}/scorecard", response_model=MatchScorecard)
def get_scorecard(
    match_id: int,
    store: TournamentStore = Depends(get_store),
    allowances: Dict[MatchFormat, int] = Depends(get_allowances),
):
    return _card(store, match_id, allowances)


@dataclass
class ScoreWrite:
    written: List[HoleScore]
    card: MatchScorecard
    standings: List[TeamStanding]
    closed: bool


_SCORE_WRITE_LOCK = threading.Lock()


def apply_score_write(
    store: TournamentStore,
    match_id: int,
    entries: List[ScoreEntry],
    allowances: Mapping[MatchFormat, int],
) -> ScoreWrite:
    """Write a batch and rebuild the card and standings from it.

    Writes are serialised so only one batch sees a match move to closed.
    """

    with _SCORE_WRITE_LOCK:
        before = build_match_scorecard(store, match_id, allowances)
        written = store.upsert_hole_scores(match_id, entries)
        card = build_match_scorecard(store, match_id, allowances)
        standings = build_standings(store, allowances)
    return ScoreWrite(
        written=written,
        card=card,
        standings=standings,
        closed=card.match_over and not before.match_over,
    )


@router.put(
    "/{match_id}/scores",
    response_model=MatchScorecard,
    dependencies=[Depends(require_admin_session)],
)
async def put_scores(
    match_id: int,
    payload: ScoresIn,
    store: TournamentStore = Depends(get_store),
    allowances: Dict[MatchFormat, int] = Depends(get_allowances),
):
    entries = [(s.player_id, s.hole, s.strokes) for s in payload.scores]

    start = time.perf_counter()
    try:
        result = await run_in_threadpool(
            apply_score_write, store, match_id, entries, allowances
        )
    except (InvalidEntry, Conflict) as exc:
        outcome = "locked" if isinstance(exc, Conflict) else "rejected"
        duration_ms = (time.perf_counter() - start) * 1000
        SCORE_WRITES.labels(status=outcome).inc()
        record_score_write(match_id, duration_ms, status=outcome, entries=len(entries))
        logger.warning("score write for match %s %s: %s", match_id, outcome, exc)
        if isinstance(exc, InvalidEntry):
            raise HTTPException(status_code=400, detail="invalid_score_entries") from exc
        raise http_error(exc) from exc
    except StoreError as exc:
        raise http_error(exc) from exc

    duration_ms = (time.perf_counter() - start) * 1000
    SCORE_WRITES.labels(status="ok").inc()
    record_score_write(match_id, duration_ms, status="ok", entries=len(result.written))

    card = result.card
    await broadcast_event(
        LiveEvent.HOLE_SCORE_UPDATED,
        {"matchId": match_id, "scores": [dump(s) for s in result.written]},
    )
    await broadcast_event(LiveEvent.MATCH_STATUS_UPDATED, card.summary())
    await broadcast_event(
        LiveEvent.STANDINGS_UPDATED, [dump(s) for s in result.standings]
    )

    if result.closed:
        logger.info("match %s closed: %s", match_id, card.headline)
        record_match_closed(match_id, headline=card.headline, winner=card.winner)

    return card
