"""Demo data for local development and previews."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict

from rowdycup.scoring.formats import MatchFormat
from rowdycup.scoring.scorecard import DEFAULT_HOLE_RANKS, DEFAULT_PARS

from .store import TournamentStore

logger = logging.getLogger(__name__)

_ROSTERS = {
    "Aviators": [("Jordan Reyes", 8.4), ("Sam Whitaker", 14.2)],
    "Producers": [("Alex Moreno", 10.0), ("Casey Lindqvist", 18.6)],
}


def seed_demo(store: TournamentStore) -> Dict[str, int]:
    """Populate an empty store with two teams, a course and one best-ball match."""

    if store.list_teams():
        logger.info("store already populated; skipping demo seed")
        return {}

    start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    tournament = store.create_tournament(
        name="Rowdy Cup",
        year=start.year,
        start_date=start,
        end_date=start + timedelta(days=2),
        location="Pinehurst, NC",
        is_active=True,
    )
    aviators = store.create_team(name="Aviators", captain="Jordan Reyes", color="#1e3a8a")
    producers = store.create_team(name="Producers", captain="Alex Moreno", color="#b91c1c")

    players: Dict[int, list] = {}
    for team in (aviators, producers):
        players[team.id] = [
            store.create_player(name=name, team_id=team.id, handicap_index=index)
            for name, index in _ROSTERS[team.name]
        ]

    course = store.create_course(
        name="Pine Needles", par=sum(DEFAULT_PARS), rating=72.0, slope=130
    )
    for number, (par, rank) in enumerate(zip(DEFAULT_PARS, DEFAULT_HOLE_RANKS), start=1):
        store.add_course_hole(course.id, hole_number=number, par=par, handicap_rank=rank)

    round_ = store.create_round(
        number=1,
        course_id=course.id,
        format=MatchFormat.BEST_BALL,
        date=start,
        tee_time="08:00",
        tournament_id=tournament.id,
    )
    match = store.create_match(
        round_id=round_.id, team1_id=aviators.id, team2_id=producers.id
    )
    for team in (aviators, producers):
        for player in players[team.id]:
            store.add_match_player(match.id, player_id=player.id)

    logger.info("seeded demo tournament %s with match %s", tournament.id, match.id)
    return {
        "tournamentId": tournament.id,
        "courseId": course.id,
        "roundId": round_.id,
        "matchId": match.id,
    }


__all__ = ["seed_demo"]
