"""In-memory tournament store.

Holds every entity behind a single lock. Gross hole scores are the only
scoring input kept here; everything derived from them (net scores, hole
results, match status, standings) is recomputed by the views on every read.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from threading import Lock
from typing import Dict, Iterable, List, Optional, Tuple

from rowdycup.config import get_settings
from rowdycup.scoring.formats import TEAM_SIZES, MatchFormat, normalize_format

from .models import (
    Course,
    CourseHole,
    HoleScore,
    Match,
    MatchPlayer,
    Player,
    Round,
    RoundStatus,
    Team,
    Tournament,
    new_id,
)

logger = logging.getLogger(__name__)

ScoreEntry = Tuple[int, int, Optional[int]]


class StoreError(Exception):
    pass


class NotFound(StoreError):
    pass


class Conflict(StoreError):
    pass


class InvalidEntry(StoreError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TournamentStore:
    def __init__(self, *, score_min: int = 1, score_max: int = 15) -> None:
        self.score_min = score_min
        self.score_max = score_max
        self._lock = Lock()
        self._tournaments: Dict[int, Tournament] = {}
        self._teams: Dict[int, Team] = {}
        self._players: Dict[int, Player] = {}
        self._courses: Dict[int, Course] = {}
        self._rounds: Dict[int, Round] = {}
        self._matches: Dict[int, Match] = {}
        self._match_players: Dict[int, MatchPlayer] = {}
        self._scores: Dict[Tuple[int, int, int], HoleScore] = {}

    # Lookups (caller holds the lock)
    def _require(self, table: Dict[int, object], key: int, kind: str):
        item = table.get(key)
        if item is None:
            raise NotFound(f"{kind}_not_found")
        return item

    def _copy(self, item):
        return item.model_copy(deep=True)

    # Tournaments
    def create_tournament(
        self,
        *,
        name: str,
        year: int,
        start_date: datetime,
        end_date: datetime,
        location: str | None = None,
        is_active: bool = False,
    ) -> Tournament:
        tournament = Tournament(
            id=new_id(),
            name=name,
            year=year,
            start_date=start_date,
            end_date=end_date,
            location=location,
            is_active=False,
        )
        with self._lock:
            self._tournaments[tournament.id] = tournament
        if is_active:
            return self.set_tournament_active(tournament.id, True)
        return self._copy(tournament)

    def list_tournaments(self) -> List[Tournament]:
        with self._lock:
            return [self._copy(t) for t in self._tournaments.values()]

    def get_tournament(self, tournament_id: int) -> Tournament:
        with self._lock:
            return self._copy(self._require(self._tournaments, tournament_id, "tournament"))

    def get_active_tournament(self) -> Optional[Tournament]:
        with self._lock:
            for tournament in self._tournaments.values():
                if tournament.is_active:
                    return self._copy(tournament)
        return None

    def set_tournament_active(self, tournament_id: int, is_active: bool) -> Tournament:
        """Activate or deactivate a tournament; at most one is active at a time."""

        with self._lock:
            target = self._require(self._tournaments, tournament_id, "tournament")
            if is_active:
                for tournament in self._tournaments.values():
                    tournament.is_active = False
            target.is_active = is_active
            return self._copy(target)

    # Teams and players
    def create_team(
        self, *, name: str, captain: str, color: str, logo: str | None = None
    ) -> Team:
        team = Team(id=new_id(), name=name, captain=captain, color=color, logo=logo)
        with self._lock:
            self._teams[team.id] = team
        return self._copy(team)

    def list_teams(self) -> List[Team]:
        with self._lock:
            return [self._copy(t) for t in self._teams.values()]

    def get_team(self, team_id: int) -> Team:
        with self._lock:
            return self._copy(self._require(self._teams, team_id, "team"))

    def create_player(
        self,
        *,
        name: str,
        team_id: int | None = None,
        handicap_index: float | None = None,
        photo: str | None = None,
    ) -> Player:
        with self._lock:
            if team_id is not None:
                self._require(self._teams, team_id, "team")
            player = Player(
                id=new_id(),
                name=name,
                team_id=team_id,
                handicap_index=handicap_index,
                photo=photo,
            )
            self._players[player.id] = player
            return self._copy(player)

    def list_players(self, team_id: int | None = None) -> List[Player]:
        with self._lock:
            return [
                self._copy(p)
                for p in self._players.values()
                if team_id is None or p.team_id == team_id
            ]

    def get_player(self, player_id: int) -> Player:
        with self._lock:
            return self._copy(self._require(self._players, player_id, "player"))

    # Courses
    def create_course(
        self,
        *,
        name: str,
        par: int = 72,
        yardage: int | None = None,
        description: str | None = None,
        rating: float | None = None,
        slope: int | None = None,
    ) -> Course:
        course = Course(
            id=new_id(),
            name=name,
            par=par,
            yardage=yardage,
            description=description,
            rating=rating,
            slope=slope,
        )
        with self._lock:
            self._courses[course.id] = course
        return self._copy(course)

    def list_courses(self) -> List[Course]:
        with self._lock:
            return [self._copy(c) for c in self._courses.values()]

    def get_course(self, course_id: int) -> Course:
        with self._lock:
            return self._copy(self._require(self._courses, course_id, "course"))

    def add_course_hole(
        self,
        course_id: int,
        *,
        hole_number: int,
        par: int,
        handicap_rank: int,
        yardage: int | None = None,
    ) -> CourseHole:
        with self._lock:
            course: Course = self._require(self._courses, course_id, "course")
            for existing in course.holes:
                if existing.hole_number == hole_number:
                    raise Conflict("hole_exists")
                if existing.handicap_rank == handicap_rank:
                    raise InvalidEntry("duplicate_handicap_rank")
            hole = CourseHole(
                id=new_id(),
                course_id=course_id,
                hole_number=hole_number,
                par=par,
                yardage=yardage,
                handicap_rank=handicap_rank,
            )
            course.holes.append(hole)
            course.holes.sort(key=lambda h: h.hole_number)
            return self._copy(hole)

    # Rounds
    def create_round(
        self,
        *,
        number: int,
        course_id: int | None = None,
        format: MatchFormat | str = MatchFormat.BEST_BALL,
        date: datetime | None = None,
        tee_time: str | None = None,
        tournament_id: int | None = None,
    ) -> Round:
        with self._lock:
            if course_id is not None:
                self._require(self._courses, course_id, "course")
            if tournament_id is not None:
                self._require(self._tournaments, tournament_id, "tournament")
            round_ = Round(
                id=new_id(),
                tournament_id=tournament_id,
                number=number,
                course_id=course_id,
                format=normalize_format(format),
                date=date,
                tee_time=tee_time,
            )
            self._rounds[round_.id] = round_
            return self._copy(round_)

    def list_rounds(self, tournament_id: int | None = None) -> List[Round]:
        with self._lock:
            rounds = [
                self._copy(r)
                for r in self._rounds.values()
                if tournament_id is None or r.tournament_id == tournament_id
            ]
        return sorted(rounds, key=lambda r: (r.number, r.id))

    def get_round(self, round_id: int) -> Round:
        with self._lock:
            return self._copy(self._require(self._rounds, round_id, "round"))

    def set_round_status(self, round_id: int, status: RoundStatus | str) -> Round:
        with self._lock:
            round_: Round = self._require(self._rounds, round_id, "round")
            round_.status = RoundStatus(status)
            return self._copy(round_)

    def set_round_lock(self, round_id: int, is_locked: bool) -> Round:
        with self._lock:
            round_: Round = self._require(self._rounds, round_id, "round")
            round_.is_locked = is_locked
            return self._copy(round_)

    def delete_round(self, round_id: int) -> None:
        """Delete a round with its matches, match players and hole scores."""

        with self._lock:
            self._require(self._rounds, round_id, "round")
            match_ids = {m.id for m in self._matches.values() if m.round_id == round_id}
            for match_id in match_ids:
                del self._matches[match_id]
            self._match_players = {
                key: mp
                for key, mp in self._match_players.items()
                if mp.match_id not in match_ids
            }
            self._scores = {
                key: score
                for key, score in self._scores.items()
                if score.match_id not in match_ids
            }
            del self._rounds[round_id]
        logger.info("deleted round %s with %d matches", round_id, len(match_ids))

    # Matches
    def create_match(
        self, *, round_id: int, team1_id: int, team2_id: int, points: float = 1.0
    ) -> Match:
        with self._lock:
            self._require(self._rounds, round_id, "round")
            self._require(self._teams, team1_id, "team")
            self._require(self._teams, team2_id, "team")
            if team1_id == team2_id:
                raise InvalidEntry("teams_must_differ")
            match = Match(
                id=new_id(),
                round_id=round_id,
                team1_id=team1_id,
                team2_id=team2_id,
                points=points,
            )
            self._matches[match.id] = match
            return self._copy(match)

    def list_matches(self, round_id: int | None = None) -> List[Match]:
        with self._lock:
            return [
                self._copy(m)
                for m in self._matches.values()
                if round_id is None or m.round_id == round_id
            ]

    def get_match(self, match_id: int) -> Match:
        with self._lock:
            return self._copy(self._require(self._matches, match_id, "match"))

    def set_match_lock(self, match_id: int, is_locked: bool) -> Match:
        with self._lock:
            match: Match = self._require(self._matches, match_id, "match")
            match.is_locked = is_locked
            return self._copy(match)

    def add_match_player(
        self, match_id: int, *, player_id: int, team_id: int | None = None
    ) -> MatchPlayer:
        with self._lock:
            match: Match = self._require(self._matches, match_id, "match")
            player: Player = self._require(self._players, player_id, "player")
            round_: Round = self._rounds[match.round_id]

            side = team_id if team_id is not None else player.team_id
            if side not in (match.team1_id, match.team2_id):
                raise InvalidEntry("team_not_in_match")

            current = [mp for mp in self._match_players.values() if mp.match_id == match_id]
            if any(mp.player_id == player_id for mp in current):
                raise Conflict("player_already_in_match")
            on_side = [mp for mp in current if mp.team_id == side]
            if len(on_side) >= TEAM_SIZES[round_.format]:
                raise InvalidEntry("team_full")

            match_player = MatchPlayer(
                id=new_id(),
                match_id=match_id,
                player_id=player_id,
                team_id=side,
                slot=len(on_side) + 1,
            )
            self._match_players[match_player.id] = match_player
            return self._copy(match_player)

    def list_match_players(self, match_id: int) -> List[MatchPlayer]:
        with self._lock:
            self._require(self._matches, match_id, "match")
            players = [
                self._copy(mp)
                for mp in self._match_players.values()
                if mp.match_id == match_id
            ]
        return sorted(players, key=lambda mp: (mp.team_id, mp.slot))

    # Hole scores
    def upsert_hole_scores(
        self, match_id: int, entries: Iterable[ScoreEntry]
    ) -> List[HoleScore]:
        """Write gross scores as a batch; nothing is written if any entry is invalid.

        A ``None`` stroke count clears a previously entered score.
        """

        entries = list(entries)
        with self._lock:
            match: Match = self._require(self._matches, match_id, "match")
            round_: Round = self._rounds[match.round_id]
            if round_.is_locked:
                raise Conflict("round_locked")
            if match.is_locked:
                raise Conflict("match_locked")

            assigned = {
                mp.player_id
                for mp in self._match_players.values()
                if mp.match_id == match_id
            }
            for player_id, hole, strokes in entries:
                if hole < 1 or hole > 18 or player_id not in assigned:
                    raise InvalidEntry(
                        f"invalid score entry for hole={hole} player={player_id}"
                    )
                if strokes is not None and not (
                    self.score_min <= strokes <= self.score_max
                ):
                    raise InvalidEntry(
                        f"invalid score entry for hole={hole} player={player_id}"
                    )

            written: List[HoleScore] = []
            now = _now()
            for player_id, hole, strokes in entries:
                key = (match_id, player_id, hole)
                score = HoleScore(
                    match_id=match_id,
                    player_id=player_id,
                    hole=hole,
                    strokes=strokes,
                    updated_at=now,
                )
                if strokes is None:
                    self._scores.pop(key, None)
                else:
                    self._scores[key] = score
                written.append(score)
            return [self._copy(s) for s in written]

    def list_hole_scores(self, match_id: int) -> List[HoleScore]:
        with self._lock:
            self._require(self._matches, match_id, "match")
            scores = [
                self._copy(s) for s in self._scores.values() if s.match_id == match_id
            ]
        return sorted(scores, key=lambda s: (s.hole, s.player_id))


@lru_cache(maxsize=1)
def get_store() -> TournamentStore:
    settings = get_settings()
    return TournamentStore(score_min=settings.score_min, score_max=settings.score_max)


__all__ = [
    "Conflict",
    "InvalidEntry",
    "NotFound",
    "ScoreEntry",
    "StoreError",
    "TournamentStore",
    "get_store",
]
