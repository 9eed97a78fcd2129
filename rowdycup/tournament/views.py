"""Match scorecard derivation.

Every call rebuilds the card from the stored gross scores: handicap chain,
per-hole nets, team values, hole results and the running match status.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from rowdycup.scoring.best_ball import (
    HoleResult,
    best_ball_contributor,
    determine_hole_winner,
)
from rowdycup.scoring.formats import (
    DEFAULT_ALLOWANCES,
    MatchFormat,
    team_hole_value,
    uses_team_ball,
)
from rowdycup.scoring.handicap import (
    calculate_course_handicap,
    calculate_playing_handicap,
    calculate_strokes_received,
    lowest_playing_handicap,
)
from rowdycup.scoring.match_play import (
    MatchStatus,
    MatchWinner,
    calculate_match_play_status,
    tally_hole_results,
)
from rowdycup.scoring.net import net_or_none
from rowdycup.scoring.scorecard import (
    DEFAULT_HOLE_RANKS,
    DEFAULT_PARS,
    match_headline,
    nine_hole_totals,
)
from rowdycup.scoring.strokes import HOLES_PER_ROUND, allocate_strokes

from .models import Course, Player, camel_alias
from .store import TournamentStore


class HoleInfo(BaseModel):
    hole: int
    par: int
    handicap_rank: int = Field(**camel_alias("handicap_rank", "handicapRank"))

    model_config = ConfigDict(populate_by_name=True)


class PlayerCard(BaseModel):
    player_id: int = Field(**camel_alias("player_id", "playerId"))
    name: str
    slot: int
    handicap_index: float = Field(**camel_alias("handicap_index", "handicapIndex"))
    course_handicap: int = Field(**camel_alias("course_handicap", "courseHandicap"))
    playing_handicap: int = Field(**camel_alias("playing_handicap", "playingHandicap"))
    strokes_received: int = Field(**camel_alias("strokes_received", "strokesReceived"))
    gross: Dict[int, Optional[int]] = Field(default_factory=dict)
    net: Dict[int, Optional[int]] = Field(default_factory=dict)
    strokes: Dict[int, int] = Field(default_factory=dict)
    contributing: Dict[int, bool] = Field(default_factory=dict)
    gross_totals: Dict[str, Optional[int]] = Field(
        default_factory=dict, **camel_alias("gross_totals", "grossTotals")
    )
    net_totals: Dict[str, Optional[int]] = Field(
        default_factory=dict, **camel_alias("net_totals", "netTotals")
    )

    model_config = ConfigDict(populate_by_name=True)


class SideCard(BaseModel):
    team_id: int = Field(**camel_alias("team_id", "teamId"))
    team_name: str = Field(**camel_alias("team_name", "teamName"))
    status: str
    players: List[PlayerCard] = Field(default_factory=list)
    hole_values: Dict[int, Optional[int]] = Field(
        default_factory=dict, **camel_alias("hole_values", "holeValues")
    )
    totals: Dict[str, Optional[int]] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class MatchScorecard(BaseModel):
    match_id: int = Field(**camel_alias("match_id", "matchId"))
    round_id: int = Field(**camel_alias("round_id", "roundId"))
    format: MatchFormat
    allowance: int
    holes: List[HoleInfo]
    team1: SideCard
    team2: SideCard
    results: Dict[int, HoleResult]
    holes_played: int = Field(**camel_alias("holes_played", "holesPlayed"))
    match_over: bool = Field(**camel_alias("match_over", "matchOver"))
    winner: Optional[str] = None
    winner_team_id: Optional[int] = Field(
        default=None, **camel_alias("winner_team_id", "winnerTeamId")
    )
    state: str
    lifecycle: str
    headline: str
    points: float

    model_config = ConfigDict(populate_by_name=True)

    def summary(self) -> Dict[str, object]:
        """Compact payload for match_status_updated pushes."""

        return {
            "matchId": self.match_id,
            "roundId": self.round_id,
            "team1Status": self.team1.status,
            "team2Status": self.team2.status,
            "holesPlayed": self.holes_played,
            "matchOver": self.match_over,
            "winner": self.winner,
            "winnerTeamId": self.winner_team_id,
            "lifecycle": self.lifecycle,
            "headline": self.headline,
        }


def course_holes(course: Optional[Course]) -> List[HoleInfo]:
    """18 holes of par/rank with ranks forming a 1-18 permutation.

    Holes the course does not define take the default par. Their ranks are
    the ranks no defined hole uses, handed out in default difficulty order.
    """

    defined = {h.hole_number: h for h in course.holes} if course else {}
    missing = sorted(
        (n for n in range(1, HOLES_PER_ROUND + 1) if n not in defined),
        key=lambda n: DEFAULT_HOLE_RANKS[n - 1],
    )
    used = {h.handicap_rank for h in defined.values()}
    free = [rank for rank in range(1, HOLES_PER_ROUND + 1) if rank not in used]
    filled = dict(zip(missing, free))

    holes: List[HoleInfo] = []
    for number in range(1, HOLES_PER_ROUND + 1):
        hole = defined.get(number)
        if hole is not None:
            holes.append(HoleInfo(hole=number, par=hole.par, handicap_rank=hole.handicap_rank))
        else:
            holes.append(
                HoleInfo(
                    hole=number,
                    par=DEFAULT_PARS[number - 1],
                    handicap_rank=filled[number],
                )
            )
    return holes


def _course_handicap(player: Player, course: Optional[Course]) -> int:
    index = player.handicap_index or 0.0
    if course is None or not course.slope:
        return calculate_course_handicap(index, 0, 0, 0)
    rating = course.rating if course.rating is not None else course.par
    return calculate_course_handicap(index, course.slope, rating, course.par)


def _lifecycle(status: MatchStatus, holes_played: int) -> str:
    if status.match_over:
        return "completed"
    if holes_played == 0:
        return "upcoming"
    return "live"


def build_match_scorecard(
    store: TournamentStore,
    match_id: int,
    allowances: Optional[Mapping[MatchFormat, int]] = None,
) -> MatchScorecard:
    match = store.get_match(match_id)
    round_ = store.get_round(match.round_id)
    course = store.get_course(round_.course_id) if round_.course_id else None
    match_format = round_.format
    allowance = (allowances or DEFAULT_ALLOWANCES)[match_format]

    holes = course_holes(course)
    hole_ranks = {info.hole: info.handicap_rank for info in holes}
    gross_by_player: Dict[int, Dict[int, int]] = {}
    for score in store.list_hole_scores(match_id):
        if score.strokes is not None:
            gross_by_player.setdefault(score.player_id, {})[score.hole] = score.strokes

    roster = store.list_match_players(match_id)
    players = {mp.player_id: store.get_player(mp.player_id) for mp in roster}

    course_hcps = {pid: _course_handicap(p, course) for pid, p in players.items()}
    playing_hcps = {
        pid: calculate_playing_handicap(chcp, allowance) for pid, chcp in course_hcps.items()
    }
    lowest = lowest_playing_handicap(playing_hcps.values())

    cards: Dict[int, List[PlayerCard]] = {match.team1_id: [], match.team2_id: []}
    for mp in roster:
        player = players[mp.player_id]
        received = calculate_strokes_received(playing_hcps[mp.player_id], lowest or 0)
        gross = gross_by_player.get(mp.player_id, {})
        card = PlayerCard(
            player_id=player.id,
            name=player.name,
            slot=mp.slot,
            handicap_index=player.handicap_index or 0.0,
            course_handicap=course_hcps[mp.player_id],
            playing_handicap=playing_hcps[mp.player_id],
            strokes_received=received,
        )
        allocation = allocate_strokes(received, hole_ranks)
        for info in holes:
            strokes = allocation[info.hole]
            card.gross[info.hole] = gross.get(info.hole)
            card.strokes[info.hole] = strokes
            card.net[info.hole] = net_or_none(gross.get(info.hole), strokes)
            card.contributing[info.hole] = False
        card.gross_totals = nine_hole_totals(card.gross)
        card.net_totals = nine_hole_totals(card.net)
        cards[mp.team_id].append(card)

    team_values: Dict[int, Dict[int, Optional[int]]] = {
        match.team1_id: {},
        match.team2_id: {},
    }
    results: Dict[int, HoleResult] = {}
    for info in holes:
        for team_id in (match.team1_id, match.team2_id):
            side = cards[team_id]
            nets = [c.net[info.hole] for c in side]
            grosses = [c.gross[info.hole] for c in side]
            team_values[team_id][info.hole] = team_hole_value(match_format, nets, grosses)
            if uses_team_ball(match_format):
                contributor = next(
                    (i for i, gross in enumerate(grosses) if gross is not None), None
                )
            else:
                contributor = best_ball_contributor(nets)
            if contributor is not None:
                side[contributor].contributing[info.hole] = True
        results[info.hole] = determine_hole_winner(
            team_values[match.team1_id][info.hole],
            team_values[match.team2_id][info.hole],
        )

    team1_wins, team2_wins, holes_played = tally_hole_results(results.values())
    status = calculate_match_play_status(team1_wins, team2_wins, holes_played)

    team1 = store.get_team(match.team1_id)
    team2 = store.get_team(match.team2_id)
    winner_team_id = None
    if status.winner is MatchWinner.TEAM1:
        winner_team_id = team1.id
    elif status.winner is MatchWinner.TEAM2:
        winner_team_id = team2.id

    def side_card(team, status_text: str) -> SideCard:
        values = team_values[team.id]
        return SideCard(
            team_id=team.id,
            team_name=team.name,
            status=status_text,
            players=cards[team.id],
            hole_values=values,
            totals=nine_hole_totals(values),
        )

    return MatchScorecard(
        match_id=match.id,
        round_id=round_.id,
        format=match_format,
        allowance=allowance,
        holes=holes,
        team1=side_card(team1, status.team1_status),
        team2=side_card(team2, status.team2_status),
        results=results,
        holes_played=holes_played,
        match_over=status.match_over,
        winner=status.winner.value if status.winner else None,
        winner_team_id=winner_team_id,
        state=status.state.value,
        lifecycle=_lifecycle(status, holes_played),
        headline=match_headline(status, team1.name, team2.name, holes_played),
        points=match.points,
    )


__all__ = [
    "HoleInfo",
    "MatchScorecard",
    "PlayerCard",
    "SideCard",
    "build_match_scorecard",
    "course_holes",
]
