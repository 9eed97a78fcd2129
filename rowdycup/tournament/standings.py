"""Team standings derived from match scorecards."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from rowdycup.scoring.formats import MatchFormat

from .models import TeamStanding
from .store import TournamentStore
from .views import MatchScorecard, build_match_scorecard

WON = "won"
HALVED = "halved"
LOST = "lost"


def match_outcome(card: MatchScorecard, team_id: int) -> Optional[Tuple[str, float]]:
    """(outcome, points earned) for a side of a finished match, else None."""

    if not card.match_over or team_id not in (card.team1.team_id, card.team2.team_id):
        return None
    if card.winner == "tie":
        return HALVED, card.points / 2
    if card.winner_team_id == team_id:
        return WON, card.points
    return LOST, 0.0


def calculate_team_points(cards: Iterable[MatchScorecard], team_id: int) -> float:
    """Points a team has banked from finished matches."""

    total = 0.0
    for card in cards:
        outcome = match_outcome(card, team_id)
        if outcome is not None:
            total += outcome[1]
    return total


def build_standings(
    store: TournamentStore,
    allowances: Optional[Mapping[MatchFormat, int]] = None,
    tournament_id: int | None = None,
) -> List[TeamStanding]:
    rounds = {r.id: r for r in store.list_rounds(tournament_id)}
    table: Dict[int, TeamStanding] = {
        team.id: TeamStanding(team_id=team.id, team_name=team.name, color=team.color)
        for team in store.list_teams()
    }

    cards_by_round: Dict[int, List[MatchScorecard]] = {}
    for match in store.list_matches():
        round_ = rounds.get(match.round_id)
        if round_ is None:
            continue
        card = build_match_scorecard(store, match.id, allowances)
        cards_by_round.setdefault(round_.number, []).append(card)

    for number, cards in cards_by_round.items():
        for team_id, standing in table.items():
            for card in cards:
                outcome = match_outcome(card, team_id)
                if outcome is None:
                    continue
                if outcome[0] == WON:
                    standing.matches_won += 1
                elif outcome[0] == HALVED:
                    standing.matches_halved += 1
                else:
                    standing.matches_lost += 1
            if any(match_outcome(card, team_id) for card in cards):
                earned = calculate_team_points(cards, team_id)
                standing.round_points[number] = earned
                standing.total_points += earned

    return sorted(table.values(), key=lambda s: (-s.total_points, s.team_name))


__all__ = ["build_standings", "calculate_team_points", "match_outcome"]
