"""Match-play status engine.

The status is a pure function of three counts: holes won by each side and
holes played. It is recomputed from the hole results on every read, so there
is no running state to keep in sync with score edits.

States:

* ``ongoing`` - holes remain and neither side is out of reach.
* ``closed_out`` - the lead exceeds the holes remaining ("5 & 4").
* ``finished`` - all 18 holes played without an early closeout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from .best_ball import HoleResult
from .strokes import HOLES_PER_ROUND

ALL_SQUARE = "AS"


class MatchState(str, Enum):
    ONGOING = "ongoing"
    CLOSED_OUT = "closed_out"
    FINISHED = "finished"


class MatchWinner(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    TIE = "tie"


@dataclass(frozen=True)
class MatchStatus:
    team1_status: str
    team2_status: str
    match_over: bool
    winner: Optional[MatchWinner] = None
    state: MatchState = MatchState.ONGOING

    def to_dict(self) -> Dict[str, object]:
        return {
            "team1Status": self.team1_status,
            "team2Status": self.team2_status,
            "matchOver": self.match_over,
            "winner": self.winner.value if self.winner else None,
            "state": self.state.value,
        }


def _leader(diff: int) -> MatchWinner:
    return MatchWinner.TEAM1 if diff > 0 else MatchWinner.TEAM2


def calculate_match_play_status(
    side_a_wins: int, side_b_wins: int, holes_played: int
) -> MatchStatus:
    diff = side_a_wins - side_b_wins
    remaining = HOLES_PER_ROUND - holes_played
    margin = abs(diff)

    if remaining > 0 and margin > remaining:
        closed = f"{margin} & {remaining}"
        return MatchStatus(
            team1_status=closed,
            team2_status=closed,
            match_over=True,
            winner=_leader(diff),
            state=MatchState.CLOSED_OUT,
        )

    if remaining <= 0:
        # The final margin after 18 is always rendered as "1 UP"/"1 DN".
        if diff > 0:
            return MatchStatus("1 UP", "1 DN", True, MatchWinner.TEAM1, MatchState.FINISHED)
        if diff < 0:
            return MatchStatus("1 DN", "1 UP", True, MatchWinner.TEAM2, MatchState.FINISHED)
        return MatchStatus(ALL_SQUARE, ALL_SQUARE, True, MatchWinner.TIE, MatchState.FINISHED)

    if diff == 0:
        return MatchStatus(ALL_SQUARE, ALL_SQUARE, False)
    if diff > 0:
        return MatchStatus(f"{margin} UP", f"{margin} DN", False)
    return MatchStatus(f"{margin} DN", f"{margin} UP", False)


def tally_hole_results(results: Iterable[HoleResult]) -> Tuple[int, int, int]:
    """Count (team1 wins, team2 wins, holes played); undetermined holes are skipped."""

    team1 = team2 = played = 0
    for result in results:
        if result is HoleResult.UNDETERMINED:
            continue
        played += 1
        if result is HoleResult.TEAM1:
            team1 += 1
        elif result is HoleResult.TEAM2:
            team2 += 1
    return team1, team2, played


def match_status_from_results(results: Iterable[HoleResult]) -> MatchStatus:
    return calculate_match_play_status(*tally_hole_results(results))


__all__ = [
    "ALL_SQUARE",
    "MatchState",
    "MatchStatus",
    "MatchWinner",
    "calculate_match_play_status",
    "match_status_from_results",
    "tally_hole_results",
]
