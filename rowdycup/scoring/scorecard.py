"""Display helpers for scorecards: nine-hole sums, to-par text, headlines."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .match_play import ALL_SQUARE, MatchState, MatchStatus, MatchWinner

DEFAULT_PARS: Sequence[int] = (4, 4, 3, 4, 5, 4, 3, 4, 4, 4, 4, 3, 5, 4, 3, 4, 4, 5)
DEFAULT_HOLE_RANKS: Sequence[int] = (
    1, 11, 17, 5, 3, 15, 13, 7, 9, 2, 12, 18, 4, 6, 16, 14, 8, 10,
)

FRONT_NINE = (1, 9)
BACK_NINE = (10, 18)
FULL_ROUND = (1, 18)


def sum_holes(values: Mapping[int, Optional[int]], start: int, end: int) -> Optional[int]:
    """Sum the entered values for holes start..end; None when none are entered."""

    present = [
        value
        for hole, value in values.items()
        if start <= hole <= end and value is not None
    ]
    if not present:
        return None
    return sum(present)


def nine_hole_totals(values: Mapping[int, Optional[int]]) -> dict[str, Optional[int]]:
    return {
        "out": sum_holes(values, *FRONT_NINE),
        "in": sum_holes(values, *BACK_NINE),
        "total": sum_holes(values, *FULL_ROUND),
    }


def score_relative_to_par(diff: int) -> str:
    if diff == 0:
        return "E"
    if diff < 0:
        return str(diff)
    return f"+{diff}"


def hole_score_class(strokes: int, par: int) -> str:
    diff = strokes - par
    if diff <= -2:
        return "eagle"
    if diff == -1:
        return "birdie"
    if diff == 0:
        return "par"
    if diff == 1:
        return "bogey"
    return "double-bogey"


def match_headline(
    status: MatchStatus, team1_name: str, team2_name: str, holes_played: int
) -> str:
    """One-line match summary such as "Aviators 2 UP" or "Producers wins 5 & 4"."""

    if status.winner is MatchWinner.TIE or status.team1_status == ALL_SQUARE:
        return ALL_SQUARE if holes_played > 0 else ""

    leader_name = team1_name if status.winner is MatchWinner.TEAM1 else team2_name
    if status.state is MatchState.CLOSED_OUT:
        return f"{leader_name} wins {status.team1_status}"
    if status.state is MatchState.FINISHED:
        return f"{leader_name} wins 1 UP"

    if status.team1_status.endswith("UP"):
        return f"{team1_name} {status.team1_status}"
    return f"{team2_name} {status.team2_status}"


__all__ = [
    "BACK_NINE",
    "DEFAULT_HOLE_RANKS",
    "DEFAULT_PARS",
    "FRONT_NINE",
    "FULL_ROUND",
    "hole_score_class",
    "match_headline",
    "nine_hole_totals",
    "score_relative_to_par",
    "sum_holes",
]
