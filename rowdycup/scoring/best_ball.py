"""Best-ball reduction of team net scores and per-hole winners."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence


class HoleResult(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    TIE = "tie"
    UNDETERMINED = "undetermined"


def calculate_best_ball_net(net_scores: Sequence[Optional[int]]) -> Optional[int]:
    present = [score for score in net_scores if score is not None]
    if not present:
        return None
    return min(present)


def best_ball_contributor(net_scores: Sequence[Optional[int]]) -> Optional[int]:
    """Slot index of the first player holding the team's best net."""

    best = calculate_best_ball_net(net_scores)
    if best is None:
        return None
    for index, score in enumerate(net_scores):
        if score == best:
            return index
    return None  # pragma: no cover - best always comes from net_scores


def determine_hole_winner(
    team1_value: Optional[int], team2_value: Optional[int]
) -> HoleResult:
    if team1_value is None or team2_value is None:
        return HoleResult.UNDETERMINED
    if team1_value < team2_value:
        return HoleResult.TEAM1
    if team2_value < team1_value:
        return HoleResult.TEAM2
    return HoleResult.TIE


__all__ = [
    "HoleResult",
    "best_ball_contributor",
    "calculate_best_ball_net",
    "determine_hole_winner",
]
