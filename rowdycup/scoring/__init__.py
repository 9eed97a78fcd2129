"""Golf scoring core: handicaps, stroke allocation, net, best ball, match play."""

from .best_ball import (
    HoleResult,
    best_ball_contributor,
    calculate_best_ball_net,
    determine_hole_winner,
)
from .handicap import (
    calculate_course_handicap,
    calculate_playing_handicap,
    calculate_strokes_received,
)
from .match_play import (
    MatchState,
    MatchStatus,
    MatchWinner,
    calculate_match_play_status,
    match_status_from_results,
    tally_hole_results,
)
from .net import calculate_net_score
from .strokes import does_player_get_stroke_on_hole, strokes_on_hole

__all__ = [
    "HoleResult",
    "MatchState",
    "MatchStatus",
    "MatchWinner",
    "best_ball_contributor",
    "calculate_best_ball_net",
    "calculate_course_handicap",
    "calculate_match_play_status",
    "calculate_net_score",
    "calculate_playing_handicap",
    "calculate_strokes_received",
    "determine_hole_winner",
    "does_player_get_stroke_on_hole",
    "match_status_from_results",
    "strokes_on_hole",
    "tally_hole_results",
]
