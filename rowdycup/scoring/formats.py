"""Round formats and how each one reduces a team to a per-hole number."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Sequence

from .best_ball import calculate_best_ball_net


class MatchFormat(str, Enum):
    BEST_BALL = "best_ball"
    SHAMBLE = "shamble"
    SCRAMBLE = "scramble"
    SCRAMBLE_4V4 = "scramble_4v4"
    SINGLES = "singles"


DEFAULT_FORMAT = MatchFormat.BEST_BALL

DEFAULT_ALLOWANCES: Mapping[MatchFormat, int] = {
    MatchFormat.BEST_BALL: 90,
    MatchFormat.SHAMBLE: 90,
    MatchFormat.SCRAMBLE: 0,
    MatchFormat.SCRAMBLE_4V4: 0,
    MatchFormat.SINGLES: 100,
}

TEAM_SIZES: Mapping[MatchFormat, int] = {
    MatchFormat.BEST_BALL: 2,
    MatchFormat.SHAMBLE: 2,
    MatchFormat.SCRAMBLE: 2,
    MatchFormat.SCRAMBLE_4V4: 4,
    MatchFormat.SINGLES: 1,
}

_ALIASES = {
    "best ball": MatchFormat.BEST_BALL,
    "2-man best ball": MatchFormat.BEST_BALL,
    "four-ball": MatchFormat.BEST_BALL,
    "fourball": MatchFormat.BEST_BALL,
    "2v2 shamble": MatchFormat.SHAMBLE,
    "2v2 scramble": MatchFormat.SCRAMBLE,
    "4v4 scramble": MatchFormat.SCRAMBLE_4V4,
    "singles match": MatchFormat.SINGLES,
    "match play": MatchFormat.SINGLES,
}


def normalize_format(value: object) -> MatchFormat:
    """Resolve a stored format label; unknown labels fall back to best ball."""

    if isinstance(value, MatchFormat):
        return value
    if not isinstance(value, str):
        return DEFAULT_FORMAT
    key = value.strip().lower()
    try:
        return MatchFormat(key.replace("-", "_").replace(" ", "_"))
    except ValueError:
        return _ALIASES.get(key, DEFAULT_FORMAT)


def uses_team_ball(match_format: MatchFormat) -> bool:
    return match_format in (MatchFormat.SCRAMBLE, MatchFormat.SCRAMBLE_4V4)


def team_hole_value(
    match_format: MatchFormat,
    nets: Sequence[Optional[int]],
    grosses: Sequence[Optional[int]],
) -> Optional[int]:
    """Comparable team number for one hole.

    Scrambles play a single team ball: the first slot with an entered score
    is the team score. Every other format takes the best net.
    """

    if uses_team_ball(match_format):
        for gross in grosses:
            if gross is not None:
                return gross
        return None
    return calculate_best_ball_net(nets)


__all__ = [
    "DEFAULT_ALLOWANCES",
    "DEFAULT_FORMAT",
    "MatchFormat",
    "TEAM_SIZES",
    "normalize_format",
    "team_hole_value",
    "uses_team_ball",
]
