"""Handicap index to course, playing and received-stroke conversions."""

from __future__ import annotations

import math
from typing import Iterable, Optional

STANDARD_SLOPE = 113


def round_half_up(value: float) -> int:
    """Round to the nearest whole number with .5 going toward +infinity."""

    return int(math.floor(float(value) + 0.5))


def calculate_course_handicap(
    handicap_index: float,
    slope_rating: float,
    course_rating: float,
    course_par: float,
) -> int:
    """Return the course handicap for *handicap_index* on a rated course.

    A zero slope is treated as an unrated course and the index is simply
    rounded. Negative ("plus") indexes flow through unchanged.
    """

    if slope_rating == 0:
        return round_half_up(handicap_index)
    return round_half_up(
        handicap_index * (slope_rating / STANDARD_SLOPE) + (course_rating - course_par)
    )


def calculate_playing_handicap(
    course_handicap: float, allowance_percentage: float = 100
) -> int:
    return round_half_up(course_handicap * allowance_percentage / 100)


def calculate_strokes_received(
    player_playing_handicap: float, lowest_playing_handicap_in_group: float
) -> int:
    """Strokes given to a player relative to the group's scratch reference."""

    return max(0, round_half_up(player_playing_handicap - lowest_playing_handicap_in_group))


def lowest_playing_handicap(values: Iterable[Optional[float]]) -> Optional[int]:
    present = [value for value in values if value is not None]
    if not present:
        return None
    return round_half_up(min(present))


__all__ = [
    "STANDARD_SLOPE",
    "calculate_course_handicap",
    "calculate_playing_handicap",
    "calculate_strokes_received",
    "lowest_playing_handicap",
    "round_half_up",
]
