"""Per-hole stroke allocation by hole handicap rank."""

from __future__ import annotations

from typing import Dict, Mapping

HOLES_PER_ROUND = 18


def _valid_rank(rank: int) -> bool:
    return 1 <= rank <= HOLES_PER_ROUND


def does_player_get_stroke_on_hole(strokes_received: int, hole_handicap_rank: int) -> bool:
    if strokes_received <= 0:
        return False
    if not _valid_rank(hole_handicap_rank):
        return False
    if strokes_received >= HOLES_PER_ROUND:
        return True
    return hole_handicap_rank <= strokes_received


def strokes_on_hole(strokes_received: int, hole_handicap_rank: int) -> int:
    """Number of strokes received on a hole.

    Every full loop of 18 gives one stroke on every hole; the remainder goes
    to the hardest-ranked holes, rank 1 first.
    """

    if strokes_received <= 0 or not _valid_rank(hole_handicap_rank):
        return 0
    loops, extra = divmod(int(strokes_received), HOLES_PER_ROUND)
    return loops + (1 if hole_handicap_rank <= extra else 0)


def allocate_strokes(strokes_received: int, hole_ranks: Mapping[int, int]) -> Dict[int, int]:
    """Map each hole number to the strokes received there."""

    return {
        hole: strokes_on_hole(strokes_received, rank)
        for hole, rank in sorted(hole_ranks.items())
    }


__all__ = [
    "HOLES_PER_ROUND",
    "allocate_strokes",
    "does_player_get_stroke_on_hole",
    "strokes_on_hole",
]
