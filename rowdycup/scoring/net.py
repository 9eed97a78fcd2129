from __future__ import annotations

from typing import Optional


def calculate_net_score(gross_score: int, gets_stroke: bool | int) -> int:
    """Gross minus the strokes received on the hole.

    ``gets_stroke`` may be a bool (one stroke or none) or a stroke count.
    The result is not floored; a zero or negative net is valid arithmetic.
    """

    return int(gross_score) - int(gets_stroke)


def net_or_none(gross_score: Optional[int], strokes: bool | int) -> Optional[int]:
    if gross_score is None:
        return None
    return calculate_net_score(gross_score, strokes)


__all__ = ["calculate_net_score", "net_or_none"]
