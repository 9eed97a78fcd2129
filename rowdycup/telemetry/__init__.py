"""Telemetry emitters for scoring and admin activity."""

from .events import (
    record_login,
    record_match_closed,
    record_score_write,
    set_telemetry_emitter,
)

__all__ = [
    "record_login",
    "record_match_closed",
    "record_score_write",
    "set_telemetry_emitter",
]
