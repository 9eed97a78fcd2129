"""Telemetry helpers for scoring and admin instrumentation."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, MutableMapping, Optional

TelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[TelemetryEmitter] = None
_logger = logging.getLogger("rowdycup.telemetry.events")


def set_telemetry_emitter(candidate: TelemetryEmitter | None) -> None:
    """Register a telemetry emitter used for scoring instrumentation."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover - logging only
        _logger.exception("failed to emit telemetry event %s", event)


def _now_ms() -> int:
    from time import time

    return int(time() * 1000)


def record_score_write(
    match_id: int,
    duration_ms: float,
    *,
    status: str,
    entries: int = 0,
) -> None:
    payload: Dict[str, object] = {
        "matchId": match_id,
        "durationMs": int(max(0, round(duration_ms))),
        "status": status,
        "entries": int(entries),
        "ts": _now_ms(),
    }
    _safe_emit("score.write_ms", payload)


def record_match_closed(match_id: int, *, headline: str, winner: str | None) -> None:
    payload: Dict[str, object] = {
        "matchId": match_id,
        "headline": headline,
        "ts": _now_ms(),
    }
    if winner:
        payload["winner"] = winner
    _safe_emit("match.closed", payload)


def record_login(*, success: bool, session_id: str | None = None) -> None:
    payload: Dict[str, object] = {"success": bool(success), "ts": _now_ms()}
    if session_id:
        payload["sessionId"] = session_id
    _safe_emit("auth.login", payload)


__all__ = [
    "TelemetryEmitter",
    "record_login",
    "record_match_closed",
    "record_score_write",
    "set_telemetry_emitter",
]
