"""Push event taxonomy and the in-process subscriber registry."""

from __future__ import annotations

import logging
from enum import Enum
from threading import Lock
from time import time
from typing import Any, Callable, Dict, Set

Subscriber = Callable[[dict], None]

_SUBSCRIBERS: Set[Subscriber] = set()
_LOCK = Lock()
_logger = logging.getLogger("rowdycup.tournament.events")


class LiveEvent(str, Enum):
    TEAM_CREATED = "team_created"
    PLAYER_CREATED = "player_created"
    COURSE_CREATED = "course_created"
    COURSE_HOLE_CREATED = "course_hole_created"
    TOURNAMENT_CREATED = "tournament_created"
    TOURNAMENT_ACTIVE_UPDATED = "tournament_active_updated"
    ROUND_CREATED = "round_created"
    ROUND_STATUS_UPDATED = "round_status_updated"
    ROUND_LOCK_UPDATED = "round_lock_updated"
    ROUND_DELETED = "round_deleted"
    MATCH_CREATED = "match_created"
    MATCH_PLAYER_ADDED = "match_player_added"
    MATCH_LOCK_UPDATED = "match_lock_updated"
    HOLE_SCORE_UPDATED = "hole_score_updated"
    MATCH_STATUS_UPDATED = "match_status_updated"
    STANDINGS_UPDATED = "standings_updated"


def envelope(event: LiveEvent | str, data: Any) -> Dict[str, Any]:
    return {
        "type": LiveEvent(event).value,
        "data": data,
        "ts": int(time() * 1000),
    }


def subscribe(cb: Subscriber) -> None:
    with _LOCK:
        _SUBSCRIBERS.add(cb)


def unsubscribe(cb: Subscriber) -> None:
    with _LOCK:
        _SUBSCRIBERS.discard(cb)


def publish(event: LiveEvent | str, data: Any) -> Dict[str, Any]:
    """Hand an event envelope to every subscriber and return it."""

    message = envelope(event, data)
    with _LOCK:
        callbacks = list(_SUBSCRIBERS)
    for cb in callbacks:
        try:
            cb(message)
        except Exception:
            _logger.exception("subscriber failed for %s", message["type"])
    return message


def reset() -> None:
    """Drop all subscribers (used in tests)."""

    with _LOCK:
        _SUBSCRIBERS.clear()


__all__ = ["LiveEvent", "envelope", "publish", "reset", "subscribe", "unsubscribe"]
