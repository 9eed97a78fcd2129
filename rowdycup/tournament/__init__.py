"""Tournament models, store and derived scorecards."""

from .models import (
    Course,
    CourseHole,
    HoleScore,
    Match,
    MatchPlayer,
    Player,
    Round,
    RoundStatus,
    Team,
    TeamStanding,
    Tournament,
)
from .store import Conflict, InvalidEntry, NotFound, StoreError, TournamentStore, get_store

__all__ = [
    "Conflict",
    "Course",
    "CourseHole",
    "HoleScore",
    "InvalidEntry",
    "Match",
    "MatchPlayer",
    "NotFound",
    "Player",
    "Round",
    "RoundStatus",
    "StoreError",
    "Team",
    "TeamStanding",
    "Tournament",
    "TournamentStore",
    "get_store",
]
