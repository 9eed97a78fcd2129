from __future__ import annotations

import itertools
from datetime import datetime
from enum import Enum
from threading import Lock
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rowdycup.scoring.formats import DEFAULT_FORMAT, MatchFormat

_IDS = itertools.count(1)
_IDS_LOCK = Lock()


def new_id() -> int:
    """Next identifier; ids are unique across every entity type."""

    with _IDS_LOCK:
        return next(_IDS)


def camel_alias(snake: str, camel: str) -> dict:
    return {
        "validation_alias": AliasChoices(snake, camel),
        "serialization_alias": camel,
    }


class RoundStatus(str, Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"


class Tournament(BaseModel):
    id: int
    name: str
    year: int
    start_date: datetime = Field(**camel_alias("start_date", "startDate"))
    end_date: datetime = Field(**camel_alias("end_date", "endDate"))
    location: Optional[str] = None
    status: RoundStatus = RoundStatus.UPCOMING
    is_active: bool = Field(default=False, **camel_alias("is_active", "isActive"))

    model_config = ConfigDict(populate_by_name=True)


class Team(BaseModel):
    id: int
    name: str
    captain: str
    color: str
    logo: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class Player(BaseModel):
    id: int
    name: str
    team_id: Optional[int] = Field(default=None, **camel_alias("team_id", "teamId"))
    handicap_index: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("handicap_index", "handicapIndex", "handicap"),
        serialization_alias="handicapIndex",
    )
    photo: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CourseHole(BaseModel):
    id: int
    course_id: int = Field(**camel_alias("course_id", "courseId"))
    hole_number: int = Field(ge=1, le=18, **camel_alias("hole_number", "holeNumber"))
    par: int = Field(ge=3, le=6)
    yardage: Optional[int] = None
    handicap_rank: int = Field(**camel_alias("handicap_rank", "handicapRank"))

    model_config = ConfigDict(populate_by_name=True)


class Course(BaseModel):
    id: int
    name: str
    par: int = 72
    yardage: Optional[int] = None
    description: Optional[str] = None
    rating: Optional[float] = None
    slope: Optional[int] = None
    holes: List[CourseHole] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class Round(BaseModel):
    id: int
    tournament_id: Optional[int] = Field(
        default=None, **camel_alias("tournament_id", "tournamentId")
    )
    number: int
    course_id: Optional[int] = Field(default=None, **camel_alias("course_id", "courseId"))
    format: MatchFormat = DEFAULT_FORMAT
    date: Optional[datetime] = None
    tee_time: Optional[str] = Field(default=None, **camel_alias("tee_time", "teeTime"))
    status: RoundStatus = RoundStatus.UPCOMING
    is_locked: bool = Field(default=False, **camel_alias("is_locked", "isLocked"))

    model_config = ConfigDict(populate_by_name=True)


class Match(BaseModel):
    id: int
    round_id: int = Field(**camel_alias("round_id", "roundId"))
    team1_id: int = Field(**camel_alias("team1_id", "team1Id"))
    team2_id: int = Field(**camel_alias("team2_id", "team2Id"))
    points: float = 1.0
    is_locked: bool = Field(default=False, **camel_alias("is_locked", "isLocked"))

    model_config = ConfigDict(populate_by_name=True)


class MatchPlayer(BaseModel):
    id: int
    match_id: int = Field(**camel_alias("match_id", "matchId"))
    player_id: int = Field(**camel_alias("player_id", "playerId"))
    team_id: int = Field(**camel_alias("team_id", "teamId"))
    slot: int = 1

    model_config = ConfigDict(populate_by_name=True)


class HoleScore(BaseModel):
    match_id: int = Field(**camel_alias("match_id", "matchId"))
    player_id: int = Field(**camel_alias("player_id", "playerId"))
    hole: int
    strokes: Optional[int] = None
    updated_at: datetime = Field(**camel_alias("updated_at", "updatedAt"))

    model_config = ConfigDict(populate_by_name=True)


class TeamStanding(BaseModel):
    team_id: int = Field(**camel_alias("team_id", "teamId"))
    team_name: str = Field(**camel_alias("team_name", "teamName"))
    color: Optional[str] = None
    round_points: dict[int, float] = Field(
        default_factory=dict, **camel_alias("round_points", "roundPoints")
    )
    total_points: float = Field(default=0.0, **camel_alias("total_points", "totalPoints"))
    matches_won: int = Field(default=0, **camel_alias("matches_won", "matchesWon"))
    matches_halved: int = Field(default=0, **camel_alias("matches_halved", "matchesHalved"))
    matches_lost: int = Field(default=0, **camel_alias("matches_lost", "matchesLost"))

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "camel_alias",
    "Course",
    "CourseHole",
    "HoleScore",
    "Match",
    "MatchPlayer",
    "Player",
    "Round",
    "RoundStatus",
    "Team",
    "TeamStanding",
    "Tournament",
    "new_id",
]
