from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from rowdycup.api.deps import dump, get_store, http_error
from rowdycup.routes.ws_live import broadcast_event
from rowdycup.security import require_admin_session, require_api_key
from rowdycup.tournament.events import LiveEvent
from rowdycup.tournament.models import Course, CourseHole, camel_alias
from rowdycup.tournament.store import StoreError, TournamentStore

router = APIRouter(
    prefix="/api/courses",
    tags=["courses"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger(__name__)


class CourseCreateIn(BaseModel):
    name: str = Field(..., min_length=1)
    par: int = Field(default=72, ge=54, le=90)
    yardage: Optional[int] = None
    description: Optional[str] = None
    rating: Optional[float] = None
    slope: Optional[int] = Field(default=None, ge=0, le=155)


class CourseHoleIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hole_number: int = Field(..., ge=1, le=18, **camel_alias("hole_number", "holeNumber"))
    par: int = Field(..., ge=3, le=6)
    handicap_rank: int = Field(
        ..., ge=1, le=18, **camel_alias("handicap_rank", "handicapRank")
    )
    yardage: Optional[int] = None


@router.get("", response_model=List[Course])
def list_courses(store: TournamentStore = Depends(get_store)):
    return store.list_courses()


@router.post("", response_model=Course, dependencies=[Depends(require_admin_session)])
async def create_course(payload: CourseCreateIn, store: TournamentStore = Depends(get_store)):
    course = store.create_course(
        name=payload.name.strip(),
        par=payload.par,
        yardage=payload.yardage,
        description=payload.description,
        rating=payload.rating,
        slope=payload.slope,
    )
    logger.info("created course %s (%s)", course.id, course.name)
    await broadcast_event(LiveEvent.COURSE_CREATED, dump(course))
    return course


@router.get("/{course_id}", response_model=Course)
def get_course(course_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.get_course(course_id)
    except StoreError as exc:
        raise http_error(exc) from exc


@router.get("/{course_id}/holes", response_model=List[CourseHole])
def list_course_holes(course_id: int, store: TournamentStore = Depends(get_store)):
    try:
        return store.get_course(course_id).holes
    except StoreError as exc:
        raise http_error(exc) from exc


@router.post(
    "/{course_id}/holes",
    response_model=CourseHole,
    dependencies=[Depends(require_admin_session)],
)
async def add_course_hole(
    course_id: int, payload: CourseHoleIn, store: TournamentStore = Depends(get_store)
):
    try:
        hole = store.add_course_hole(
            course_id,
            hole_number=payload.hole_number,
            par=payload.par,
            handicap_rank=payload.handicap_rank,
            yardage=payload.yardage,
        )
    except StoreError as exc:
        raise http_error(exc) from exc
    await broadcast_event(LiveEvent.COURSE_HOLE_CREATED, dump(hole))
    return hole
