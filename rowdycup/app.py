from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from rowdycup.api.health import health as _health_handler
from rowdycup.api.routers.auth import router as auth_router
from rowdycup.api.routers.courses import router as courses_router
from rowdycup.api.routers.matches import router as matches_router
from rowdycup.api.routers.rounds import router as rounds_router
from rowdycup.api.routers.standings import router as standings_router
from rowdycup.api.routers.teams import router as teams_router
from rowdycup.api.routers.tournaments import router as tournaments_router
from rowdycup.config import get_settings
from rowdycup.metrics import MetricsMiddleware, metrics_app
from rowdycup.tournament.seed import seed_demo
from rowdycup.tournament.store import get_store

from .routes.ws_live import router as ws_live_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_settings().seed_demo:
        seeded = seed_demo(get_store())
        logger.info("demo seed: %s", seeded)
    yield


app = FastAPI(title="Rowdy Cup", lifespan=lifespan)

allow = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in allow if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

app.include_router(auth_router)
app.include_router(tournaments_router)
app.include_router(teams_router)
app.include_router(courses_router)
app.include_router(rounds_router)
app.include_router(matches_router)
app.include_router(standings_router)
app.include_router(ws_live_router)
app.add_api_route(
    "/health",
    _health_handler,
    methods=["GET"],
    response_model=None,
    tags=["health"],
)


_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
