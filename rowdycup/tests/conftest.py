"""Shared pytest fixtures for rowdycup tests."""

from __future__ import annotations

from typing import Callable, Dict, Sequence

import pytest
from fastapi.testclient import TestClient

from rowdycup.app import app
from rowdycup.auth import sessions
from rowdycup.config import reset_settings_cache
from rowdycup.scoring.formats import MatchFormat
from rowdycup.scoring.scorecard import DEFAULT_HOLE_RANKS, DEFAULT_PARS
from rowdycup.telemetry.events import set_telemetry_emitter
from rowdycup.tournament import events
from rowdycup.tournament.store import TournamentStore, get_store

ADMIN_PASSWORD = "rowdy-test"


@pytest.fixture
def anyio_backend() -> str:  # pragma: no cover - fixture declaration
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ROWDYCUP_ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.delenv("REQUIRE_API_KEY", raising=False)
    reset_settings_cache()
    sessions.reset()
    events.reset()
    set_telemetry_emitter(None)
    yield
    events.reset()
    set_telemetry_emitter(None)
    reset_settings_cache()


@pytest.fixture
def store() -> TournamentStore:
    return TournamentStore(score_min=1, score_max=15)


@pytest.fixture
def client(store: TournamentStore):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def admin_headers(client: TestClient) -> Dict[str, str]:
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def make_match(store: TournamentStore) -> Callable[..., Dict[str, object]]:
    """Build teams, a rated course and one match with the given handicap indexes."""

    def _make(
        team1_indexes: Sequence[float] = (0.0, 10.0),
        team2_indexes: Sequence[float] = (4.0, 20.0),
        *,
        match_format: MatchFormat = MatchFormat.BEST_BALL,
        slope: int | None = 113,
        rating: float | None = 71.0,
    ) -> Dict[str, object]:
        aviators = store.create_team(name="Aviators", captain="Jordan", color="#1e3a8a")
        producers = store.create_team(name="Producers", captain="Alex", color="#b91c1c")
        course = store.create_course(
            name="Pine Needles", par=sum(DEFAULT_PARS), rating=rating, slope=slope
        )
        for number, (par, rank) in enumerate(zip(DEFAULT_PARS, DEFAULT_HOLE_RANKS), start=1):
            store.add_course_hole(course.id, hole_number=number, par=par, handicap_rank=rank)
        round_ = store.create_round(number=1, course_id=course.id, format=match_format)
        match = store.create_match(
            round_id=round_.id, team1_id=aviators.id, team2_id=producers.id
        )

        team1_players = []
        team2_players = []
        for team, indexes, bucket in (
            (aviators, team1_indexes, team1_players),
            (producers, team2_indexes, team2_players),
        ):
            for slot, index in enumerate(indexes, start=1):
                player = store.create_player(
                    name=f"{team.name} {slot}", team_id=team.id, handicap_index=index
                )
                store.add_match_player(match.id, player_id=player.id)
                bucket.append(player.id)

        return {
            "team1": aviators,
            "team2": producers,
            "course": course,
            "round": round_,
            "match": match,
            "team1_players": team1_players,
            "team2_players": team2_players,
        }

    return _make
