from __future__ import annotations

from typing import List

from rowdycup.metrics import REGISTRY
from rowdycup.telemetry.events import set_telemetry_emitter
from rowdycup.tournament import events


def _post(client, path, payload, headers):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def _setup_singles(client, headers):
    aviators = _post(
        client, "/api/teams", {"name": "Aviators", "captain": "Jordan", "color": "#1e3a8a"}, headers
    )
    producers = _post(
        client, "/api/teams", {"name": "Producers", "captain": "Alex", "color": "#b91c1c"}, headers
    )
    a = _post(
        client, "/api/players", {"name": "Jordan", "teamId": aviators["id"], "handicap": 0}, headers
    )
    b = _post(
        client,
        "/api/players",
        {"name": "Alex", "teamId": producers["id"], "handicapIndex": 0},
        headers,
    )
    round_ = _post(client, "/api/rounds", {"number": 1, "format": "singles"}, headers)
    match = _post(
        client,
        "/api/matches",
        {"roundId": round_["id"], "team1Id": aviators["id"], "team2Id": producers["id"]},
        headers,
    )
    _post(client, f"/api/matches/{match['id']}/players", {"playerId": a["id"]}, headers)
    _post(client, f"/api/matches/{match['id']}/players", {"playerId": b["id"]}, headers)
    return aviators, producers, a, b, round_, match


def test_tournament_endpoints(client, admin_headers):
    created = _post(
        client,
        "/api/tournaments",
        {
            "name": "Rowdy Cup",
            "year": 2026,
            "startDate": "2026-05-01T00:00:00Z",
            "endDate": "2026-05-03T00:00:00Z",
            "location": "Pinehurst",
        },
        admin_headers,
    )
    assert created["isActive"] is False
    assert client.get("/api/tournaments/active").status_code == 404

    response = client.patch(
        f"/api/tournaments/{created['id']}/active",
        json={"isActive": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert client.get("/api/tournaments/active").json()["id"] == created["id"]
    assert client.get(f"/api/tournaments/{created['id']}").json()["name"] == "Rowdy Cup"
    assert len(client.get("/api/tournaments").json()) == 1

    bad_dates = client.post(
        "/api/tournaments",
        json={
            "name": "Backwards",
            "year": 2026,
            "startDate": "2026-05-03T00:00:00Z",
            "endDate": "2026-05-01T00:00:00Z",
        },
        headers=admin_headers,
    )
    assert bad_dates.status_code == 400


def test_course_and_round_endpoints(client, admin_headers):
    course = _post(
        client, "/api/courses", {"name": "Pine Needles", "par": 71, "rating": 71.0, "slope": 130}, admin_headers
    )
    hole = _post(
        client,
        f"/api/courses/{course['id']}/holes",
        {"holeNumber": 1, "par": 4, "handicapRank": 1},
        admin_headers,
    )
    assert hole["courseId"] == course["id"]

    dup = client.post(
        f"/api/courses/{course['id']}/holes",
        json={"holeNumber": 1, "par": 4, "handicapRank": 2},
        headers=admin_headers,
    )
    assert dup.status_code == 409
    assert dup.json()["detail"] == "hole_exists"

    invalid = client.post(
        f"/api/courses/{course['id']}/holes",
        json={"holeNumber": 19, "par": 4, "handicapRank": 2},
        headers=admin_headers,
    )
    assert invalid.status_code == 422

    assert len(client.get(f"/api/courses/{course['id']}/holes").json()) == 1
    assert client.get("/api/courses/999999").json()["detail"] == "course_not_found"

    round_ = _post(
        client,
        "/api/rounds",
        {"number": 1, "courseId": course["id"], "format": "Best Ball", "teeTime": "08:00"},
        admin_headers,
    )
    assert round_["format"] == "best_ball"
    assert round_["status"] == "upcoming"

    status = client.patch(
        f"/api/rounds/{round_['id']}/status", json={"status": "live"}, headers=admin_headers
    )
    assert status.json()["status"] == "live"
    lock = client.patch(
        f"/api/rounds/{round_['id']}/lock", json={"isLocked": True}, headers=admin_headers
    )
    assert lock.json()["isLocked"] is True

    assert client.get(f"/api/rounds/{round_['id']}/matches").json() == []
    deleted = client.delete(f"/api/rounds/{round_['id']}", headers=admin_headers)
    assert deleted.json() == {"success": True}
    assert client.get(f"/api/rounds/{round_['id']}").status_code == 404


def test_score_entry_updates_scorecard_and_pushes_events(client, admin_headers):
    aviators, producers, a, b, round_, match = _setup_singles(client, admin_headers)
    match_id = match["id"]

    received: List[dict] = []
    events.subscribe(received.append)
    telemetry: List[tuple] = []
    set_telemetry_emitter(lambda event, payload: telemetry.append((event, payload)))
    before_ok = REGISTRY.get_sample_value("score_writes_total", {"status": "ok"}) or 0.0

    scores = []
    for hole in range(1, 11):
        scores += [
            {"playerId": a["id"], "hole": hole, "strokes": 3},
            {"playerId": b["id"], "hole": hole, "strokes": 5},
        ]
    response = client.put(
        f"/api/matches/{match_id}/scores", json={"scores": scores}, headers=admin_headers
    )
    assert response.status_code == 200, response.text
    card = response.json()
    assert card["matchOver"] is True
    assert card["team1"]["status"] == "10 & 8"
    assert card["headline"] == "Aviators wins 10 & 8"
    assert card["winnerTeamId"] == aviators["id"]
    assert card["results"]["1"] == "team1"
    assert card["team1"]["players"][0]["gross"]["1"] == 3

    assert [m["type"] for m in received] == [
        "hole_score_updated",
        "match_status_updated",
        "standings_updated",
    ]
    assert received[1]["data"]["team1Status"] == "10 & 8"
    assert received[2]["data"][0]["teamName"] == "Aviators"
    assert received[2]["data"][0]["totalPoints"] == 1.0

    assert [event for event, _ in telemetry] == ["score.write_ms", "match.closed"]
    after_ok = REGISTRY.get_sample_value("score_writes_total", {"status": "ok"})
    assert after_ok == before_ok + 1

    standings = client.get("/api/standings").json()
    assert standings[0]["teamId"] == aviators["id"]
    assert standings[0]["matchesWon"] == 1
    assert standings[1]["teamId"] == producers["id"]
    assert standings[1]["matchesLost"] == 1

    stored = client.get(f"/api/matches/{match_id}/scores").json()
    assert len(stored) == 20
    assert client.get(f"/api/matches/{match_id}/scorecard").json()["lifecycle"] == "completed"
    assert [m["id"] for m in client.get(f"/api/rounds/{round_['id']}/matches").json()] == [match_id]
    assert len(client.get(f"/api/matches/{match_id}/players").json()) == 2
    assert len(client.get(f"/api/teams/{aviators['id']}/players").json()) == 1


def test_score_entry_rejections(client, admin_headers):
    _, _, a, b, _, match = _setup_singles(client, admin_headers)
    match_id = match["id"]
    path = f"/api/matches/{match_id}/scores"

    before_rejected = (
        REGISTRY.get_sample_value("score_writes_total", {"status": "rejected"}) or 0.0
    )
    out_of_range = client.put(
        path,
        json={"scores": [{"playerId": a["id"], "hole": 1, "strokes": 16}]},
        headers=admin_headers,
    )
    assert out_of_range.status_code == 400
    assert out_of_range.json()["detail"] == "invalid_score_entries"
    assert (
        REGISTRY.get_sample_value("score_writes_total", {"status": "rejected"})
        == before_rejected + 1
    )

    partial = client.put(
        path,
        json={
            "scores": [
                {"playerId": a["id"], "hole": 1, "strokes": 4},
                {"playerId": b["id"], "hole": 0, "strokes": 4},
            ]
        },
        headers=admin_headers,
    )
    assert partial.status_code == 400
    assert client.get(path).json() == []

    assert client.put(path, json={"scores": []}, headers=admin_headers).status_code == 422
    unauthenticated = client.put(
        path, json={"scores": [{"playerId": a["id"], "hole": 1, "strokes": 4}]}
    )
    assert unauthenticated.status_code == 401

    lock = client.patch(
        f"/api/matches/{match_id}/lock", json={"isLocked": True}, headers=admin_headers
    )
    assert lock.json()["isLocked"] is True
    locked = client.put(
        path,
        json={"scores": [{"playerId": a["id"], "hole": 1, "strokes": 4}]},
        headers=admin_headers,
    )
    assert locked.status_code == 409
    assert locked.json()["detail"] == "match_locked"

    missing = client.put(
        "/api/matches/999999/scores",
        json={"scores": [{"playerId": a["id"], "hole": 1, "strokes": 4}]},
        headers=admin_headers,
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "match_not_found"


def test_match_assignment_errors(client, admin_headers):
    aviators, producers, a, _, round_, match = _setup_singles(client, admin_headers)

    same_team = client.post(
        "/api/matches",
        json={"roundId": round_["id"], "team1Id": aviators["id"], "team2Id": aviators["id"]},
        headers=admin_headers,
    )
    assert same_team.status_code == 400
    assert same_team.json()["detail"] == "teams_must_differ"

    again = client.post(
        f"/api/matches/{match['id']}/players", json={"playerId": a["id"]}, headers=admin_headers
    )
    assert again.status_code == 409

    extra = _post(
        client, "/api/players", {"name": "Sub", "teamId": producers["id"]}, admin_headers
    )
    full = client.post(
        f"/api/matches/{match['id']}/players", json={"playerId": extra["id"]}, headers=admin_headers
    )
    assert full.status_code == 400
    assert full.json()["detail"] == "team_full"


def test_health_and_metrics(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"

    client.get("/api/teams")
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "requests_total" in metrics.text
    assert 'path="/api/teams"' in metrics.text
