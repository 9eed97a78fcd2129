from __future__ import annotations

from datetime import datetime, timezone

import pytest

from rowdycup.scoring.formats import MatchFormat
from rowdycup.tournament.models import RoundStatus
from rowdycup.tournament.store import Conflict, InvalidEntry, NotFound


def _tournament(store, name="Rowdy Cup", active=False):
    now = datetime(2026, 5, 1, tzinfo=timezone.utc)
    return store.create_tournament(
        name=name, year=2026, start_date=now, end_date=now, is_active=active
    )


def test_only_one_tournament_is_active(store):
    first = _tournament(store, "2025", active=True)
    second = _tournament(store, "2026", active=True)

    assert store.get_active_tournament().id == second.id
    assert store.get_tournament(first.id).is_active is False

    store.set_tournament_active(second.id, False)
    assert store.get_active_tournament() is None


def test_returned_models_are_copies(store):
    team = store.create_team(name="Aviators", captain="Jordan", color="#000")
    team.name = "Renamed"
    assert store.get_team(team.id).name == "Aviators"


def test_missing_entities_raise_not_found(store):
    with pytest.raises(NotFound, match="match_not_found"):
        store.get_match(999)
    with pytest.raises(NotFound, match="team_not_found"):
        store.create_player(name="Ghost", team_id=999)


def test_course_holes_reject_duplicates(store):
    course = store.create_course(name="Pine Needles")
    store.add_course_hole(course.id, hole_number=1, par=4, handicap_rank=7)

    with pytest.raises(Conflict, match="hole_exists"):
        store.add_course_hole(course.id, hole_number=1, par=4, handicap_rank=3)
    with pytest.raises(InvalidEntry, match="duplicate_handicap_rank"):
        store.add_course_hole(course.id, hole_number=2, par=4, handicap_rank=7)

    store.add_course_hole(course.id, hole_number=3, par=3, handicap_rank=17)
    store.add_course_hole(course.id, hole_number=2, par=5, handicap_rank=1)
    assert [h.hole_number for h in store.get_course(course.id).holes] == [1, 2, 3]


def test_round_format_is_normalized(store):
    round_ = store.create_round(number=2, format="2v2 Scramble")
    assert round_.format is MatchFormat.SCRAMBLE
    assert store.set_round_status(round_.id, "live").status is RoundStatus.LIVE


def test_match_player_assignment_rules(store, make_match):
    ids = make_match()
    match = ids["match"]

    with pytest.raises(Conflict, match="player_already_in_match"):
        store.add_match_player(match.id, player_id=ids["team1_players"][0])

    extra = store.create_player(name="Third", team_id=ids["team1"].id)
    with pytest.raises(InvalidEntry, match="team_full"):
        store.add_match_player(match.id, player_id=extra.id)

    outsider_team = store.create_team(name="Outsiders", captain="X", color="#fff")
    outsider = store.create_player(name="Outsider", team_id=outsider_team.id)
    with pytest.raises(InvalidEntry, match="team_not_in_match"):
        store.add_match_player(match.id, player_id=outsider.id)

    roster = store.list_match_players(match.id)
    assert [(mp.team_id, mp.slot) for mp in roster] == [
        (ids["team1"].id, 1),
        (ids["team1"].id, 2),
        (ids["team2"].id, 1),
        (ids["team2"].id, 2),
    ]


def test_match_teams_must_differ(store):
    team = store.create_team(name="Aviators", captain="Jordan", color="#000")
    round_ = store.create_round(number=1)
    with pytest.raises(InvalidEntry, match="teams_must_differ"):
        store.create_match(round_id=round_.id, team1_id=team.id, team2_id=team.id)


def test_score_batch_is_all_or_nothing(store, make_match):
    ids = make_match()
    match_id = ids["match"].id
    player = ids["team1_players"][0]

    with pytest.raises(InvalidEntry):
        store.upsert_hole_scores(match_id, [(player, 1, 4), (player, 19, 4)])
    with pytest.raises(InvalidEntry):
        store.upsert_hole_scores(match_id, [(player, 1, 4), (player, 2, 16)])
    with pytest.raises(InvalidEntry):
        store.upsert_hole_scores(match_id, [(player, 1, 0)])
    with pytest.raises(InvalidEntry):
        store.upsert_hole_scores(match_id, [(12345, 1, 4)])
    assert store.list_hole_scores(match_id) == []


def test_score_upsert_overwrites_and_clears(store, make_match):
    ids = make_match()
    match_id = ids["match"].id
    player = ids["team1_players"][0]

    store.upsert_hole_scores(match_id, [(player, 1, 5), (player, 2, 4)])
    store.upsert_hole_scores(match_id, [(player, 1, 6)])
    scores = {(s.hole, s.player_id): s.strokes for s in store.list_hole_scores(match_id)}
    assert scores == {(1, player): 6, (2, player): 4}

    store.upsert_hole_scores(match_id, [(player, 2, None)])
    assert [s.hole for s in store.list_hole_scores(match_id)] == [1]


def test_locked_round_or_match_rejects_scores(store, make_match):
    ids = make_match()
    match_id = ids["match"].id
    player = ids["team1_players"][0]

    store.set_match_lock(match_id, True)
    with pytest.raises(Conflict, match="match_locked"):
        store.upsert_hole_scores(match_id, [(player, 1, 4)])
    store.set_match_lock(match_id, False)

    store.set_round_lock(ids["round"].id, True)
    with pytest.raises(Conflict, match="round_locked"):
        store.upsert_hole_scores(match_id, [(player, 1, 4)])


def test_delete_round_cascades(store, make_match):
    ids = make_match()
    match_id = ids["match"].id
    store.upsert_hole_scores(match_id, [(ids["team1_players"][0], 1, 4)])

    store.delete_round(ids["round"].id)

    assert store.list_matches() == []
    with pytest.raises(NotFound):
        store.list_hole_scores(match_id)
    with pytest.raises(NotFound):
        store.get_round(ids["round"].id)
