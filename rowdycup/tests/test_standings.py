from __future__ import annotations

from rowdycup.scoring.formats import MatchFormat
from rowdycup.tournament.standings import (
    build_standings,
    calculate_team_points,
    match_outcome,
)
from rowdycup.tournament.views import build_match_scorecard


def test_standings_award_wins_and_halves(store, make_match):
    ids = make_match((0.0,), (0.0,), match_format=MatchFormat.SINGLES)
    aviators, producers = ids["team1"], ids["team2"]
    (a1,) = ids["team1_players"]
    (b1,) = ids["team2_players"]

    rows = []
    for hole in range(1, 11):
        rows += [(a1, hole, 3), (b1, hole, 5)]
    store.upsert_hole_scores(ids["match"].id, rows)

    round2 = store.create_round(number=2, format=MatchFormat.SINGLES)
    halved = store.create_match(
        round_id=round2.id, team1_id=aviators.id, team2_id=producers.id
    )
    a2 = store.create_player(name="A2", team_id=aviators.id, handicap_index=0.0)
    b2 = store.create_player(name="B2", team_id=producers.id, handicap_index=0.0)
    store.add_match_player(halved.id, player_id=a2.id)
    store.add_match_player(halved.id, player_id=b2.id)
    store.upsert_hole_scores(
        halved.id,
        [(pid, hole, 4) for hole in range(1, 19) for pid in (a2.id, b2.id)],
    )

    pending = store.create_match(
        round_id=round2.id, team1_id=producers.id, team2_id=aviators.id
    )

    table = build_standings(store)
    assert [s.team_name for s in table] == ["Aviators", "Producers"]
    first, second = table
    assert first.total_points == 1.5
    assert first.round_points == {1: 1.0, 2: 0.5}
    assert (first.matches_won, first.matches_halved, first.matches_lost) == (1, 1, 0)
    assert second.total_points == 0.5
    assert (second.matches_won, second.matches_halved, second.matches_lost) == (0, 1, 1)

    cards = [
        build_match_scorecard(store, match_id)
        for match_id in (ids["match"].id, halved.id, pending.id)
    ]
    assert calculate_team_points(cards, aviators.id) == 1.5
    assert calculate_team_points(cards, producers.id) == 0.5


def test_standings_without_matches_lists_every_team(store):
    store.create_team(name="Producers", captain="A", color="#fff")
    store.create_team(name="Aviators", captain="J", color="#000")
    table = build_standings(store)
    assert [s.team_name for s in table] == ["Aviators", "Producers"]
    assert all(s.total_points == 0 for s in table)


def test_match_outcome_only_counts_finished_matches(store, make_match):
    ids = make_match((0.0,), (0.0,), match_format=MatchFormat.SINGLES)
    match_id = ids["match"].id
    (a1,) = ids["team1_players"]
    (b1,) = ids["team2_players"]

    store.upsert_hole_scores(match_id, [(a1, 1, 3), (b1, 1, 4)])
    card = build_match_scorecard(store, match_id)
    assert match_outcome(card, ids["team1"].id) is None

    rows = []
    for hole in range(2, 11):
        rows += [(a1, hole, 3), (b1, hole, 4)]
    store.upsert_hole_scores(match_id, rows)
    card = build_match_scorecard(store, match_id)
    assert match_outcome(card, ids["team1"].id) == ("won", 1.0)
    assert match_outcome(card, ids["team2"].id) == ("lost", 0.0)
    assert match_outcome(card, 999999) is None
