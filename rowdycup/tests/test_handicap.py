from __future__ import annotations

import pytest

from rowdycup.scoring.handicap import (
    calculate_course_handicap,
    calculate_playing_handicap,
    calculate_strokes_received,
    lowest_playing_handicap,
    round_half_up,
)


def test_scenario_course_and_playing_handicap():
    course_handicap = calculate_course_handicap(10.0, 130, 72.0, 72)
    assert course_handicap == 12
    assert calculate_playing_handicap(course_handicap, 90) == 11


def test_zero_slope_rounds_index():
    assert calculate_course_handicap(12.4, 0, 70.1, 72) == 12
    assert calculate_course_handicap(12.5, 0, 70.1, 72) == 13


def test_course_rating_adjustment_applies():
    # 10 * 113/113 + (74.0 - 72) = 12
    assert calculate_course_handicap(10.0, 113, 74.0, 72) == 12


def test_plus_handicap_flows_through():
    assert calculate_course_handicap(-2.0, 113, 72.0, 72) == -2
    assert calculate_playing_handicap(-2, 100) == -2


def test_course_handicap_is_non_decreasing_in_index():
    previous = None
    for tenth in range(-50, 541):
        value = calculate_course_handicap(tenth / 10, 131, 71.4, 72)
        if previous is not None:
            assert value >= previous
        previous = value


def test_playing_handicap_default_allowance():
    assert calculate_playing_handicap(17) == 17


@pytest.mark.parametrize(
    "player, lowest, expected",
    [
        (11, 4, 7),
        (4, 4, 0),
        (3, 4, 0),
        (-1, 2, 0),
        (2, -1, 3),
    ],
)
def test_strokes_received_is_floored_at_zero(player, lowest, expected):
    assert calculate_strokes_received(player, lowest) == expected


def test_strokes_received_never_negative():
    for x in range(-5, 30):
        for y in range(-5, 30):
            received = calculate_strokes_received(x, y)
            assert received >= 0
            if x <= y:
                assert received == 0


def test_rounding_is_half_up():
    assert round_half_up(11.5) == 12
    assert round_half_up(12.5) == 13
    assert round_half_up(-0.5) == 0
    assert round_half_up(11.504) == 12


def test_lowest_playing_handicap_ignores_missing():
    assert lowest_playing_handicap([9, None, 4, 18]) == 4
    assert lowest_playing_handicap([None]) is None
    assert lowest_playing_handicap([]) is None
