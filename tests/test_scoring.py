"""Tests for gamification.scoring.aggregation"""

import pytest

from gamification.models import SCORE_FACTOR_KEYS, ScoreFactor, ScoreFactors, ScoreWeights, SessionResponse
from gamification.scoring import (
    calculate_overall_score,
    calculate_session_score,
    round_half_up,
)


def _response(score, weight=1.0, category="communication_alignment", qid="q"):
    return SessionResponse(qid, "a", "b", score, weight, category)


@pytest.mark.parametrize("value,expected", [(82.5, 83), (2.5, 3), (2.4999, 2), (-2.5, -2), (0.0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_session_score_divides_by_response_count():
    responses = [
        _response(80, 1.0),
        _response(60, 0.5),
        _response(70, 1.0, category="spending_harmony"),
    ]
    scores = calculate_session_score(responses)
    assert scores == {"communication_alignment": 55.0, "spending_harmony": 70.0}


def test_session_score_empty():
    assert calculate_session_score([]) == {}


def test_overall_score_full_factors(full_factors):
    assert calculate_overall_score(full_factors) == 68


def test_overall_score_normalizes_partial_factors():
    factors = {"communication_alignment": 80, "spending_harmony": 60}
    assert calculate_overall_score(factors) == 71


def test_overall_score_rounds_halves_up():
    factors = {"communication_alignment": 80, "spending_harmony": 85}
    weights = {"communication_alignment": 1, "spending_harmony": 1}
    assert calculate_overall_score(factors, weights) == 83


def test_overall_score_skips_missing_and_none_factors():
    factors = {"communication_alignment": 80, "spending_harmony": None}
    assert calculate_overall_score(factors) == 80


def test_overall_score_without_weighted_factors_is_zero(full_factors):
    assert calculate_overall_score({}) == 0
    zero = ScoreWeights(**{k: 0.0 for k in ScoreWeights().to_dict()})
    assert calculate_overall_score(full_factors, zero) == 0


def test_perfect_factors_score_100():
    perfect = ScoreFactors(**{key: 100 for key in SCORE_FACTOR_KEYS})
    assert calculate_overall_score(perfect) == 100
    assert calculate_overall_score(perfect.to_dict(), ScoreWeights()) == 100


def test_factor_enum_keys_are_accepted():
    factors = {ScoreFactor.COMMUNICATION_ALIGNMENT: 80, ScoreFactor.SPENDING_HARMONY: 60}
    assert calculate_overall_score(factors) == 71
    weights = {ScoreFactor.COMMUNICATION_ALIGNMENT: 1, "spending_harmony": 1}
    assert calculate_overall_score({"communication_alignment": 80, "spending_harmony": 85}, weights) == 83


@pytest.mark.parametrize("func,args", [
    (calculate_overall_score, ({"communication_alignment": 80, "spending_harmony": 60},)),
    (calculate_session_score, ([SessionResponse("q1", "a", "b", 70, 1.0, "goal_compatibility")],)),
    (round_half_up, (82.5,)),
])
def test_repeated_calls_agree(func, args):
    assert func(*args) == func(*args)
