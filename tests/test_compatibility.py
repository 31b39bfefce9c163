"""Tests for gamification.compatibility"""

import pytest

from gamification.compatibility import (
    COMPATIBILITY_MATRICES,
    NEUTRAL_COMPATIBILITY,
    calculate_response_compatibility,
    matrices_from_config,
    merge_matrices,
    score_response,
)
from gamification.models import ScoreFactor


def test_direct_and_reversed_lookup_agree():
    assert calculate_response_compatibility("spending_style", "saver", "spender") == 45
    assert calculate_response_compatibility("spending_style", "spender", "saver") == 45


def test_reversed_key_is_used_when_only_one_order_is_stored():
    assert calculate_response_compatibility("risk_tolerance", "moderate", "conservative") == 65


def test_unknown_type_or_pair_is_neutral():
    assert calculate_response_compatibility("pet_preference", "cat", "dog") == NEUTRAL_COMPATIBILITY
    assert calculate_response_compatibility("spending_style", "saver", "gambler") == 50


def test_zero_entry_is_returned_not_treated_as_missing():
    matrices = merge_matrices(COMPATIBILITY_MATRICES, {"spending_style": {"saver-spender": 0}})
    assert calculate_response_compatibility("spending_style", "spender", "saver", matrices) == 0
    assert COMPATIBILITY_MATRICES["spending_style"]["saver-spender"] == 45


def test_matrices_from_config_adds_question_types():
    matrices = matrices_from_config({
        "compatibility": {"matrices": {"budgeting_style": {"planner-flexible": 65}}}
    })
    assert calculate_response_compatibility("budgeting_style", "flexible", "planner", matrices) == 65
    assert matrices["decision_making"] == COMPATIBILITY_MATRICES["decision_making"]


def test_matrices_from_config_without_overrides():
    assert matrices_from_config({"compatibility": None}) == COMPATIBILITY_MATRICES


def test_score_response_builds_scored_pair():
    response = score_response(
        "q7", "decision_making", "leader", "collaborative", ScoreFactor.CONFLICT_RESOLUTION, weight=2.0
    )
    assert response.compatibility_score == 75
    assert response.category == "conflict_resolution"
    assert response.weight == 2.0


STORED_PAIRS = [
    (question_type, *key.split("-"))
    for question_type, pairs in COMPATIBILITY_MATRICES.items()
    for key in pairs
]


@pytest.mark.parametrize("question_type,first,second", STORED_PAIRS)
def test_lookup_is_symmetric(question_type, first, second):
    forward = calculate_response_compatibility(question_type, first, second)
    assert forward == COMPATIBILITY_MATRICES[question_type][f"{first}-{second}"]
    assert calculate_response_compatibility(question_type, second, first) == forward


def test_repeated_lookups_agree():
    first = calculate_response_compatibility("financial_goals", "travel", "retirement")
    assert calculate_response_compatibility("financial_goals", "travel", "retirement") == first == 60
