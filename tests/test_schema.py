"""Tests for gamification.models.schema"""

import dataclasses

import pytest

from gamification.models import (
    SCORE_FACTOR_KEYS,
    HistoryTrigger,
    Milestone,
    MilestonePrediction,
    ScoreFactor,
    ScoreFactors,
    ScoreHistoryEntry,
    ScoreWeights,
    SessionResponse,
    StreakData,
    StreakMilestone,
)


def test_factor_keys_cover_enum():
    assert SCORE_FACTOR_KEYS == tuple(f.value for f in ScoreFactor)
    assert len(SCORE_FACTOR_KEYS) == 8


def test_score_factors_rejects_out_of_range(full_factors):
    data = full_factors.to_dict()
    data["spending_harmony"] = 101
    with pytest.raises(ValueError, match="spending_harmony"):
        ScoreFactors.from_dict(data)


def test_score_factors_from_dict_requires_all_keys():
    with pytest.raises(ValueError, match="Missing score factors"):
        ScoreFactors.from_dict({"communication_alignment": 50})


def test_score_weights_defaults_and_validation():
    weights = ScoreWeights()
    assert weights.communication_alignment == 0.20
    assert weights.session_consistency == 0.04

    with pytest.raises(ValueError):
        ScoreWeights(spending_harmony=1.5)
    with pytest.raises(ValueError, match="Unknown weight keys"):
        ScoreWeights.from_dict({"romance": 0.5})


def test_score_weights_from_config_overrides_some_keys():
    weights = ScoreWeights.from_config({"scoring": {"weights": {"spending_harmony": 0.5}}})
    assert weights.spending_harmony == 0.5
    assert weights.goal_compatibility == 0.16


def test_session_response_normalizes_category_enum():
    response = SessionResponse("q1", "saver", "saver", 100, 1.0, ScoreFactor.SPENDING_HARMONY)
    assert response.category == "spending_harmony"
    with pytest.raises(dataclasses.FrozenInstanceError):
        response.weight = 2.0


def test_session_response_rejects_unknown_category_and_bad_score():
    with pytest.raises(ValueError, match="Unknown score factor"):
        SessionResponse("q1", "a", "b", 50, 1.0, "romance")
    with pytest.raises(ValueError):
        SessionResponse("q1", "a", "b", 150, 1.0, "spending_harmony")
    with pytest.raises(ValueError):
        SessionResponse("q1", "a", "b", 50, -1.0, "spending_harmony")


def test_history_entry_accepts_trigger_string():
    entry = ScoreHistoryEntry(date="2024-01-01", score=70, change=5, trigger="streak_bonus")
    assert entry.trigger is HistoryTrigger.STREAK_BONUS
    assert entry.to_dict() == {
        "date": "2024-01-01",
        "score": 70,
        "change": 5,
        "trigger": "streak_bonus",
    }


def test_milestone_prediction_is_known():
    assert MilestonePrediction(14, 0.8).is_known
    assert not MilestonePrediction(-1, 0.0).is_known


def test_streak_data_builds_milestones_from_dicts():
    data = StreakData.from_dict({
        "couple_id": "c1",
        "current_streak": 3,
        "milestone_progress": [{"target": 7}, {"target": 30, "achieved": False}],
        "grace_period_used": True,
    })
    assert data.milestone_progress == [StreakMilestone(target=7), StreakMilestone(target=30)]

    with pytest.raises(ValueError):
        StreakData(couple_id="c1", current_streak=-1)


def test_milestone_to_dict():
    milestone = Milestone(id="m1", type="score", target_value=85, current_progress=70, title="Reach 85")
    assert milestone.to_dict()["estimated_completion"] is None
    assert milestone.to_dict()["target_value"] == 85
