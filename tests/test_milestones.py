"""Tests for gamification.analysis.milestones"""

import logging

import pytest

from gamification.analysis import DEFAULT_BADGES, evaluate_badges, predict_milestone_achievement
from gamification.models import Badge


def test_steady_progress_is_confident():
    prediction = predict_milestone_achievement(70, [50, 55, 60, 65, 70], 85)
    assert prediction.days_estimated == 21
    assert prediction.confidence == 0.95


def test_erratic_progress_hits_confidence_floor():
    prediction = predict_milestone_achievement(60, [50, 60, 50, 60], 80)
    assert prediction.days_estimated == 14
    assert prediction.confidence == 0.1


def test_uneven_progress():
    prediction = predict_milestone_achievement(70, [50, 58, 60, 70], 90)
    assert prediction.days_estimated == 21
    assert prediction.confidence == pytest.approx(0.884444, abs=1e-5)


def test_only_recent_history_is_used():
    prediction = predict_milestone_achievement(75, [80, 20, 40, 45, 50, 55, 60, 65, 70, 75], 85)
    assert prediction.days_estimated == 14
    assert prediction.confidence == 0.95


def test_target_already_reached():
    prediction = predict_milestone_achievement(85, [], 85)
    assert (prediction.days_estimated, prediction.confidence) == (0, 1.0)


@pytest.mark.parametrize("history", [[50, 60], [70, 70, 65]])
def test_unknown_prediction(history):
    prediction = predict_milestone_achievement(65, history, 85)
    assert (prediction.days_estimated, prediction.confidence) == (-1, 0.0)
    assert not prediction.is_known


def test_evaluate_badges():
    earned = evaluate_badges(DEFAULT_BADGES, current_score=92, current_streak=8,
                             session_count=10, improvement=5)
    assert [b.id for b in earned] == ["week_warrior", "alignment_ace"]

    earned = evaluate_badges(DEFAULT_BADGES, current_score=92, current_streak=8,
                             session_count=10, improvement=5, unlocked_ids=["week_warrior"])
    assert [b.id for b in earned] == ["alignment_ace"]


def test_evaluate_badges_custom_criteria(caplog):
    badges = [
        Badge("climber", "Climber", "rare", "improvement", 20),
        Badge("mystery", "Mystery", "common", "vibes", 1),
    ]
    with caplog.at_level(logging.WARNING):
        earned = evaluate_badges(badges, current_score=50, current_streak=0,
                                 session_count=0, improvement=25)
    assert [b.id for b in earned] == ["climber"]
    assert "unknown criteria type" in caplog.text
