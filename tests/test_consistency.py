"""Tests for gamification.analysis.consistency"""

import pytest

from gamification.analysis import (
    calculate_session_consistency,
    build_streak_milestones,
    engagement_level,
    next_streak_milestone,
    streak_intensity,
)
from gamification.models import StreakMilestone


@pytest.mark.parametrize("streak,sessions,days,expected", [
    (10, 4, 28, 80),
    (25, 2, 28, 70),
    (0, 3, 56, 23),
    (5, 0, 28, 0),
    (5, 3, 0, 0),
])
def test_session_consistency(streak, sessions, days, expected):
    assert calculate_session_consistency(streak, sessions, days) == expected


@pytest.mark.parametrize("streak,expected", [(45, 1.0), (30, 1.0), (29, 0.8), (14, 0.8), (7, 0.6), (3, 0.4), (2, 0.2)])
def test_streak_intensity(streak, expected):
    assert streak_intensity(streak) == expected


def test_next_streak_milestone():
    milestones = [StreakMilestone(7, achieved=True), StreakMilestone(30), StreakMilestone(100)]
    milestone, remaining = next_streak_milestone(12, milestones)
    assert milestone.target == 30
    assert remaining == 18

    _, remaining = next_streak_milestone(40, milestones)
    assert remaining == 0


def test_next_streak_milestone_all_achieved():
    assert next_streak_milestone(8, [StreakMilestone(7, achieved=True)]) == (None, 0)


def test_engagement_level():
    assert engagement_level(70) == "high"
    assert engagement_level(69) == "medium"
    assert engagement_level(40) == "medium"
    assert engagement_level(39) == "low"


def test_build_streak_milestones():
    milestones = build_streak_milestones(10, [30, 7, 100])
    assert [m.target for m in milestones] == [7, 30, 100]
    assert [m.achieved for m in milestones] == [True, False, False]
