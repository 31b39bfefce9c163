"""Trend, consistency and milestone analysis over score history."""

from .trends import (
    calculate_score_trend,
    analyze_score_history,
    append_history_entry,
    history_scores,
)
from .consistency import (
    calculate_session_consistency,
    streak_intensity,
    next_streak_milestone,
    engagement_level,
    build_streak_milestones,
)
from .milestones import (
    DEFAULT_BADGES,
    predict_milestone_achievement,
    evaluate_badges,
)

__all__ = [
    "calculate_score_trend",
    "analyze_score_history",
    "append_history_entry",
    "history_scores",
    "calculate_session_consistency",
    "streak_intensity",
    "next_streak_milestone",
    "engagement_level",
    "build_streak_milestones",
    "DEFAULT_BADGES",
    "predict_milestone_achievement",
    "evaluate_badges",
]
