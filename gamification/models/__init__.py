"""
Data model for alignment scoring.

Value objects shared by every scoring module: factor records, weights,
scored responses, history entries and the result types built from them.
"""

from .schema import (
    ScoreFactor,
    SCORE_FACTOR_KEYS,
    Difficulty,
    ScoreTrendDirection,
    HistoryTrigger,
    ScoreFactors,
    ScoreWeights,
    SessionResponse,
    ScoreHistoryEntry,
    ImprovementSuggestion,
    MilestonePrediction,
    SessionBonuses,
    ScoringSession,
    ScoreTrend,
    PartnerComparison,
    ProgressMetrics,
    StreakMilestone,
    StreakData,
    Milestone,
    Badge,
)

__all__ = [
    "ScoreFactor",
    "SCORE_FACTOR_KEYS",
    "Difficulty",
    "ScoreTrendDirection",
    "HistoryTrigger",
    "ScoreFactors",
    "ScoreWeights",
    "SessionResponse",
    "ScoreHistoryEntry",
    "ImprovementSuggestion",
    "MilestonePrediction",
    "SessionBonuses",
    "ScoringSession",
    "ScoreTrend",
    "PartnerComparison",
    "ProgressMetrics",
    "StreakMilestone",
    "StreakData",
    "Milestone",
    "Badge",
]
