"""
Progress metrics and reports for alignment scoring.

Combines the individual scoring functions into a per-couple view:
1. Score velocity (points per week, least-squares slope over history)
2. Streak momentum and engagement level
3. Milestone ETA and trend
4. Improvement suggestions and partner comparison

Also provides distribution statistics for a batch of couple scores.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence
import json

import numpy as np
import pandas as pd
from scipy.stats import linregress

from ..models.schema import (
    Badge,
    MilestonePrediction,
    PartnerComparison,
    ProgressMetrics,
    ScoreHistoryEntry,
    ScoreTrend,
    ScoreTrendDirection,
    StreakData,
)
from ..scoring.aggregation import (
    DEFAULT_SCORE_WEIGHTS,
    FactorInput,
    WeightInput,
    as_mapping,
    calculate_overall_score,
)
from ..analysis.trends import analyze_score_history, calculate_score_trend, history_scores
from ..analysis.consistency import calculate_session_consistency, engagement_level, next_streak_milestone
from ..analysis.milestones import DEFAULT_BADGES, evaluate_badges, predict_milestone_achievement
from ..suggestions.generator import compare_partners, describe_score, generate_improvement_suggestions

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SCORE = 85


@dataclass
class ScoreDistributionStats:
    """Statistics about a batch of scores."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 42.0, "p50": 61.0, "p90": 80.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class ProgressReport:
    """
    Complete progress report for one couple.

    Bundles the current score, trend, milestone prediction, progress metrics
    and any badges earned by the latest history.
    """
    couple_id: str
    current_score: int
    factors: Dict[str, float]
    trend: ScoreTrendDirection
    history_trend: ScoreTrend
    prediction: MilestonePrediction
    progress: ProgressMetrics
    target_score: float = DEFAULT_TARGET_SCORE
    new_badges: List[Badge] = field(default_factory=list)
    next_streak_target: Optional[int] = None
    streak_remaining: int = 0

    @property
    def score_message(self) -> str:
        return describe_score(self.current_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "couple_id": self.couple_id,
            "current_score": self.current_score,
            "score_message": self.score_message,
            "factors": dict(self.factors),
            "trend": self.trend.value,
            "history_trend": self.history_trend.to_dict(),
            "target_score": self.target_score,
            "prediction": self.prediction.to_dict(),
            "progress": self.progress.to_dict(),
            "new_badges": [b.id for b in self.new_badges],
            "next_streak_target": self.next_streak_target,
            "streak_remaining": self.streak_remaining,
        }

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved progress report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Progress Report: {self.couple_id}",
            "=" * 50,
            "",
            f"Alignment Score: {self.current_score} ({self.trend.value})",
            f"  {self.score_message}",
            "",
            "Factors:",
        ]

        for factor, score in self.factors.items():
            lines.append(f"  {factor}: {score:.1f}")

        lines.extend([
            "",
            "Progress:",
            f"  Velocity: {self.progress.score_velocity:+.2f} points/week",
            f"  Streak momentum: {self.progress.streak_momentum:.2f}",
            f"  Engagement: {self.progress.engagement_level}",
        ])

        if self.next_streak_target is not None:
            lines.append(f"  Next streak milestone: {self.next_streak_target} "
                         f"({self.streak_remaining} to go)")

        if self.prediction.is_known:
            lines.append(
                f"  Target {self.target_score}: ~{self.prediction.days_estimated} days "
                f"(confidence {self.prediction.confidence:.0%})"
            )
        else:
            lines.append(f"  Target {self.target_score}: not enough progress to estimate")

        if self.progress.improvement_suggestions:
            lines.extend(["", "Focus Areas:"])
            for s in self.progress.improvement_suggestions:
                lines.append(f"  {s.category} (+{s.potential_gain}, {s.difficulty.value}): {s.suggestion}")

        if self.new_badges:
            lines.extend(["", "New Badges: " + ", ".join(b.name for b in self.new_badges)])

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9)
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Overall scores, one per couple
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    values = np.asarray(scores, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot compute distribution statistics for an empty score set")

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(values, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        quantiles=quantile_dict
    )


def _day_offsets(entries: Sequence[ScoreHistoryEntry]) -> np.ndarray:
    dates = pd.to_datetime([e.date for e in entries], utc=True, format="ISO8601")
    return np.asarray((dates - dates.min()).total_seconds() / 86400.0, dtype=float)


def compute_score_velocity(entries: Sequence[ScoreHistoryEntry]) -> float:
    """
    Estimate points gained per week from dated history.

    Args:
        entries: History entries, oldest first

    Returns:
        Slope of score over time in points per week; 0.0 when fewer than
        two distinct dates are available
    """
    if len(entries) < 2:
        return 0.0

    days = _day_offsets(entries)
    if np.ptp(days) == 0:
        return 0.0

    result = linregress(days, history_scores(entries))
    return float(result.slope * 7)


def compute_days_active(entries: Sequence[ScoreHistoryEntry]) -> int:
    """Inclusive day span covered by the history (0 for an empty history)."""
    if not entries:
        return 0
    return int(np.floor(np.ptp(_day_offsets(entries)))) + 1


def build_progress_metrics(
    history: Sequence[ScoreHistoryEntry],
    streak: StreakData,
    factors: FactorInput,
    partner_factors: Optional[FactorInput] = None,
    target_score: float = DEFAULT_TARGET_SCORE,
    days_active: Optional[int] = None,
    current_score: Optional[float] = None,
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS
) -> ProgressMetrics:
    """
    Build the progress metrics for one couple.

    Args:
        history: Score history, oldest first
        streak: Streak counters
        factors: Current factor scores
        partner_factors: Partner's factor scores, if tracked separately
        target_score: Score milestone to estimate against
        days_active: Days since the couple became active (default: history span)
        current_score: Latest overall score (default: overall score of factors)
        weights: Factor weight table

    Returns:
        ProgressMetrics instance
    """
    if days_active is None:
        days_active = compute_days_active(history)

    if current_score is None:
        current_score = calculate_overall_score(factors, weights)

    momentum = streak.current_streak / streak.longest_streak if streak.longest_streak > 0 else 0.0
    consistency = calculate_session_consistency(
        streak.current_streak, streak.total_sessions, days_active
    )
    prediction = predict_milestone_achievement(current_score, history_scores(history), target_score)

    comparison: Optional[PartnerComparison] = None
    if partner_factors is not None:
        comparison = compare_partners(factors, partner_factors, weights)

    return ProgressMetrics(
        score_velocity=compute_score_velocity(history),
        streak_momentum=momentum,
        engagement_level=engagement_level(consistency),
        next_milestone_eta=prediction.days_estimated,
        improvement_suggestions=generate_improvement_suggestions(factors, partner_factors),
        partner_comparison=comparison,
    )


def create_progress_report(
    couple_id: str,
    factors: FactorInput,
    history: Sequence[ScoreHistoryEntry],
    streak: Optional[StreakData] = None,
    partner_factors: Optional[FactorInput] = None,
    target_score: float = DEFAULT_TARGET_SCORE,
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS,
    badges: Sequence[Badge] = tuple(DEFAULT_BADGES),
    unlocked_badge_ids: Sequence[str] = ()
) -> ProgressReport:
    """
    Create a complete progress report.

    Args:
        couple_id: Identifier of the couple
        factors: Current factor scores
        history: Score history, oldest first
        streak: Streak counters (default: empty streak)
        partner_factors: Partner's factor scores, if tracked separately
        target_score: Score milestone to estimate against
        weights: Factor weight table
        badges: Badge catalog to check
        unlocked_badge_ids: Badges the couple already holds

    Returns:
        ProgressReport instance
    """
    if streak is None:
        streak = StreakData(couple_id=couple_id)

    factor_map = as_mapping(factors)
    current_score = calculate_overall_score(factor_map, weights)
    scores = history_scores(history)

    progress = build_progress_metrics(
        history, streak, factor_map, partner_factors, target_score,
        current_score=current_score, weights=weights
    )

    improvement = scores[-1] - scores[0] if scores else 0
    new_badges = evaluate_badges(
        badges,
        current_score=current_score,
        current_streak=streak.current_streak,
        session_count=streak.total_sessions,
        improvement=improvement,
        unlocked_ids=unlocked_badge_ids,
    )
    next_milestone, streak_remaining = next_streak_milestone(
        streak.current_streak, streak.milestone_progress
    )

    return ProgressReport(
        couple_id=couple_id,
        current_score=current_score,
        factors=factor_map,
        trend=calculate_score_trend(scores),
        history_trend=analyze_score_history(history),
        prediction=predict_milestone_achievement(current_score, scores, target_score),
        progress=progress,
        target_score=target_score,
        new_badges=new_badges,
        next_streak_target=next_milestone.target if next_milestone else None,
        streak_remaining=streak_remaining,
    )
