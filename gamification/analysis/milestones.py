"""
Milestone prediction and badge unlocks.

Milestone Prediction:
    window       = last 8 history scores
    avg_progress = mean of the positive period-to-period deltas
    days         = round((target - current) / avg_progress * 7)
    variance     = mean((score_i - (score_{i-1} + avg_progress))^2)
    confidence   = clip(1 - variance / 100, 0.1, 0.95)

Each history period is assumed to be one week. An unknown estimate is
reported as days_estimated = -1 with confidence 0.0.
"""

import logging
from typing import Iterable, List, Sequence

import numpy as np

from ..models.schema import Badge, MilestonePrediction
from ..scoring.aggregation import round_half_up

logger = logging.getLogger(__name__)

PREDICTION_WINDOW = 8
MIN_PREDICTION_HISTORY = 3
DAYS_PER_PERIOD = 7
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95

ALREADY_ACHIEVED = MilestonePrediction(days_estimated=0, confidence=1.0)
UNKNOWN_PREDICTION = MilestonePrediction(days_estimated=-1, confidence=0.0)

DEFAULT_BADGES: List[Badge] = [
    Badge(
        id="week_warrior",
        name="Week Warrior",
        rarity="common",
        criteria_type="streak",
        criteria_value=7,
        celebration_message="You're building great habits!",
    ),
    Badge(
        id="month_master",
        name="Month Master",
        rarity="rare",
        criteria_type="streak",
        criteria_value=30,
        celebration_message="Incredible dedication to your relationship!",
    ),
    Badge(
        id="alignment_ace",
        name="Alignment Ace",
        rarity="epic",
        criteria_type="score",
        criteria_value=90,
        celebration_message="You're financially synchronized!",
    ),
    Badge(
        id="perfect_score",
        name="Perfect Harmony",
        rarity="legendary",
        criteria_type="score",
        criteria_value=100,
        celebration_message="Financial soulmates!",
    ),
]


def predict_milestone_achievement(
    current_score: float,
    score_history: Sequence[float],
    target_score: float
) -> MilestonePrediction:
    """
    Estimate how many days until ``target_score`` is reached.

    Args:
        current_score: Latest score
        score_history: Score series, oldest first
        target_score: Score to reach

    Returns:
        MilestonePrediction; (0, 1.0) if already reached, (-1, 0.0) if
        there is too little history or no positive progress
    """
    if current_score >= target_score:
        return ALREADY_ACHIEVED

    if len(score_history) < MIN_PREDICTION_HISTORY:
        return UNKNOWN_PREDICTION

    recent = np.asarray(list(score_history)[-PREDICTION_WINDOW:], dtype=float)
    deltas = np.diff(recent)
    positive = deltas[deltas > 0]

    if positive.size == 0:
        logger.debug("No positive progress in history window")
        return UNKNOWN_PREDICTION

    avg_progress = float(positive.sum()) / positive.size
    periods_needed = (target_score - current_score) / avg_progress
    days_estimated = round_half_up(periods_needed * DAYS_PER_PERIOD)

    # Deviation from a steady climb at the average positive rate
    expected = recent[:-1] + avg_progress
    variance = float(np.sum((recent[1:] - expected) ** 2)) / (len(recent) - 1)
    confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, 1 - variance / 100))

    return MilestonePrediction(days_estimated=days_estimated, confidence=confidence)


def evaluate_badges(
    badges: Iterable[Badge],
    current_score: float,
    current_streak: int,
    session_count: int,
    improvement: float,
    unlocked_ids: Iterable[str] = ()
) -> List[Badge]:
    """
    Return badges whose criteria are met and that are not yet unlocked.

    Args:
        badges: Badge catalog to check
        current_score: Latest alignment score
        current_streak: Current streak length
        session_count: Total sessions held
        improvement: Score gained over the tracked period
        unlocked_ids: Badge ids the couple already holds

    Returns:
        Newly earned badges in catalog order
    """
    progress = {
        "score": current_score,
        "streak": current_streak,
        "session_count": session_count,
        "improvement": improvement,
    }
    held = set(unlocked_ids)
    earned = []

    for badge in badges:
        if badge.id in held:
            continue
        value = progress.get(badge.criteria_type)
        if value is None:
            logger.warning(f"Badge {badge.id} has unknown criteria type {badge.criteria_type!r}")
            continue
        if value >= badge.criteria_value:
            earned.append(badge)

    return earned
