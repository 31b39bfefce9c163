"""
Session bonus engine.

Adjusts a base session score upward for completing the question set,
keeping close to the planned session length and maintaining a streak.

Bonus Components:
    completion = min(5, completion_rate * 5)
    time       = 3 if duration ratio in [0.8, 1.2]
                 1 if duration ratio in [0.6, 1.4]
                 0 otherwise
    streak     = min(7, streak // 5)

    final = min(100, round(base + completion + time + streak))

The time bands overlap; the tighter band is checked first and only one
band applies.
"""

import logging
import math
from typing import Iterable, Optional

from ..models.schema import ScoringSession, SessionBonuses, SessionResponse
from .aggregation import (
    DEFAULT_SCORE_WEIGHTS,
    WeightInput,
    calculate_overall_score,
    calculate_session_score,
    round_half_up,
)

logger = logging.getLogger(__name__)

MAX_COMPLETION_BONUS = 5
MAX_STREAK_BONUS = 7
STREAK_SESSIONS_PER_POINT = 5
MAX_SCORE = 100

# (low, high, points), checked in order
TIME_BONUS_BANDS = (
    (0.8, 1.2, 3),
    (0.6, 1.4, 1),
)


def _time_bonus(session_duration: float, planned_duration: float) -> int:
    if planned_duration <= 0:
        return 0
    ratio = session_duration / planned_duration
    for low, high, points in TIME_BONUS_BANDS:
        if low <= ratio <= high:
            return points
    return 0


def compute_session_bonuses(
    completion_rate: float,
    session_duration: float,
    planned_duration: float,
    current_streak: int
) -> SessionBonuses:
    """
    Compute the individual bonus components for a session.

    Args:
        completion_rate: Fraction of questions answered, expected in [0, 1]
        session_duration: Actual session length (any unit)
        planned_duration: Planned session length (same unit)
        current_streak: Current streak length

    Returns:
        SessionBonuses with completion, time and streak components
    """
    completion_bonus = min(MAX_COMPLETION_BONUS, completion_rate * MAX_COMPLETION_BONUS)
    time_bonus = _time_bonus(session_duration, planned_duration)
    streak_bonus = min(MAX_STREAK_BONUS, math.floor(current_streak / STREAK_SESSIONS_PER_POINT))

    return SessionBonuses(
        completion_bonus=completion_bonus,
        time_bonus=time_bonus,
        streak_bonus=int(streak_bonus),
    )


def apply_session_bonuses(
    base_score: float,
    completion_rate: float,
    session_duration: float,
    planned_duration: float,
    current_streak: int
) -> int:
    """
    Apply completion, time and streak bonuses to a base score.

    Args:
        base_score: Score before bonuses (0-100)
        completion_rate: Fraction of questions answered, expected in [0, 1]
        session_duration: Actual session length
        planned_duration: Planned session length
        current_streak: Current streak length

    Returns:
        Bonus-adjusted score, capped at 100
    """
    bonuses = compute_session_bonuses(
        completion_rate, session_duration, planned_duration, current_streak
    )
    return min(MAX_SCORE, round_half_up(base_score + bonuses.total))


def score_session(
    session_id: str,
    responses: Iterable[SessionResponse],
    completion_rate: float,
    session_duration: float,
    planned_duration: float,
    current_streak: int,
    weights: Optional[WeightInput] = None
) -> ScoringSession:
    """
    Score a completed session end to end.

    Aggregates the responses into factor impacts, combines them into a base
    score and applies the session bonuses.

    Args:
        session_id: Identifier of the session
        responses: Scored response pairs from the session
        completion_rate: Fraction of questions answered
        session_duration: Actual session length
        planned_duration: Planned session length
        current_streak: Current streak length
        weights: Factor weight table (default: DEFAULT_SCORE_WEIGHTS)

    Returns:
        ScoringSession with bonus breakdown and total points
    """
    if weights is None:
        weights = DEFAULT_SCORE_WEIGHTS

    responses = list(responses)
    factor_impacts = calculate_session_score(responses, weights)
    base_score = calculate_overall_score(factor_impacts, weights)
    bonuses = compute_session_bonuses(
        completion_rate, session_duration, planned_duration, current_streak
    )
    total_points = min(MAX_SCORE, round_half_up(base_score + bonuses.total))

    logger.debug(f"Session {session_id}: base={base_score}, bonuses={bonuses.total}, "
                 f"total={total_points}")

    return ScoringSession(
        session_id=session_id,
        responses=responses,
        completion_bonus=bonuses.completion_bonus,
        time_bonus=bonuses.time_bonus,
        consistency_bonus=bonuses.streak_bonus,
        total_points=total_points,
        factor_impacts=factor_impacts,
    )
