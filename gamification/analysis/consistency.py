"""
Session consistency scoring.

Consistency Score Formula:
    rate  = min(1, total_sessions / (days_active / 7))   # sessions per week
    score = round(rate * 60 + min(40, streak * 2))

The two caps keep the result within [0, 100].
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models.schema import StreakMilestone
from ..scoring.aggregation import round_half_up

logger = logging.getLogger(__name__)

RATE_POINTS = 60
MAX_STREAK_POINTS = 40
POINTS_PER_STREAK_UNIT = 2

# (minimum streak, intensity), highest first
STREAK_INTENSITY_LEVELS = (
    (30, 1.0),
    (14, 0.8),
    (7, 0.6),
    (3, 0.4),
)
BASE_STREAK_INTENSITY = 0.2

HIGH_ENGAGEMENT = 70
MEDIUM_ENGAGEMENT = 40


def calculate_session_consistency(
    current_streak: int,
    total_sessions: int,
    days_active: int
) -> int:
    """
    Score how regularly a couple holds sessions.

    Args:
        current_streak: Current streak length
        total_sessions: Sessions held since the couple became active
        days_active: Days since the couple became active

    Returns:
        Consistency score in [0, 100]; 0 when there are no sessions or days
    """
    if total_sessions == 0 or days_active == 0:
        return 0

    completion_rate = min(1, total_sessions / (days_active / 7))
    base_score = completion_rate * RATE_POINTS
    streak_bonus = min(MAX_STREAK_POINTS, current_streak * POINTS_PER_STREAK_UNIT)

    return round_half_up(base_score + streak_bonus)


def streak_intensity(streak: int) -> float:
    """Map a streak length to a 0.2-1.0 intensity level."""
    for minimum, intensity in STREAK_INTENSITY_LEVELS:
        if streak >= minimum:
            return intensity
    return BASE_STREAK_INTENSITY


def next_streak_milestone(
    current_streak: int,
    milestones: Sequence[StreakMilestone]
) -> Tuple[Optional[StreakMilestone], int]:
    """
    Find the first unachieved streak milestone.

    Args:
        current_streak: Current streak length
        milestones: Streak milestones in display order

    Returns:
        Tuple of (milestone or None, streak units still needed)
    """
    for milestone in milestones:
        if not milestone.achieved:
            return milestone, max(0, milestone.target - current_streak)
    return None, 0


def engagement_level(consistency_score: float) -> str:
    """Bucket a consistency score into low / medium / high engagement."""
    if consistency_score >= HIGH_ENGAGEMENT:
        return "high"
    if consistency_score >= MEDIUM_ENGAGEMENT:
        return "medium"
    return "low"


def build_streak_milestones(longest_streak: int, targets: Sequence[int]) -> List[StreakMilestone]:
    """Create streak milestones for ``targets``, marking those already reached."""
    return [
        StreakMilestone(target=target, achieved=longest_streak >= target)
        for target in sorted(targets)
    ]
