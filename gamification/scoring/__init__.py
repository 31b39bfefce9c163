"""Session scoring, overall aggregation and bonuses."""

from .aggregation import (
    DEFAULT_SCORE_WEIGHTS,
    round_half_up,
    calculate_session_score,
    calculate_overall_score,
)
from .bonuses import (
    compute_session_bonuses,
    apply_session_bonuses,
    score_session,
)

__all__ = [
    "DEFAULT_SCORE_WEIGHTS",
    "round_half_up",
    "calculate_session_score",
    "calculate_overall_score",
    "compute_session_bonuses",
    "apply_session_bonuses",
    "score_session",
]
