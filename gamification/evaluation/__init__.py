"""Progress metrics and per-couple reports."""

from .metrics import (
    DEFAULT_TARGET_SCORE,
    ScoreDistributionStats,
    ProgressReport,
    compute_score_distribution_stats,
    compute_score_velocity,
    compute_days_active,
    build_progress_metrics,
    create_progress_report,
)

__all__ = [
    "DEFAULT_TARGET_SCORE",
    "ScoreDistributionStats",
    "ProgressReport",
    "compute_score_distribution_stats",
    "compute_score_velocity",
    "compute_days_active",
    "build_progress_metrics",
    "create_progress_report",
]
