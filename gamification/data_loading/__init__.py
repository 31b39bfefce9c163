"""Data loading module for batch scoring from CSV exports."""

from .loaders import (
    load_session_responses,
    load_score_history,
    load_streak_data,
    score_couples,
)

__all__ = [
    "load_session_responses",
    "load_score_history",
    "load_streak_data",
    "score_couples",
]
