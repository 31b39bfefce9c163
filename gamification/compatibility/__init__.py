"""Compatibility lookup for paired categorical answers."""

from .matrices import (
    COMPATIBILITY_MATRICES,
    NEUTRAL_COMPATIBILITY,
    calculate_response_compatibility,
    score_response,
    merge_matrices,
    matrices_from_config,
)

__all__ = [
    "COMPATIBILITY_MATRICES",
    "NEUTRAL_COMPATIBILITY",
    "calculate_response_compatibility",
    "score_response",
    "merge_matrices",
    "matrices_from_config",
]
