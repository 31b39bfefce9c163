"""
Factor aggregation for alignment scoring.

Two levels of aggregation:
- Session level: response compatibility scores are grouped by factor
  category into per-factor scores.
- Overall level: factor scores are combined into a single 0-100 score
  using the global factor weights.

Overall Score Formula:
    overall = round(sum(factor_i * weight_i) / sum(weight_i))
    (sums run over the factors actually present)
"""

import logging
import math
from typing import Dict, Any, Iterable, Mapping, Union

from ..models.schema import ScoreFactor, ScoreFactors, ScoreWeights, SessionResponse

logger = logging.getLogger(__name__)

DEFAULT_SCORE_WEIGHTS: Dict[str, float] = ScoreWeights().to_dict()

FactorInput = Union[ScoreFactors, Mapping[str, float]]
WeightInput = Union[ScoreWeights, Mapping[str, float]]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def as_mapping(values: Union[FactorInput, WeightInput]) -> Dict[str, float]:
    """Accept a ScoreFactors/ScoreWeights record or a mapping keyed by factor or its string key."""
    if isinstance(values, (ScoreFactors, ScoreWeights)):
        return values.to_dict()
    return {
        key.value if isinstance(key, ScoreFactor) else key: value
        for key, value in values.items()
    }


def calculate_session_score(
    responses: Iterable[SessionResponse],
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS
) -> Dict[str, float]:
    """
    Aggregate scored responses into per-category factor scores.

    Each category's value is ``sum(compatibility_score * weight) / count``.
    Dividing by the response count rather than the summed weight only gives
    a true weighted mean when a category's weights are all equal.

    Args:
        responses: Scored response pairs, in any order
        weights: Factor weight table (accepted, not consulted)

    Returns:
        Dictionary of factor scores for the categories present in responses
    """
    # TODO: apply `weights` here once per-question weights and factor weights
    # are reconciled; callers already pass it.
    sums: Dict[str, float] = {}
    counts: Dict[str, int] = {}

    for response in responses:
        category = response.category
        sums[category] = sums.get(category, 0.0) + response.compatibility_score * response.weight
        counts[category] = counts.get(category, 0) + 1

    factor_scores = {category: sums[category] / counts[category] for category in sums}

    logger.debug(f"Session scored across {len(factor_scores)} categories")
    return factor_scores


def calculate_overall_score(
    factors: FactorInput,
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS
) -> int:
    """
    Combine factor scores into a single 0-100 score.

    Only factors present in ``factors`` contribute, and the result is
    normalized by their total weight, so a partial factor set is not
    dragged down by the missing categories.

    Args:
        factors: Full ScoreFactors record or a partial factor dictionary
        weights: Factor weight table

    Returns:
        Rounded overall score, or 0 if no weighted factor is present
    """
    factor_map = as_mapping(factors)
    weight_map = as_mapping(weights)

    total_score = 0.0
    total_weight = 0.0

    for factor, weight in weight_map.items():
        factor_score = factor_map.get(factor)
        if factor_score is not None:
            total_score += factor_score * weight
            total_weight += weight

    if total_weight <= 0:
        return 0
    return round_half_up(total_score / total_weight)
