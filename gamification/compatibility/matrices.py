"""
Compatibility matrices for paired categorical answers.

Each question type maps an ``"answerA-answerB"`` key to a 0-100
compatibility score. Compatibility is symmetric in meaning, so only one
ordering of each pair is stored and the lookup tries the reversed key
before giving up.

Lookup Order:
    1. Direct key       "user-partner"
    2. Reversed key     "partner-user"
    3. Neutral default  50

Unknown question types also resolve to the neutral default. The lookup
never raises.
"""

import copy
import logging
from typing import Dict, Any, Optional

from ..models.schema import SessionResponse

logger = logging.getLogger(__name__)

CompatibilityMatrix = Dict[str, Dict[str, float]]

NEUTRAL_COMPATIBILITY = 50

COMPATIBILITY_MATRICES: CompatibilityMatrix = {
    # Spending style
    "spending_style": {
        "saver-saver": 100,
        "saver-spender": 45,
        "saver-balanced": 75,
        "saver-investor": 85,
        "spender-spender": 80,
        "spender-balanced": 70,
        "spender-investor": 55,
        "balanced-balanced": 95,
        "balanced-investor": 80,
        "investor-investor": 90,
    },
    # Risk tolerance
    "risk_tolerance": {
        "conservative-conservative": 100,
        "conservative-moderate": 65,
        "conservative-aggressive": 30,
        "moderate-moderate": 95,
        "moderate-aggressive": 70,
        "aggressive-aggressive": 85,
    },
    # Financial goals
    "financial_goals": {
        "retirement-retirement": 100,
        "retirement-house": 75,
        "retirement-travel": 60,
        "retirement-business": 55,
        "house-house": 100,
        "house-travel": 50,
        "house-business": 45,
        "travel-travel": 100,
        "travel-business": 65,
        "business-business": 90,
    },
    # Communication preferences
    "communication_style": {
        "direct-direct": 100,
        "direct-diplomatic": 70,
        "direct-avoidant": 40,
        "diplomatic-diplomatic": 90,
        "diplomatic-avoidant": 50,
        "avoidant-avoidant": 60,
    },
    # Decision making style
    "decision_making": {
        "collaborative-collaborative": 100,
        "collaborative-independent": 65,
        "collaborative-leader": 75,
        "independent-independent": 70,
        "independent-leader": 55,
        "leader-leader": 45,
    },
}


def pair_key(first: Any, second: Any) -> str:
    """Build the matrix key for an ordered answer pair."""
    return f"{first}-{second}"


def calculate_response_compatibility(
    question_type: str,
    user_answer: Any,
    partner_answer: Any,
    matrices: Optional[CompatibilityMatrix] = None
) -> float:
    """
    Look up the compatibility of two answers to the same question.

    Args:
        question_type: Matrix key, e.g. "spending_style"
        user_answer: First partner's answer token
        partner_answer: Second partner's answer token
        matrices: Matrix set to use (default: COMPATIBILITY_MATRICES)

    Returns:
        Compatibility score in [0, 100]; 50 for unknown types or pairs
    """
    if matrices is None:
        matrices = COMPATIBILITY_MATRICES

    matrix = matrices.get(question_type)
    if matrix is None:
        logger.debug(f"Unknown question type {question_type!r}, using neutral score")
        return NEUTRAL_COMPATIBILITY

    key = pair_key(user_answer, partner_answer)
    if key in matrix:
        return matrix[key]

    reverse_key = pair_key(partner_answer, user_answer)
    if reverse_key in matrix:
        return matrix[reverse_key]

    logger.debug(f"No entry for {key!r} in {question_type!r}, using neutral score")
    return NEUTRAL_COMPATIBILITY


def score_response(
    question_id: str,
    question_type: str,
    user_answer: Any,
    partner_answer: Any,
    category: Any,
    weight: float = 1.0,
    matrices: Optional[CompatibilityMatrix] = None
) -> SessionResponse:
    """
    Score one answered question pair.

    Args:
        question_id: Identifier of the question
        question_type: Matrix key used for the compatibility lookup
        user_answer: First partner's answer
        partner_answer: Second partner's answer
        category: Factor the question contributes to (ScoreFactor or key)
        weight: Question importance weight
        matrices: Matrix set to use (default: COMPATIBILITY_MATRICES)

    Returns:
        Immutable SessionResponse carrying the looked-up score
    """
    compatibility = calculate_response_compatibility(
        question_type, user_answer, partner_answer, matrices
    )
    return SessionResponse(
        question_id=question_id,
        user_answer=user_answer,
        partner_answer=partner_answer,
        compatibility_score=compatibility,
        weight=weight,
        category=category,
    )


def merge_matrices(
    base: CompatibilityMatrix,
    overrides: Optional[CompatibilityMatrix]
) -> CompatibilityMatrix:
    """
    Layer override entries over a base matrix set.

    New question types are added; existing types gain or replace individual
    pair entries. Neither input is modified.

    Args:
        base: Starting matrix set
        overrides: Additional or replacement entries (may be None)

    Returns:
        New merged matrix set
    """
    merged = copy.deepcopy(base)
    for question_type, pairs in (overrides or {}).items():
        merged.setdefault(question_type, {}).update(pairs or {})
    return merged


def matrices_from_config(config: Dict[str, Any]) -> CompatibilityMatrix:
    """Build the effective matrix set from ``compatibility.matrices`` overrides."""
    overrides = (config.get("compatibility") or {}).get("matrices")
    matrices = merge_matrices(COMPATIBILITY_MATRICES, overrides)
    if overrides:
        logger.info(f"Applied compatibility overrides for {sorted(overrides)}")
    return matrices
