"""
Improvement suggestions and partner comparison.

Suggestions are drawn from a fixed catalog with one entry per factor. The
three weakest factors are considered, weakest first, and a factor is only
suggested when it has at least 5 points of headroom below the 85-point
"good enough" ceiling:

    potential_gain = min(15, 85 - current_score)
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..models.schema import (
    SCORE_FACTOR_KEYS,
    Difficulty,
    ImprovementSuggestion,
    PartnerComparison,
    ScoreFactor,
)
from ..scoring.aggregation import (
    DEFAULT_SCORE_WEIGHTS,
    FactorInput,
    WeightInput,
    as_mapping,
    calculate_overall_score,
)

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
TARGET_CEILING = 85
MAX_POTENTIAL_GAIN = 15
MIN_POTENTIAL_GAIN = 5

AREA_GAP_THRESHOLD = 5

# (maximum mean gap, sync level, message), checked in order
SYNC_LEVELS = (
    (5, "very_aligned", "You two are in sync. Keep the conversations going!"),
    (10, "mostly_aligned", "You're mostly on the same page, with a few areas to explore together."),
    (20, "somewhat_aligned", "You see some things differently. Use your next sessions to compare notes."),
)
FALLBACK_SYNC_LEVEL = ("needs_work", "Your views differ in several areas. Small, regular check-ins will close the gap.")

# (minimum score, message), highest first
SCORE_BANDS = (
    (90, "Excellent financial compatibility! You're a money power couple."),
    (80, "Great financial alignment! You work well together on money matters."),
    (70, "Good financial compatibility with room for growth."),
    (60, "Moderate alignment. Some areas need attention."),
    (40, "Significant differences. More communication needed."),
)
LOWEST_BAND_MESSAGE = "Major differences. Focus on understanding each other."


@dataclass(frozen=True)
class SuggestionTemplate:
    """Canned advice for one factor."""
    suggestion: str
    action_items: Tuple[str, ...]
    difficulty: Difficulty


SUGGESTION_CATALOG: Mapping[ScoreFactor, SuggestionTemplate] = MappingProxyType({
    ScoreFactor.COMMUNICATION_ALIGNMENT: SuggestionTemplate(
        suggestion="Practice active listening and regular check-ins about money decisions",
        action_items=(
            "Schedule weekly 15-minute money conversations",
            "Use 'I feel' statements when discussing finances",
            "Ask clarifying questions before making assumptions",
        ),
        difficulty=Difficulty.EASY,
    ),
    ScoreFactor.FINANCIAL_VALUES_MATCH: SuggestionTemplate(
        suggestion="Explore and discuss your core financial values and priorities",
        action_items=(
            "Complete our financial values assessment together",
            "Share stories about your money upbringing",
            "Identify 3 shared financial values to focus on",
        ),
        difficulty=Difficulty.MEDIUM,
    ),
    ScoreFactor.GOAL_COMPATIBILITY: SuggestionTemplate(
        suggestion="Align your short-term and long-term financial goals",
        action_items=(
            "Create a shared vision board for financial goals",
            "Prioritize goals together using our ranking tool",
            "Set up joint savings accounts for shared goals",
        ),
        difficulty=Difficulty.MEDIUM,
    ),
    ScoreFactor.SPENDING_HARMONY: SuggestionTemplate(
        suggestion="Develop spending boundaries and agreements that work for both",
        action_items=(
            "Set monthly 'fun money' budgets for individual spending",
            "Agree on a dollar threshold for joint purchase decisions",
            "Review and categorize recent spending together",
        ),
        difficulty=Difficulty.HARD,
    ),
    ScoreFactor.FUTURE_PLANNING_SYNC: SuggestionTemplate(
        suggestion="Create detailed plans for major life and financial milestones",
        action_items=(
            "Use our retirement planning calculator together",
            "Discuss timeline preferences for major purchases",
            "Review and update financial plans quarterly",
        ),
        difficulty=Difficulty.HARD,
    ),
    ScoreFactor.CONFLICT_RESOLUTION: SuggestionTemplate(
        suggestion="Develop healthy strategies for resolving money disagreements",
        action_items=(
            "Practice our 'time-out' technique during heated discussions",
            "Use our conflict resolution framework for money topics",
            "Agree on a cooling-off period for big financial decisions",
        ),
        difficulty=Difficulty.MEDIUM,
    ),
    ScoreFactor.TRANSPARENCY_LEVEL: SuggestionTemplate(
        suggestion="Increase openness about individual financial situations and feelings",
        action_items=(
            "Share monthly account balances with each other",
            "Discuss any financial fears or anxieties openly",
            "Use our transparency checklist monthly",
        ),
        difficulty=Difficulty.EASY,
    ),
    ScoreFactor.SESSION_CONSISTENCY: SuggestionTemplate(
        suggestion="Build a sustainable routine for regular money conversations",
        action_items=(
            "Set up recurring calendar reminders for money dates",
            "Choose a consistent day/time that works for both",
            "Prepare conversation topics in advance",
        ),
        difficulty=Difficulty.EASY,
    ),
})

_missing = set(ScoreFactor) - set(SUGGESTION_CATALOG)
if _missing:
    raise RuntimeError(f"Suggestion catalog is missing factors: {sorted(f.value for f in _missing)}")


def _suggestion_for_factor(factor: str, current_score: float) -> Optional[ImprovementSuggestion]:
    potential_gain = min(MAX_POTENTIAL_GAIN, TARGET_CEILING - current_score)
    if potential_gain < MIN_POTENTIAL_GAIN:
        return None

    template = SUGGESTION_CATALOG[ScoreFactor(factor)]
    return ImprovementSuggestion(
        category=factor,
        current_score=current_score,
        potential_gain=potential_gain,
        difficulty=template.difficulty,
        suggestion=template.suggestion,
        action_items=list(template.action_items),
    )


def generate_improvement_suggestions(
    factors: FactorInput,
    partner_factors: Optional[FactorInput] = None
) -> List[ImprovementSuggestion]:
    """
    Suggest improvements for the weakest factors.

    Args:
        factors: Factor scores (full record or partial dictionary)
        partner_factors: Partner's factor scores (accepted, not consulted)

    Returns:
        Up to 3 suggestions, weakest factor first
    """
    # TODO: tailor suggestion text when partner_factors shows a one-sided gap.
    factor_map = as_mapping(factors)

    known = [(key, score) for key, score in factor_map.items() if key in SCORE_FACTOR_KEYS]
    if len(known) < len(factor_map):
        logger.debug(f"Ignoring unknown factor keys: {sorted(set(factor_map) - set(SCORE_FACTOR_KEYS))}")

    weakest = sorted(known, key=lambda item: item[1])[:MAX_SUGGESTIONS]

    suggestions = []
    for factor, score in weakest:
        suggestion = _suggestion_for_factor(factor, score)
        if suggestion:
            suggestions.append(suggestion)

    return suggestions


def compare_partners(
    factors: FactorInput,
    partner_factors: FactorInput,
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS
) -> PartnerComparison:
    """
    Compare two partners' factor profiles.

    The sync level is taken from the mean absolute gap over the factors both
    partners have; an area counts as stronger or a growth area when one side
    leads by more than 5 points.

    Args:
        factors: This partner's factor scores
        partner_factors: The other partner's factor scores
        weights: Factor weight table for the overall scores

    Returns:
        PartnerComparison
    """
    mine = as_mapping(factors)
    theirs = as_mapping(partner_factors)

    score_difference = (
        calculate_overall_score(mine, weights) - calculate_overall_score(theirs, weights)
    )

    shared = [key for key in SCORE_FACTOR_KEYS if key in mine and key in theirs]
    gaps: Dict[str, float] = {key: mine[key] - theirs[key] for key in shared}

    stronger_areas = [key for key in shared if gaps[key] > AREA_GAP_THRESHOLD]
    growth_areas = [key for key in shared if gaps[key] < -AREA_GAP_THRESHOLD]

    mean_gap = sum(abs(g) for g in gaps.values()) / len(gaps) if gaps else 0.0

    sync_level, message = FALLBACK_SYNC_LEVEL
    for max_gap, level, level_message in SYNC_LEVELS:
        if mean_gap < max_gap:
            sync_level, message = level, level_message
            break

    return PartnerComparison(
        score_difference=score_difference,
        stronger_areas=stronger_areas,
        growth_areas=growth_areas,
        sync_level=sync_level,
        encouragement_message=message,
    )


def describe_score(score: float) -> str:
    """Return the headline message for an overall alignment score."""
    for minimum, message in SCORE_BANDS:
        if score >= minimum:
            return message
    return LOWEST_BAND_MESSAGE
