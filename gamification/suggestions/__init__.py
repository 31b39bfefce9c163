"""Improvement suggestions and partner comparison."""

from .generator import (
    SUGGESTION_CATALOG,
    SuggestionTemplate,
    generate_improvement_suggestions,
    compare_partners,
    describe_score,
)

__all__ = [
    "SUGGESTION_CATALOG",
    "SuggestionTemplate",
    "generate_improvement_suggestions",
    "compare_partners",
    "describe_score",
]
