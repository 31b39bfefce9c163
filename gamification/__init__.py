"""
Couple Alignment Scoring Engine

This package turns paired quiz responses from couples' money conversations
into factor scores, an overall alignment score, trend and milestone
estimates, and ranked improvement suggestions.

Key Design Decisions:
- All scoring functions are pure: no I/O, no shared state
- Unknown or insufficient data degrades to documented sentinel values
  (50 neutral compatibility, 0 score, stable trend, -1/0.0 prediction)
- Weights and compatibility tables are data, overridable from YAML config
"""

__version__ = "1.0.0"
