"""
Trend analysis over score history.

Two views of a history:
- calculate_score_trend: classifies the most recent scores by counting
  meaningful period-to-period moves (outside a +/-2 dead band).
- analyze_score_history: summarizes a window of history entries with
  direction, magnitude, consistency and a short linear projection.

Histories are ordered oldest to newest by the caller; nothing here sorts.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.schema import (
    HistoryTrigger,
    ScoreHistoryEntry,
    ScoreTrend,
    ScoreTrendDirection,
)
from ..scoring.aggregation import round_half_up

logger = logging.getLogger(__name__)

TREND_WINDOW = 5
CHANGE_DEAD_BAND = 2
MIN_TREND_MOVES = 2
MIN_TREND_SCORES = 3
PROJECTION_PERIODS = 3


def calculate_score_trend(scores: Sequence[float]) -> ScoreTrendDirection:
    """
    Classify a score series as improving, stable or declining.

    Args:
        scores: Score history, oldest first

    Returns:
        ScoreTrendDirection; STABLE when fewer than 3 scores are given
    """
    if len(scores) < MIN_TREND_SCORES:
        return ScoreTrendDirection.STABLE

    recent = list(scores)[-TREND_WINDOW:]
    improvements = 0
    declines = 0

    for previous, current in zip(recent, recent[1:]):
        change = current - previous
        if change > CHANGE_DEAD_BAND:
            improvements += 1
        elif change < -CHANGE_DEAD_BAND:
            declines += 1

    if improvements > declines and improvements >= MIN_TREND_MOVES:
        return ScoreTrendDirection.IMPROVING
    if declines > improvements and declines >= MIN_TREND_MOVES:
        return ScoreTrendDirection.DECLINING
    return ScoreTrendDirection.STABLE


def analyze_score_history(entries: Sequence[ScoreHistoryEntry]) -> ScoreTrend:
    """
    Summarize a window of score history.

    Formula:
        total_change = last.score - first.score
        consistency  = |#positive changes - #negative changes| / n
        prediction   = clip(last.score + total_change / n * 3, 0, 100)

    Args:
        entries: History entries, oldest first

    Returns:
        ScoreTrend for the window
    """
    if len(entries) < 2:
        first_score = entries[0].score if entries else 0
        return ScoreTrend(
            direction=ScoreTrendDirection.STABLE,
            magnitude=0,
            consistency=0.0,
            prediction=round_half_up(first_score),
        )

    n = len(entries)
    first_score = entries[0].score
    last_score = entries[-1].score
    total_change = last_score - first_score
    avg_change = total_change / n

    positive_changes = sum(1 for e in entries if e.change > 0)
    negative_changes = sum(1 for e in entries if e.change < 0)
    consistency = abs(positive_changes - negative_changes) / n

    prediction = min(100, max(0, last_score + avg_change * PROJECTION_PERIODS))

    if total_change > CHANGE_DEAD_BAND:
        direction = ScoreTrendDirection.IMPROVING
    elif total_change < -CHANGE_DEAD_BAND:
        direction = ScoreTrendDirection.DECLINING
    else:
        direction = ScoreTrendDirection.STABLE

    return ScoreTrend(
        direction=direction,
        magnitude=abs(total_change),
        consistency=consistency,
        prediction=round_half_up(prediction),
    )


def append_history_entry(
    history: Sequence[ScoreHistoryEntry],
    score: float,
    date: str,
    trigger: HistoryTrigger = HistoryTrigger.SESSION_COMPLETION,
    session_id: Optional[str] = None,
    factors: Optional[Dict[str, float]] = None
) -> Tuple[ScoreHistoryEntry, ...]:
    """
    Return a new history with one entry appended.

    The entry's ``change`` is measured against the previous entry (0 for
    the first entry). The input history is left untouched.

    Args:
        history: Existing history, oldest first
        score: New score (0-100)
        date: ISO 8601 timestamp of the new entry
        trigger: Why the score was recorded
        session_id: Session that produced the score, if any
        factors: Factor scores at this point, if known

    Returns:
        New tuple of entries ending with the appended one
    """
    change = score - history[-1].score if history else 0
    entry = ScoreHistoryEntry(
        date=date,
        score=score,
        change=change,
        trigger=trigger,
        session_id=session_id,
        factors=dict(factors) if factors is not None else None,
    )
    return tuple(history) + (entry,)


def history_scores(entries: Sequence[ScoreHistoryEntry]) -> List[float]:
    """Extract the score series from history entries."""
    return [e.score for e in entries]
