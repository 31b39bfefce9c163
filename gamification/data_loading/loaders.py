"""
Data loading functions for batch scoring.

This module reads session responses, score history and streak counters
from CSV files exported by the application database. Each file holds rows
for many couples, keyed by ``couple_id``. Scoring is not done here beyond
the per-row compatibility lookup; that's handled by the scoring modules.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from ..models.schema import SCORE_FACTOR_KEYS, ScoreHistoryEntry, SessionResponse, StreakData
from ..compatibility.matrices import CompatibilityMatrix, score_response
from ..scoring.aggregation import (
    DEFAULT_SCORE_WEIGHTS,
    WeightInput,
    calculate_overall_score,
    calculate_session_score,
)

logger = logging.getLogger(__name__)

RESPONSE_COLUMNS = ["couple_id", "question_id", "question_type",
                    "user_answer", "partner_answer", "category"]
HISTORY_COLUMNS = ["couple_id", "date", "score"]
STREAK_COLUMNS = ["couple_id", "current_streak", "longest_streak", "total_sessions"]


def _read_csv(filepath: str, label: str, required: List[str]) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found: {filepath}")

    logger.info(f"Loading {label} from {filepath}")
    df = pd.read_csv(filepath, dtype={"couple_id": str, "question_id": str, "session_id": str})

    if df.empty:
        raise ValueError(f"{label} file is empty: {filepath}")

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{label} file {filepath} is missing columns: {missing}")

    logger.info(f"Loaded {len(df)} rows with {len(df.columns)} columns")
    return df


def load_session_responses(
    filepath: str,
    matrices: Optional[CompatibilityMatrix] = None
) -> Dict[str, List[SessionResponse]]:
    """
    Load answered question pairs and score each one.

    Expected columns: couple_id, question_id, question_type, user_answer,
    partner_answer, category, and optionally weight (default 1.0).

    Args:
        filepath: Path to the responses CSV
        matrices: Compatibility matrix set (default: built-in matrices)

    Returns:
        Dictionary mapping couple_id to its scored responses, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, lacks columns or names unknown categories
    """
    df = _read_csv(filepath, "Session responses", RESPONSE_COLUMNS)

    unknown = sorted(set(df["category"].dropna()) - set(SCORE_FACTOR_KEYS))
    if unknown:
        raise ValueError(f"Unknown categories in {filepath}: {unknown}")

    if "weight" not in df.columns:
        df["weight"] = 1.0
    df["weight"] = df["weight"].fillna(1.0).astype(float)

    # A response exists only once both partners have answered
    answered = df["user_answer"].notna() & df["partner_answer"].notna()
    if not answered.all():
        logger.info(f"Skipping {int((~answered).sum())} rows with a missing answer")
        df = df[answered].copy()

    # Answers are categorical tokens
    for col in ["user_answer", "partner_answer"]:
        df[col] = df[col].astype(str).str.strip()

    responses: Dict[str, List[SessionResponse]] = {}
    for couple_id, group in df.groupby("couple_id", sort=False):
        responses[couple_id] = [
            score_response(
                question_id=row.question_id,
                question_type=row.question_type,
                user_answer=row.user_answer,
                partner_answer=row.partner_answer,
                category=row.category,
                weight=row.weight,
                matrices=matrices,
            )
            for row in group.itertuples(index=False)
        ]

    logger.info(f"Scored {len(df)} responses for {len(responses)} couples")
    return responses


def load_score_history(filepath: str) -> Dict[str, List[ScoreHistoryEntry]]:
    """
    Load score history snapshots.

    Expected columns: couple_id, date (ISO 8601), score, and optionally
    trigger and session_id. Rows are ordered by date within each couple and
    ``change`` is derived from the previous row.

    Args:
        filepath: Path to the history CSV

    Returns:
        Dictionary mapping couple_id to its history, oldest first

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or lacks columns
    """
    df = _read_csv(filepath, "Score history", HISTORY_COLUMNS)

    df["_ts"] = pd.to_datetime(df["date"], utc=True, format="ISO8601")
    df = df.sort_values(["couple_id", "_ts"], kind="stable")
    df["change"] = df.groupby("couple_id")["score"].diff().fillna(0)

    if "trigger" not in df.columns:
        df["trigger"] = "session_completion"
    df["trigger"] = df["trigger"].fillna("session_completion")
    if "session_id" not in df.columns:
        df["session_id"] = None
    df["session_id"] = df["session_id"].astype(object).where(df["session_id"].notna(), None)

    history: Dict[str, List[ScoreHistoryEntry]] = {}
    for couple_id, group in df.groupby("couple_id", sort=False):
        history[couple_id] = [
            ScoreHistoryEntry(
                date=row.date,
                score=float(row.score),
                change=float(row.change),
                trigger=row.trigger,
                session_id=row.session_id,
            )
            for row in group.itertuples(index=False)
        ]

    logger.info(f"Loaded history for {len(history)} couples")
    return history


def load_streak_data(filepath: str) -> Dict[str, StreakData]:
    """
    Load streak counters, one row per couple.

    Args:
        filepath: Path to the streaks CSV

    Returns:
        Dictionary mapping couple_id to StreakData
    """
    df = _read_csv(filepath, "Streak data", STREAK_COLUMNS)
    streaks = {}
    for row in df.to_dict(orient="records"):
        for col in STREAK_COLUMNS[1:]:
            row[col] = int(row[col])
        streaks[row["couple_id"]] = StreakData.from_dict(row)
    return streaks


def score_couples(
    responses_by_couple: Dict[str, List[SessionResponse]],
    weights: WeightInput = DEFAULT_SCORE_WEIGHTS
) -> pd.DataFrame:
    """
    Score every couple's responses.

    Args:
        responses_by_couple: Scored responses keyed by couple_id
        weights: Factor weight table

    Returns:
        DataFrame indexed by couple_id with one column per factor (NaN where
        a couple answered no questions in that category) and overall_score
    """
    rows = []
    for couple_id, responses in responses_by_couple.items():
        factors = calculate_session_score(responses, weights)
        row = {"couple_id": couple_id, **factors}
        row["overall_score"] = calculate_overall_score(factors, weights)
        rows.append(row)

    columns = ["couple_id", *SCORE_FACTOR_KEYS, "overall_score"]
    df = pd.DataFrame(rows, columns=columns).set_index("couple_id")
    logger.info(f"Scored {len(df)} couples")
    return df
