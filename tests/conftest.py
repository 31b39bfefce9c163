"""Shared fixtures for alignment scoring tests."""

from datetime import date, timedelta
from pathlib import Path
from typing import List, Sequence

import pytest

from gamification.models import ScoreFactors, ScoreHistoryEntry, StreakData

PROJECT_ROOT = Path(__file__).parent.parent


def make_history(scores: Sequence[float], start: date = date(2024, 1, 1)) -> List[ScoreHistoryEntry]:
    """Build weekly history entries with changes derived from the scores."""
    entries = []
    previous = None
    for i, score in enumerate(scores):
        entries.append(ScoreHistoryEntry(
            date=(start + timedelta(weeks=i)).isoformat(),
            score=score,
            change=0 if previous is None else score - previous,
        ))
        previous = score
    return entries


@pytest.fixture
def full_factors() -> ScoreFactors:
    return ScoreFactors(
        communication_alignment=40,
        financial_values_match=50,
        goal_compatibility=60,
        spending_harmony=90,
        future_planning_sync=88,
        conflict_resolution=84,
        transparency_level=95,
        session_consistency=99,
    )


@pytest.fixture
def streak() -> StreakData:
    return StreakData(couple_id="c1", current_streak=6, longest_streak=12, total_sessions=4)


@pytest.fixture
def config_path() -> str:
    return str(PROJECT_ROOT / "configs" / "config.yaml")


@pytest.fixture
def responses_csv(tmp_path) -> str:
    path = tmp_path / "responses.csv"
    path.write_text(
        "couple_id,question_id,question_type,user_answer,partner_answer,category,weight\n"
        "c1,q1,spending_style,saver,spender,spending_harmony,1.0\n"
        "c1,q2,risk_tolerance,moderate,conservative,financial_values_match,\n"
        "c2,q1,spending_style,balanced,balanced,spending_harmony,1\n"
    )
    return str(path)


@pytest.fixture
def history_csv(tmp_path) -> str:
    path = tmp_path / "history.csv"
    path.write_text(
        "couple_id,date,score,trigger,session_id\n"
        "c1,2024-01-15,70,session_completion,s3\n"
        "c1,2024-01-01,60,session_completion,s1\n"
        "c1,2024-01-08,65,manual_update,\n"
        "c2,2024-01-01,90,session_completion,s9\n"
    )
    return str(path)


@pytest.fixture
def streaks_csv(tmp_path) -> str:
    path = tmp_path / "streaks.csv"
    path.write_text(
        "couple_id,current_streak,longest_streak,total_sessions\n"
        "c1,8,10,12\n"
        "c2,0,3,3\n"
    )
    return str(path)


@pytest.fixture(name="make_history")
def make_history_fixture():
    return make_history
