"""Tests for gamification.data_loading"""

import math

import pytest

from gamification.data_loading import (
    load_score_history,
    load_session_responses,
    load_streak_data,
    score_couples,
)
from gamification.models import HistoryTrigger


def test_load_session_responses(responses_csv):
    responses = load_session_responses(responses_csv)

    assert list(responses) == ["c1", "c2"]
    first, second = responses["c1"]
    assert first.compatibility_score == 45
    assert first.category == "spending_harmony"
    assert second.compatibility_score == 65
    assert second.weight == 1.0
    assert responses["c2"][0].compatibility_score == 95


def test_unknown_category_is_rejected(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "couple_id,question_id,question_type,user_answer,partner_answer,category\n"
        "c1,q1,spending_style,saver,saver,romance\n"
    )
    with pytest.raises(ValueError, match="romance"):
        load_session_responses(str(path))


def test_missing_columns_and_files(tmp_path):
    path = tmp_path / "short.csv"
    path.write_text("couple_id,question_id\nc1,q1\n")
    with pytest.raises(ValueError, match="missing columns"):
        load_session_responses(str(path))

    with pytest.raises(FileNotFoundError):
        load_session_responses(str(tmp_path / "nope.csv"))


def test_load_score_history_orders_and_derives_change(history_csv):
    history = load_score_history(history_csv)

    entries = history["c1"]
    assert [e.score for e in entries] == [60, 65, 70]
    assert [e.change for e in entries] == [0, 5, 5]
    assert entries[1].trigger is HistoryTrigger.MANUAL_UPDATE
    assert entries[1].session_id is None
    assert entries[2].session_id == "s3"
    assert history["c2"][0].change == 0


def test_load_streak_data(streaks_csv):
    streaks = load_streak_data(streaks_csv)
    assert streaks["c1"].current_streak == 8
    assert streaks["c1"].total_sessions == 12
    assert streaks["c2"].longest_streak == 3


def test_score_couples(responses_csv):
    df = score_couples(load_session_responses(responses_csv))

    assert list(df.index) == ["c1", "c2"]
    assert df.loc["c1", "overall_score"] == 56
    assert df.loc["c2", "overall_score"] == 95
    assert df.loc["c1", "spending_harmony"] == 45
    assert math.isnan(df.loc["c1", "communication_alignment"])


def test_unanswered_questions_are_skipped(tmp_path):
    path = tmp_path / "partial.csv"
    path.write_text(
        "couple_id,question_id,question_type,user_answer,partner_answer,category\n"
        "c1,q1,spending_style,saver,saver,spending_harmony\n"
        "c1,q2,spending_style,saver,,spending_harmony\n"
        "c1,q3,spending_style,,spender,spending_harmony\n"
    )
    responses = load_session_responses(str(path))

    assert [r.question_id for r in responses["c1"]] == ["q1"]
    assert score_couples(responses).loc["c1", "spending_harmony"] == 100
