"""Tests for data model classes."""
from datetime import datetime, timezone

from hanyu_tutor.models import (
    LEVELS, CompletionEvent, Exercise, Statistics, StreakState, calc_percentage, round_half_up,
    to_local_naive,
)


def test_calc_percentage():
    assert calc_percentage(9, 10) == 90
    assert calc_percentage(0, 3) == 0
    assert calc_percentage(3, 3) == 100


def test_calc_percentage_rounds_half_up():
    assert calc_percentage(1, 8) == 13  # 12.5
    assert calc_percentage(1, 3) == 33
    assert calc_percentage(2, 3) == 67


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(70.0) == 70
    assert round_half_up(71.49) == 71


def test_completion_event_defaults():
    e = CompletionEvent(
        user_id="alice", kind="quiz", language="mandarin", level="newbie",
        score=4, total=5, percentage=80, completed_at=datetime(2026, 1, 1, 9, 0),
    )
    assert e.time_spent_seconds == 0
    assert e.id is None
    assert e.group_key == "mandarin_newbie"


def test_levels_are_ordered():
    assert LEVELS[0] == "newbie"
    assert LEVELS[-1] == "sjkc"
    assert len(LEVELS) == 8


def test_streak_state_defaults():
    assert StreakState() == StreakState(current=0, best=0)


def test_statistics_defaults_are_independent():
    a, b = Statistics(), Statistics()
    a.recent_activity.append("x")
    assert b.recent_activity == []
    assert a.by_level == {} and b.by_level == {}


def test_exercise_defaults():
    ex = Exercise(id=1, language="mandarin", level="newbie", prompt="你好")
    assert ex.answers == []
    assert ex.hint == ""


def test_to_local_naive():
    naive = datetime(2026, 3, 1, 10, 0)
    assert to_local_naive(naive) is naive
    aware = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert to_local_naive(aware) == aware.astimezone().replace(tzinfo=None)
