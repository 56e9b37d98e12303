"""Tests for score statistics and analytics."""
import math
from datetime import datetime, timedelta

from hanyu_tutor.stats import (
    best_score, compute_analytics, compute_statistics, progress_over_time, recent_activity,
)

NOW = datetime(2026, 3, 15, 12, 0)


def test_empty_statistics_are_zero():
    stats = compute_statistics([])
    assert stats.total_tests == 0
    assert stats.total_quizzes == 0
    assert stats.average_score == 0
    assert stats.best_score == 0
    assert stats.total_time_spent == 0
    assert stats.by_level == {}
    assert stats.recent_activity == []
    assert not math.isnan(stats.average_score)


def test_average_is_mean_of_percentages(make_event):
    events = [make_event(NOW, score=9, total=10), make_event(NOW, score=5, total=10)]
    assert compute_statistics(events).average_score == 70


def test_counts_best_and_time(make_event):
    events = [
        make_event(NOW, score=9, total=10, kind="test", time_spent_seconds=120),
        make_event(NOW, score=3, total=4, kind="quiz", time_spent_seconds=30),
        make_event(NOW, score=1, total=2, kind="quiz"),
    ]
    stats = compute_statistics(events)
    assert stats.total_tests == 1
    assert stats.total_quizzes == 2
    assert stats.best_score == 90
    assert stats.total_time_spent == 150
    # mean of 90, 75, 50 = 71.67
    assert stats.average_score == 72


def test_average_rounds_half_up(make_event):
    events = [make_event(NOW, score=1, total=2), make_event(NOW, score=1, total=1)]
    assert compute_statistics(events).average_score == 75
    events = [make_event(NOW, score=50, total=100), make_event(NOW, score=51, total=100)]
    assert compute_statistics(events).average_score == 51  # 50.5


def test_breakdown_by_language_and_level(make_event):
    events = [
        make_event(NOW, score=10, total=10, level="newbie", kind="test"),
        make_event(NOW, score=6, total=10, level="newbie", kind="quiz"),
        make_event(NOW, score=4, total=10, level="level2", kind="quiz"),
    ]
    by_level = compute_statistics(events).by_level
    assert set(by_level) == {"mandarin_newbie", "mandarin_level2"}
    newbie = by_level["mandarin_newbie"]
    assert (newbie.tests, newbie.quizzes) == (1, 1)
    assert newbie.best_score == 100
    assert newbie.average_score == 80
    level2 = by_level["mandarin_level2"]
    assert (level2.tests, level2.quizzes, level2.best_score, level2.average_score) == (0, 1, 40, 40)


def test_recent_activity_newest_first_limited(make_event):
    events = [make_event(NOW - timedelta(hours=h), score=h % 10) for h in range(15)]
    recent = recent_activity(events)
    assert len(recent) == 10
    assert recent[0].completed_at == NOW
    assert recent == sorted(recent, key=lambda e: e.completed_at, reverse=True)
    assert compute_statistics(events).recent_activity == recent


def test_recent_activity_ties_keep_input_order(make_event):
    first = make_event(NOW, score=1)
    second = make_event(NOW, score=2)
    older = make_event(NOW - timedelta(days=1), score=3)
    assert recent_activity([older, first, second]) == [first, second, older]


def test_best_score_by_group(make_event):
    events = [
        make_event(NOW, score=7, total=10, kind="test", level="level1"),
        make_event(NOW, score=9, total=10, kind="test", level="level1"),
        make_event(NOW, score=10, total=10, kind="quiz", level="level1"),
    ]
    assert best_score(events, "mandarin", "level1") == 90
    assert best_score(events, "mandarin", "level1", kind="quiz") == 100
    assert best_score(events, "mandarin", "level6") is None


def test_progress_over_time_window(make_event):
    events = [
        make_event(NOW - timedelta(days=40)),
        make_event(NOW - timedelta(days=2)),
        make_event(NOW - timedelta(days=10)),
    ]
    window = progress_over_time(events, days=30, now=NOW)
    assert [e.completed_at for e in window] == [NOW - timedelta(days=10), NOW - timedelta(days=2)]


def test_analytics_empty():
    data = compute_analytics([], now=NOW)
    assert data == {
        "total_activities": 0,
        "active_learners": 0,
        "average_score": 0,
        "average_test_score": 0,
        "average_quiz_score": 0,
        "popular_levels": [],
    }


def test_analytics_across_learners(make_event):
    events = [
        make_event(NOW - timedelta(days=1), user_id="alice", kind="test", score=8, level="level1"),
        make_event(NOW - timedelta(days=2), user_id="bob", kind="quiz", score=6, level="level1"),
        make_event(NOW - timedelta(days=20), user_id="carol", kind="quiz", score=4, level="newbie"),
    ]
    data = compute_analytics(events, now=NOW)
    assert data["total_activities"] == 3
    assert data["active_learners"] == 2
    assert data["average_score"] == 60
    assert data["average_test_score"] == 80
    assert data["average_quiz_score"] == 50
    assert data["popular_levels"] == [
        {"language": "mandarin", "level": "level1", "activities": 2},
        {"language": "mandarin", "level": "newbie", "activities": 1},
    ]
