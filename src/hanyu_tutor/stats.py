"""Score statistics and analytics over completion events."""
from datetime import datetime, timedelta
from typing import Optional, Sequence

from hanyu_tutor.models import CompletionEvent, LevelStats, Statistics, round_half_up

RECENT_ACTIVITY_LIMIT = 10


def _mean(values: list) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def recent_activity(events: Sequence[CompletionEvent], limit: int = RECENT_ACTIVITY_LIMIT) -> list[CompletionEvent]:
    """Most recently completed events first; equal timestamps keep their input order."""
    return sorted(events, key=lambda e: e.completed_at, reverse=True)[:limit]


def compute_statistics(events: Sequence[CompletionEvent], recent_limit: int = RECENT_ACTIVITY_LIMIT) -> Statistics:
    stats = Statistics()
    all_scores = []
    level_scores: dict[str, list] = {}
    for e in events:
        if e.kind == "test":
            stats.total_tests += 1
        else:
            stats.total_quizzes += 1
        stats.total_time_spent += e.time_spent_seconds
        stats.best_score = max(stats.best_score, e.percentage)
        all_scores.append(e.percentage)

        group = stats.by_level.get(e.group_key)
        if group is None:
            group = stats.by_level[e.group_key] = LevelStats(language=e.language, level=e.level)
            level_scores[e.group_key] = []
        if e.kind == "test":
            group.tests += 1
        else:
            group.quizzes += 1
        group.best_score = max(group.best_score, e.percentage)
        level_scores[e.group_key].append(e.percentage)

    for key, group in stats.by_level.items():
        group.average_score = _mean(level_scores[key])
    stats.average_score = _mean(all_scores)
    stats.recent_activity = recent_activity(events, recent_limit)
    return stats


def best_score(events: Sequence[CompletionEvent], language: str, level: str, kind: str = "test") -> Optional[int]:
    """Best percentage for one kind/language/level, or None if never attempted."""
    scores = [
        e.percentage for e in events
        if e.kind == kind and e.language == language and e.level == level
    ]
    return max(scores) if scores else None


def progress_over_time(events: Sequence[CompletionEvent], days: int = 30, now: Optional[datetime] = None) -> list[CompletionEvent]:
    """Events from the last `days` days, oldest first."""
    if now is None:
        now = datetime.now()
    since = now - timedelta(days=days)
    return sorted((e for e in events if e.completed_at >= since), key=lambda e: e.completed_at)


def compute_analytics(
    events: Sequence[CompletionEvent],
    now: Optional[datetime] = None,
    active_days: int = 7,
    popular_limit: int = 5,
) -> dict:
    """Aggregate activity across all learners."""
    if now is None:
        now = datetime.now()
    since = now - timedelta(days=active_days)
    active = {e.user_id for e in events if e.completed_at >= since}

    groups: dict[tuple, int] = {}
    for e in events:
        groups[(e.language, e.level)] = groups.get((e.language, e.level), 0) + 1
    # equal counts keep first-seen order
    popular = sorted(groups.items(), key=lambda item: item[1], reverse=True)[:popular_limit]

    return {
        "total_activities": len(events),
        "active_learners": len(active),
        "average_score": _mean([e.percentage for e in events]),
        "average_test_score": _mean([e.percentage for e in events if e.kind == "test"]),
        "average_quiz_score": _mean([e.percentage for e in events if e.kind == "quiz"]),
        "popular_levels": [
            {"language": language, "level": level, "activities": count}
            for (language, level), count in popular
        ],
    }
