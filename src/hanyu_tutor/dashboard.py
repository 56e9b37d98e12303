"""Dashboard data: streaks, statistics and reports for stored learners."""
from datetime import date, datetime
from typing import Optional

from hanyu_tutor.models import StreakState, Statistics
from hanyu_tutor.progress import find_by_user, get_all_events, list_users
from hanyu_tutor.stats import compute_analytics, compute_statistics, progress_over_time
from hanyu_tutor.streak import compute_streak

REPORT_ACTIVITY_LIMIT = 20


def get_streak_label(current: int) -> str:
    if current == 0:
        return "Start a new streak today"
    elif current == 1:
        return "1 day"
    return f"{current} days"


def get_score_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def get_user_streak(db_path: str, user_id: str, today: Optional[date] = None) -> StreakState:
    return compute_streak(find_by_user(db_path, user_id), today=today)


def get_user_statistics(db_path: str, user_id: str) -> Statistics:
    return compute_statistics(find_by_user(db_path, user_id))


def get_learner_report(db_path: str, user_id: str, now: Optional[datetime] = None) -> dict:
    """Everything a tutor sees for one learner."""
    if now is None:
        now = datetime.now()
    events = find_by_user(db_path, user_id)
    return {
        "user_id": user_id,
        "statistics": compute_statistics(events),
        "streak": compute_streak(events, today=now.date()),
        "progress_over_time": progress_over_time(events, days=30, now=now),
        "recent_activity": events[:REPORT_ACTIVITY_LIMIT],
    }


def get_class_analytics(db_path: str, now: Optional[datetime] = None) -> dict:
    analytics = compute_analytics(get_all_events(db_path), now=now)
    analytics["total_learners"] = len(list_users(db_path))
    return analytics
