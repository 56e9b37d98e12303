"""Consecutive-day study streak calculation."""
from datetime import date, datetime
from typing import Iterable, Optional

from hanyu_tutor.models import CompletionEvent, StreakState


def local_date(ts: datetime) -> date:
    """Calendar date of a timestamp in local time. Naive timestamps are already local."""
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def compute_streak(events: Iterable[CompletionEvent], today: Optional[date] = None) -> StreakState:
    """Compute current and best streaks from a user's completion history.

    Events may come in any order. Several events on one calendar date count
    as a single day. The current streak is only alive when the most recent
    activity happened today or yesterday.
    """
    if today is None:
        today = date.today()
    days = sorted({local_date(e.completed_at) for e in events}, reverse=True)
    if not days:
        return StreakState(current=0, best=0)

    run = 1
    best = 0
    newest_run = None
    for prev, day in zip(days, days[1:]):
        if (prev - day).days == 1:
            run += 1
            continue
        if newest_run is None:
            newest_run = run
        best = max(best, run)
        run = 1
    if newest_run is None:
        newest_run = run
    best = max(best, run)

    alive = (today - days[0]).days <= 1
    return StreakState(current=newest_run if alive else 0, best=best)
