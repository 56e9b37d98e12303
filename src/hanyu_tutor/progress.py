"""Completion event storage: record, query and reset a learner's history."""
from datetime import datetime
from typing import Optional

import structlog

from hanyu_tutor.db import get_connection
from hanyu_tutor.models import (
    DEFAULT_LANGUAGE, KINDS, LEVELS, CompletionEvent, calc_percentage, to_local_naive,
)

logger = structlog.get_logger()


class ProgressValidationError(ValueError):
    """A completion event failed write-time validation."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


def validate_completion(kind: str, language: str, level: str, score: int, total: int,
                        time_spent_seconds: int = 0) -> None:
    if kind not in KINDS:
        raise ProgressValidationError("kind", "must be quiz or test")
    if not language or not str(language).strip():
        raise ProgressValidationError("language", "is required")
    if level not in LEVELS:
        raise ProgressValidationError("level", f"must be one of {', '.join(LEVELS)}")
    for name, value in (("score", score), ("total", total), ("time_spent_seconds", time_spent_seconds)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ProgressValidationError(name, "must be an integer")
    if total < 1:
        raise ProgressValidationError("total", "must be greater than 0")
    if score < 0:
        raise ProgressValidationError("score", "must not be negative")
    if score > total:
        raise ProgressValidationError("score", "must not exceed total")
    if time_spent_seconds < 0:
        raise ProgressValidationError("time_spent_seconds", "must not be negative")


def _row_to_event(row) -> CompletionEvent:
    return CompletionEvent(
        id=row["id"],
        user_id=row["user_id"],
        kind=row["kind"],
        language=row["language"],
        level=row["level"],
        score=row["score"],
        total=row["total"],
        percentage=row["percentage"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
        time_spent_seconds=row["time_spent_seconds"],
    )


def record_completion(
    db_path: str,
    user_id: str,
    kind: str,
    language: str,
    level: str,
    score: int,
    total: int,
    time_spent_seconds: int = 0,
    completed_at: Optional[datetime] = None,
) -> CompletionEvent:
    """Validate and insert a finished quiz or test. Percentage is always derived here."""
    language = language or DEFAULT_LANGUAGE
    validate_completion(kind, language, level, score, total, time_spent_seconds)
    if completed_at is None:
        completed_at = datetime.now()
    completed_at = to_local_naive(completed_at)
    percentage = calc_percentage(score, total)
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT INTO completion_events
        (user_id, kind, language, level, score, total, percentage, completed_at, time_spent_seconds)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (user_id, kind, language, level, score, total, percentage,
         completed_at.isoformat(), time_spent_seconds),
    )
    event_id = cursor.lastrowid
    conn.commit()
    conn.close()
    logger.info(
        "completion_recorded", user_id=user_id, kind=kind, language=language,
        level=level, score=score, total=total, percentage=percentage,
    )
    return CompletionEvent(
        id=event_id,
        user_id=user_id,
        kind=kind,
        language=language,
        level=level,
        score=score,
        total=total,
        percentage=percentage,
        completed_at=completed_at,
        time_spent_seconds=time_spent_seconds,
    )


def find_by_user(
    db_path: str,
    user_id: str,
    kind: Optional[str] = None,
    language: Optional[str] = None,
    level: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[CompletionEvent]:
    """A user's events, newest first, optionally filtered by kind/language/level."""
    query = "SELECT * FROM completion_events WHERE user_id = ?"
    params: list = [user_id]
    for column, value in (("kind", kind), ("language", language), ("level", level)):
        if value:
            query += f" AND {column} = ?"
            params.append(value)
    query += " ORDER BY completed_at DESC, id DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    conn = get_connection(db_path)
    rows = conn.execute(query, params).fetchall()
    conn.close()
    return [_row_to_event(r) for r in rows]


def get_all_events(db_path: str) -> list[CompletionEvent]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM completion_events ORDER BY completed_at DESC, id DESC").fetchall()
    conn.close()
    return [_row_to_event(r) for r in rows]


def list_users(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT DISTINCT user_id FROM completion_events ORDER BY user_id").fetchall()
    conn.close()
    return [r["user_id"] for r in rows]


def reset_progress(db_path: str, user_id: str) -> int:
    """Delete every completion event for a user. Returns the number deleted."""
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM completion_events WHERE user_id = ?", (user_id,))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()
    logger.info("progress_reset", user_id=user_id, deleted=deleted)
    return deleted
