from datetime import datetime

import pytest

from hanyu_tutor.models import CompletionEvent, calc_percentage


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def make_event():
    """Build an in-memory CompletionEvent without touching the database."""
    def _make(completed_at: datetime, score: int = 8, total: int = 10, kind: str = "quiz",
              level: str = "level1", language: str = "mandarin", user_id: str = "alice",
              time_spent_seconds: int = 0) -> CompletionEvent:
        return CompletionEvent(
            user_id=user_id, kind=kind, language=language, level=level,
            score=score, total=total, percentage=calc_percentage(score, total),
            completed_at=completed_at, time_spent_seconds=time_spent_seconds,
        )
    return _make
