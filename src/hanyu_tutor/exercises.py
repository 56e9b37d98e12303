"""Free-text pinyin exercises: seeding, selection and grading."""
import json
from pathlib import Path
from typing import Optional

from hanyu_tutor.db import get_connection
from hanyu_tutor.grader import GradeResult, grade_submission
from hanyu_tutor.models import DEFAULT_LANGUAGE, Exercise

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the database already holds exercise content."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM exercises").fetchone()[0]
    conn.close()
    return count > 0


def seed_exercises(db_path: str, content_file: Optional[Path] = None) -> int:
    """Insert exercises from the bundled JSON. Safe to run repeatedly; returns rows added."""
    data = json.loads((content_file or CONTENT_DIR / "exercises.json").read_text(encoding="utf-8"))
    language = data.get("language", DEFAULT_LANGUAGE)
    conn = get_connection(db_path)
    added = 0
    for ex in data["exercises"]:
        cursor = conn.execute(
            "INSERT OR IGNORE INTO exercises (language, level, prompt, answers, hint) VALUES (?, ?, ?, ?, ?)",
            (ex.get("language", language), ex["level"], ex["prompt"],
             json.dumps(ex["answers"], ensure_ascii=False), ex.get("hint", "")),
        )
        added += cursor.rowcount
    conn.commit()
    conn.close()
    return added


def _row_to_exercise(row) -> Exercise:
    return Exercise(
        id=row["id"],
        language=row["language"],
        level=row["level"],
        prompt=row["prompt"],
        answers=json.loads(row["answers"]),
        hint=row["hint"] or "",
    )


def get_exercises(db_path: str, level: str, language: str = DEFAULT_LANGUAGE,
                  count: Optional[int] = None, shuffle: bool = True) -> list[Exercise]:
    query = "SELECT * FROM exercises WHERE level = ? AND language = ?"
    query += " ORDER BY RANDOM()" if shuffle else " ORDER BY id"
    params: list = [level, language]
    if count is not None:
        query += " LIMIT ?"
        params.append(count)
    conn = get_connection(db_path)
    rows = conn.execute(query, params).fetchall()
    conn.close()
    return [_row_to_exercise(r) for r in rows]


def get_exercise(db_path: str, exercise_id: int) -> Exercise:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM exercises WHERE id = ?", (exercise_id,)).fetchone()
    conn.close()
    if row is None:
        raise KeyError(exercise_id)
    return _row_to_exercise(row)


def check_exercise(db_path: str, exercise_id: int, user_input: str) -> GradeResult:
    return grade_submission(user_input, get_exercise(db_path, exercise_id).answers)
