"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".hanyu_tutor" / "tutor.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS completion_events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    kind TEXT NOT NULL CHECK (kind IN ('quiz', 'test')),
    language TEXT NOT NULL DEFAULT 'mandarin',
    level TEXT NOT NULL,
    score INTEGER NOT NULL CHECK (score >= 0),
    total INTEGER NOT NULL CHECK (total >= 1),
    percentage INTEGER NOT NULL,
    completed_at TEXT NOT NULL,
    time_spent_seconds INTEGER NOT NULL DEFAULT 0,
    CHECK (score <= total)
);

CREATE INDEX IF NOT EXISTS idx_events_user_completed
    ON completion_events (user_id, completed_at DESC);

CREATE INDEX IF NOT EXISTS idx_events_user_group
    ON completion_events (user_id, kind, language, level);

CREATE TABLE IF NOT EXISTS exercises (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    language TEXT NOT NULL DEFAULT 'mandarin',
    level TEXT NOT NULL,
    prompt TEXT NOT NULL,
    answers TEXT NOT NULL,  -- JSON list
    hint TEXT,
    UNIQUE(language, level, prompt)
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
