"""Runtime configuration and persisted learner settings."""
import os

from hanyu_tutor.db import DEFAULT_DB_PATH, get_connection

DB_PATH_ENV = "HANYU_TUTOR_DB"
ENV_VAR = "HANYU_TUTOR_ENV"
DEFAULT_USER = "local"


def get_db_path() -> str:
    return os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH


def is_production() -> bool:
    return os.environ.get(ENV_VAR, "development").lower() == "production"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def get_active_user(db_path: str) -> str:
    return get_setting(db_path, "active_user", DEFAULT_USER)


def set_active_user(db_path: str, user_id: str) -> None:
    user_id = user_id.strip()
    if not user_id:
        raise ValueError("user id must not be empty")
    set_setting(db_path, "active_user", user_id)
