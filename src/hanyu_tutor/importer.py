"""Import score history exported from the browser's offline storage.

The export is a mapping of ``<kind>_<language>_<level>`` keys to lists of
``{"date": ..., "score": ..., "total": ...}`` entries. Keys that are not
score histories (streak caches, settings) are ignored.
"""
import json
from datetime import datetime
from pathlib import Path

import structlog

from hanyu_tutor.models import KINDS, to_local_naive
from hanyu_tutor.progress import record_completion

logger = structlog.get_logger()


def read_export(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected a mapping of score histories")
    return data


def parse_history_key(key: str) -> tuple[str, str, str] | None:
    """Split 'quiz_mandarin_level1' into (kind, language, level).

    The language may itself contain underscores; the level never does.
    """
    kind, _, rest = key.partition("_")
    language, _, level = rest.rpartition("_")
    if kind not in KINDS or not language or not level:
        return None
    return kind, language, level


def parse_timestamp(value) -> datetime:
    """Parse an ISO timestamp into a naive local datetime."""
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return to_local_naive(value)


def import_history(db_path: str, user_id: str, file_path: str) -> dict:
    """Store every valid entry of an offline export as a completion event."""
    data = read_export(file_path)
    imported = skipped = 0
    for key, entries in data.items():
        parsed = parse_history_key(key)
        if parsed is None or not isinstance(entries, list):
            continue
        kind, language, level = parsed
        for entry in entries:
            try:
                record_completion(
                    db_path, user_id, kind, language, level,
                    score=entry["score"],
                    total=entry["total"],
                    time_spent_seconds=entry.get("timeSpent", 0),
                    completed_at=parse_timestamp(entry["date"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("history_entry_skipped", key=key, error=str(e))
                skipped += 1
                continue
            imported += 1
    logger.info("history_imported", user_id=user_id, imported=imported, skipped=skipped)
    return {"imported": imported, "skipped": skipped}
