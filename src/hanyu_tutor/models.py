"""Data classes for the tutor domain model."""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

KINDS = ("quiz", "test")
LEVELS = ("newbie", "level1", "level2", "level3", "level4", "level5", "level6", "sjkc")
DEFAULT_LANGUAGE = "mandarin"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def to_local_naive(ts: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive ones pass through."""
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


def calc_percentage(score: int, total: int) -> int:
    # Integer arithmetic keeps e.g. 1/8 -> 13 exact.
    return (200 * score + total) // (2 * total)


@dataclass
class CompletionEvent:
    user_id: str
    kind: str
    language: str
    level: str
    score: int
    total: int
    percentage: int
    completed_at: datetime
    time_spent_seconds: int = 0
    id: Optional[int] = None

    @property
    def group_key(self) -> str:
        return f"{self.language}_{self.level}"


@dataclass
class StreakState:
    current: int = 0
    best: int = 0


@dataclass
class LevelStats:
    language: str
    level: str
    tests: int = 0
    quizzes: int = 0
    best_score: int = 0
    average_score: int = 0


@dataclass
class Statistics:
    total_tests: int = 0
    total_quizzes: int = 0
    average_score: int = 0
    best_score: int = 0
    total_time_spent: int = 0
    by_level: dict[str, LevelStats] = field(default_factory=dict)
    recent_activity: list[CompletionEvent] = field(default_factory=list)


@dataclass
class Exercise:
    id: int
    language: str
    level: str
    prompt: str
    answers: list[str] = field(default_factory=list)
    hint: str = ""
