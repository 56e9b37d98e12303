"""Free-text answer grading for romanized Chinese input.

Learners type pinyin with tone marks ("nǐ hǎo"), tone numbers ("ni3 hao3"),
or no tones at all ("nihao"). All of these are treated as the same answer:
both the learner input and every accepted answer are normalized before an
exact comparison.
"""
import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Sequence, Union

EMPTY = "empty"
CORRECT = "correct"
INCORRECT = "incorrect"

_DIGITS = re.compile(r"[0-9]")
_WHITESPACE = re.compile(r"\s+")

AcceptedAnswers = Union[str, Sequence[str]]


@dataclass
class GradeResult:
    status: str
    accepted: list[str] = field(default_factory=list)

    @property
    def is_correct(self) -> bool:
        return self.status == CORRECT

    @property
    def display_answers(self) -> str:
        return " or ".join(self.accepted)


def normalize_answer(value) -> str:
    """Canonicalize an answer: trim, lowercase, drop tone marks, digits and whitespace."""
    text = str(value).strip().lower()
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("M"))
    text = _DIGITS.sub("", text)
    return _WHITESPACE.sub("", text)


def _as_list(accepted_answers: AcceptedAnswers) -> list:
    if isinstance(accepted_answers, str) or not isinstance(accepted_answers, Iterable):
        return [accepted_answers]
    return list(accepted_answers)


def is_correct(user_input, accepted_answers: AcceptedAnswers) -> bool:
    if not str(user_input).strip():
        return False
    user = normalize_answer(user_input)
    return any(normalize_answer(a) == user for a in _as_list(accepted_answers))


def grade_submission(user_input, accepted_answers: AcceptedAnswers) -> GradeResult:
    """Grade one submission into empty / correct / incorrect."""
    accepted = [str(a) for a in _as_list(accepted_answers)]
    if not str(user_input).strip():
        return GradeResult(EMPTY, accepted)
    if is_correct(user_input, accepted):
        return GradeResult(CORRECT, accepted)
    return GradeResult(INCORRECT, accepted)
