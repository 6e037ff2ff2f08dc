"""Scoring of contest answers.

Each question is worth one point. MULTI questions need the selected set to
equal the correct set exactly; SINGLE questions compare only the first
selected option with the first correct answer. Missing answers score zero.
"""
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from contest_api.models.db.contest import QuestionType


class ScorableQuestion(Protocol):
    id: int
    type: str
    correct_answers: list[str]


def is_correct(question: ScorableQuestion, selection: Sequence[str] | None) -> bool:
    """Check a single selection against a question's correct answers."""
    selected = list(selection or [])
    correct = list(question.correct_answers)

    if question.type == QuestionType.MULTI:
        return set(selected) == set(correct)

    if not selected or not correct:
        return False
    return selected[0] == correct[0]


def calculate_score(
    questions: Iterable[ScorableQuestion],
    answers: Mapping[int, Sequence[str]],
) -> int:
    """Count the questions answered correctly."""
    score = 0
    for question in questions:
        if is_correct(question, answers.get(question.id)):
            score += 1
    return score
