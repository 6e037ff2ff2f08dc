"""Validation utilities."""
from collections.abc import Mapping, Sequence

from contest_api.errors import InvalidInputError


def validate_id(name: str, value: object) -> int:
    """Validate a positive integer identifier."""
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {name}")
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            raise InvalidInputError(f"{name} is required")
        if not cleaned.isdigit():
            raise InvalidInputError(f"Invalid {name}")
        value = int(cleaned)
    if not isinstance(value, int) or value <= 0:
        raise InvalidInputError(f"Invalid {name}")
    return value


def validate_answers(
    answers: Mapping[object, Sequence[str]], question_ids: set[int]
) -> dict[int, list[str]]:
    """Normalize an answer mapping and check every key is a known question."""
    normalized: dict[int, list[str]] = {}
    for raw_id, selection in answers.items():
        question_id = validate_id("questionId", raw_id)
        if question_id not in question_ids:
            raise InvalidInputError(f"Question {question_id} does not belong to this contest")
        if isinstance(selection, (str, bytes)) or not isinstance(selection, Sequence):
            raise InvalidInputError(f"Answer for question {question_id} must be a list")
        normalized[question_id] = [str(token) for token in selection]
    return normalized
