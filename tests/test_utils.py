from datetime import datetime, timedelta, timezone

import pytest

from contest_api.errors import InvalidInputError
from contest_api.utils import ensure_utc, utc_now, validate_answers, validate_id


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is not None


def test_ensure_utc() -> None:
    naive = datetime(2024, 1, 1, 12, 0)
    assert ensure_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    shifted = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(shifted) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert ensure_utc(None) is None


def test_validate_id() -> None:
    assert validate_id("contestId", 5) == 5
    assert validate_id("contestId", " 7 ") == 7
    for bad in ("", "abc", "../1", 0, -3, True, None, 1.5):
        with pytest.raises(InvalidInputError):
            validate_id("contestId", bad)


def test_validate_answers_normalizes_keys() -> None:
    assert validate_answers({"1": ["A"], 2: ("B", "C")}, {1, 2}) == {1: ["A"], 2: ["B", "C"]}


def test_validate_answers_rejects_bad_input() -> None:
    with pytest.raises(InvalidInputError):
        validate_answers({3: ["A"]}, {1, 2})
    with pytest.raises(InvalidInputError):
        validate_answers({1: "A"}, {1})
    with pytest.raises(InvalidInputError):
        validate_answers({"x": ["A"]}, {1})
