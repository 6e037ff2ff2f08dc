from types import SimpleNamespace

import pytest

from contest_api.services.scoring_service import calculate_score, is_correct


def _question(question_id: int, question_type: str, correct: list[str]) -> SimpleNamespace:
    return SimpleNamespace(id=question_id, type=question_type, correct_answers=correct)


@pytest.mark.parametrize(
    "selection, expected",
    [
        (["B"], True),
        (["B", "A"], True),
        (["A", "B"], False),
        (["A"], False),
        ([], False),
        (None, False),
    ],
)
def test_single_compares_first_selection_only(selection, expected) -> None:
    question = _question(1, "SINGLE", ["B"])
    assert is_correct(question, selection) is expected


@pytest.mark.parametrize(
    "selection, expected",
    [
        (["A", "C"], True),
        (["C", "A"], True),
        (["A", "C", "C"], True),
        (["A", "C", "D"], False),
        (["A"], False),
        ([], False),
    ],
)
def test_multi_requires_exact_set(selection, expected) -> None:
    question = _question(2, "MULTI", ["A", "C"])
    assert is_correct(question, selection) is expected


def test_calculate_score_counts_one_point_per_question() -> None:
    questions = [
        _question(1, "SINGLE", ["B"]),
        _question(2, "MULTI", ["A", "C"]),
        _question(3, "SINGLE", ["D"]),
    ]
    answers = {1: ["B"], 2: ["C", "A"], 3: ["A"]}
    assert calculate_score(questions, answers) == 2


def test_unanswered_questions_score_zero() -> None:
    questions = [_question(1, "SINGLE", ["B"]), _question(2, "MULTI", ["A", "C"])]
    assert calculate_score(questions, {}) == 0


def test_answers_for_unknown_questions_are_ignored() -> None:
    questions = [_question(1, "SINGLE", ["B"])]
    assert calculate_score(questions, {1: ["B"], 99: ["B"]}) == 1


def test_scenario_direct_submit_scores_zero() -> None:
    questions = [_question(1, "SINGLE", ["B"]), _question(2, "MULTI", ["A", "C"])]
    assert calculate_score(questions, {1: ["A"], 2: ["A"]}) == 0


def test_scoring_is_deterministic_and_does_not_mutate_input() -> None:
    questions = [_question(1, "SINGLE", ["B"]), _question(2, "MULTI", ["A", "C"])]
    answers = {1: ["B", "C"], 2: ["A", "C"]}
    snapshot = {key: list(value) for key, value in answers.items()}

    assert calculate_score(questions, answers) == calculate_score(questions, answers) == 2
    assert answers == snapshot
