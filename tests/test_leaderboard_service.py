import pytest

from contest_api.errors import NotFoundError, PermissionDeniedError
from contest_api.models.db.submission import Submission
from contest_api.models.db.user import UserRole
from contest_api.services import leaderboard_service, submission_service


def test_leaderboard_ranks_by_score_then_submission_time(db, user_factory, quiz) -> None:
    contest, q1, q2 = quiz
    first = user_factory("first")
    second = user_factory("second")
    third = user_factory("third")
    submission_service.submit_contest(db, first, contest.id, {q1.id: ["B"]})
    submission_service.submit_contest(db, second, contest.id, {q1.id: ["B"], q2.id: ["A", "C"]})
    submission_service.submit_contest(db, third, contest.id, {q1.id: ["B"]})

    ranked = leaderboard_service.get_leaderboard(db, contest.id, first)

    assert [(rank, item.user.username, item.score) for rank, item in ranked] == [
        (1, "second", 2),
        (2, "first", 1),
        (3, "third", 1),
    ]


def test_leaderboard_skips_unfinished_attempts(db, user_factory, quiz) -> None:
    contest, q1, _ = quiz
    finished = user_factory("finished")
    pending = user_factory("pending")
    submission_service.submit_contest(db, finished, contest.id, {q1.id: ["A"]})
    submission_service.join_contest(db, pending, contest.id)

    ranked = leaderboard_service.get_leaderboard(db, contest.id, finished)
    assert [item.user.username for _, item in ranked] == ["finished"]

    top = leaderboard_service.get_top_scorer(db, contest.id, finished)
    assert top.user.username == "finished"


def test_top_scorer_without_submissions(db, user, quiz) -> None:
    contest, _, _ = quiz
    with pytest.raises(NotFoundError):
        leaderboard_service.get_top_scorer(db, contest.id, user)


def test_history_of_regular_user_is_their_own(db, user_factory, quiz, quiz_factory) -> None:
    contest, q1, _ = quiz
    other_contest, _, _ = quiz_factory(name="Other")
    alice = user_factory("alice")
    bob = user_factory("bob")
    submission_service.submit_contest(db, alice, contest.id, {q1.id: ["B"]})
    submission_service.join_contest(db, alice, other_contest.id)
    submission_service.join_contest(db, bob, contest.id)

    history = leaderboard_service.get_user_history(db, alice)
    completed, in_progress = leaderboard_service.split_history(history)

    assert {item.user_id for item in history} == {alice.id}
    assert [item.contest_id for item in completed] == [contest.id]
    assert [item.contest_id for item in in_progress] == [other_contest.id]

    with pytest.raises(PermissionDeniedError):
        leaderboard_service.get_user_history(db, alice, owner_id=bob.id)


def test_admin_history_covers_everyone(db, user_factory, quiz) -> None:
    contest, q1, _ = quiz
    admin = user_factory("root", UserRole.ADMIN)
    alice = user_factory("alice")
    bob = user_factory("bob")
    submission_service.submit_contest(db, alice, contest.id, {q1.id: ["B"]})
    submission_service.join_contest(db, bob, contest.id)

    history = leaderboard_service.get_user_history(db, admin)
    assert {item.user_id for item in history} == {alice.id, bob.id}
    # Submitted attempts come first
    assert history[0].user_id == alice.id

    only_bob = leaderboard_service.get_user_history(db, admin, owner_id=bob.id)
    assert [item.user_id for item in only_bob] == [bob.id]


def test_delete_result(db, user, quiz) -> None:
    contest, q1, _ = quiz
    submission = submission_service.submit_contest(db, user, contest.id, {q1.id: ["B"]})
    submission_id = submission.id

    leaderboard_service.delete_result(db, submission_id)

    assert db.get(Submission, submission_id) is None
    with pytest.raises(NotFoundError):
        leaderboard_service.delete_result(db, submission_id)
