import pytest

from contest_api.models.db.contest import Contest, ContestType
from contest_api.models.db.user import UserRole
from contest_api.services.access_service import (
    AdminPolicy,
    GuestPolicy,
    NormalPolicy,
    VipPolicy,
    policy_for,
    policy_for_user,
)


@pytest.mark.parametrize(
    "role, policy_type",
    [
        (UserRole.ADMIN, AdminPolicy),
        (UserRole.VIP, VipPolicy),
        (UserRole.NORMAL, NormalPolicy),
        (UserRole.GUEST, GuestPolicy),
        ("ADMIN", AdminPolicy),
        ("SOMETHING_ELSE", GuestPolicy),
        (None, GuestPolicy),
    ],
)
def test_policy_for_role(role, policy_type) -> None:
    assert isinstance(policy_for(role), policy_type)


def test_policy_for_missing_user_is_guest() -> None:
    assert isinstance(policy_for_user(None), GuestPolicy)


def test_visible_contest_types() -> None:
    both = {ContestType.NORMAL.value, ContestType.VIP.value}
    assert policy_for(UserRole.ADMIN).visible_contest_types() == both
    assert policy_for(UserRole.VIP).visible_contest_types() == both
    assert policy_for(UserRole.NORMAL).visible_contest_types() == {ContestType.NORMAL.value}
    assert policy_for(UserRole.GUEST).visible_contest_types() == both


def test_normal_users_cannot_see_vip_contests() -> None:
    vip_contest = Contest(name="VIP", type=ContestType.VIP.value)
    normal_contest = Contest(name="Open", type=ContestType.NORMAL.value)
    policy = policy_for(UserRole.NORMAL)

    assert policy.can_view_contest(normal_contest)
    assert not policy.can_view_contest(vip_contest)
    assert policy_for(UserRole.VIP).can_join_contest(vip_contest)


def test_guests_can_browse_but_not_join() -> None:
    contest = Contest(name="Open", type=ContestType.NORMAL.value)
    policy = policy_for(UserRole.GUEST)

    assert policy.can_view_contest(contest)
    assert not policy.can_join_contest(contest)


def test_history_visibility() -> None:
    assert policy_for(UserRole.ADMIN).can_view_history_of(1, 2)
    assert policy_for(UserRole.ADMIN).sees_all_histories()
    assert policy_for(UserRole.NORMAL).can_view_history_of(3, 3)
    assert not policy_for(UserRole.NORMAL).can_view_history_of(3, 4)
    assert not policy_for(UserRole.VIP).sees_all_histories()
    assert not policy_for(UserRole.GUEST).can_view_history_of(None, 1)
