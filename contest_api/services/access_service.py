"""Role-based visibility of contests and histories."""
from sqlalchemy import Select

from contest_api.models.db.contest import Contest, ContestType
from contest_api.models.db.user import User, UserRole


class VisibilityPolicy:
    """Visibility rules for one caller role."""

    role = UserRole.GUEST
    contest_types: frozenset[str] = frozenset()
    can_participate = True

    def visible_contest_types(self) -> frozenset[str]:
        return self.contest_types

    def filter_contests(self, query: Select) -> Select:
        """Restrict a contest query to the types this role may see."""
        return query.where(Contest.type.in_(sorted(self.contest_types)))

    def can_view_contest(self, contest: Contest) -> bool:
        return contest.type in self.contest_types

    def can_join_contest(self, contest: Contest) -> bool:
        return self.can_participate and self.can_view_contest(contest)

    def can_view_history_of(self, viewer_id: int | None, owner_id: int) -> bool:
        """Users only see their own attempts."""
        return viewer_id is not None and viewer_id == owner_id

    def sees_all_histories(self) -> bool:
        return False


class AdminPolicy(VisibilityPolicy):
    role = UserRole.ADMIN
    contest_types = frozenset({ContestType.NORMAL.value, ContestType.VIP.value})

    def can_view_history_of(self, viewer_id: int | None, owner_id: int) -> bool:
        return True

    def sees_all_histories(self) -> bool:
        return True


class VipPolicy(VisibilityPolicy):
    role = UserRole.VIP
    contest_types = frozenset({ContestType.NORMAL.value, ContestType.VIP.value})


class NormalPolicy(VisibilityPolicy):
    role = UserRole.NORMAL
    contest_types = frozenset({ContestType.NORMAL.value})


class GuestPolicy(VisibilityPolicy):
    """Guests may browse every contest but cannot take part."""

    role = UserRole.GUEST
    contest_types = frozenset({ContestType.NORMAL.value, ContestType.VIP.value})
    can_participate = False

    def can_view_history_of(self, viewer_id: int | None, owner_id: int) -> bool:
        return False


_POLICIES: dict[str, VisibilityPolicy] = {
    policy.role.value: policy
    for policy in (AdminPolicy(), VipPolicy(), NormalPolicy(), GuestPolicy())
}


def policy_for(role: str | UserRole | None) -> VisibilityPolicy:
    """Get the visibility policy for a role; unknown roles are treated as guests."""
    if isinstance(role, UserRole):
        role = role.value
    return _POLICIES.get(role or UserRole.GUEST.value, _POLICIES[UserRole.GUEST.value])


def policy_for_user(user: User | None) -> VisibilityPolicy:
    """Get the visibility policy for an authenticated user or a guest."""
    if user is None:
        return policy_for(UserRole.GUEST)
    return policy_for(user.role)
