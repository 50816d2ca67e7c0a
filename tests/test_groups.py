"""
Tests for group role tables.

Feature: forgepolicy
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from forgepolicy.testing import create_mock_group, create_mock_user
from forgepolicy.types.actors import ANONYMOUS
from forgepolicy.types.groups import Group, Membership, Role


@given(roles=st.lists(st.sampled_from(list(Role)), min_size=1, max_size=5))
@settings(max_examples=100)
def test_last_role_assigned_wins(roles: list[Role]) -> None:
    """Adding a member again replaces the role instead of duplicating it."""
    group = Group(name="team")
    user = create_mock_user("someone")
    for role in roles:
        group.add_member(user, role)

    assert group.role_of(user) is roles[-1]
    assert len(group.memberships) == 1


class TestGroupRoles:
    """A group where johan is admin and mike is not a member."""

    def test_admin_is_committer_and_member(self, core_group, owner_user) -> None:
        assert core_group.is_admin(owner_user)
        assert core_group.is_committer(owner_user)
        assert core_group.is_member(owner_user)

    def test_non_member_has_no_role(self, core_group, other_user) -> None:
        assert core_group.role_of(other_user) is None
        assert not core_group.is_admin(other_user)
        assert not core_group.is_committer(other_user)
        assert not core_group.is_member(other_user)

    def test_anonymous_has_no_role(self, core_group) -> None:
        assert core_group.role_of(ANONYMOUS) is None
        assert core_group.role_of(None) is None

    def test_add_member(self, core_group, other_user) -> None:
        membership = core_group.add_member(other_user, Role.COMMITTER)

        assert membership == Membership(user=other_user, role=Role.COMMITTER)
        assert core_group.is_committer(other_user)
        assert not core_group.is_admin(other_user)
        assert core_group.members[-1] == other_user

    def test_plain_member_is_not_committer(self, core_group, other_user) -> None:
        core_group.add_member(other_user, Role.MEMBER)

        assert core_group.is_member(other_user)
        assert not core_group.is_committer(other_user)

    def test_remove_member(self, core_group, owner_user, other_user) -> None:
        assert core_group.remove_member(owner_user) is True
        assert core_group.remove_member(other_user) is False
        assert core_group.members == []

    def test_membership_matches_on_identity_not_email(self) -> None:
        user = create_mock_user("johan")
        same_user = create_mock_user("johan", email="other@example.org")
        group = create_mock_group("team", {user: Role.ADMIN})

        assert group.is_admin(same_user)

    def test_repr(self, core_group) -> None:
        assert repr(core_group) == "Group(name='core', members=1)"
