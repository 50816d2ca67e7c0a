"""
Property-based tests for project ownership transfer.

Feature: forgepolicy
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from forgepolicy.exceptions import InvalidTransitionError, PersistenceError
from forgepolicy.permissions import has_repository_permission, is_admin
from forgepolicy.projects import add_repository, create_project
from forgepolicy.store import InMemoryStore
from forgepolicy.testing import create_mock_group, create_mock_user
from forgepolicy.transfer import change_owner
from forgepolicy.types.groups import Role
from forgepolicy.types.owners import GroupOwner, IndividualOwner
from forgepolicy.types.repos import FULL_PERMISSIONS, Permission, RepositoryKind


def make_stored_project(store, owner_user, mainline_count: int, clone_count: int = 0):
    owner = IndividualOwner(owner_user)
    project = create_project(
        store,
        creator=owner_user,
        owner=owner,
        slug="transfer-me",
        title="Transfer me",
        description="A project changing hands",
    )
    for index in range(mainline_count):
        add_repository(store, project, f"mainline-{index}", RepositoryKind.MAINLINE, owner, owner_user)
    for index in range(clone_count):
        add_repository(
            store, project, f"clone-{index}", RepositoryKind.CLONE, owner, owner_user,
            parent=project.mainlines[0],
        )
    return project


# ============================================================================
# Property: the previous owner keeps full rights on every mainline
# ============================================================================


@given(
    mainline_count=st.integers(min_value=0, max_value=4),
    clone_count=st.integers(min_value=0, max_value=2),
    to_group=st.booleans(),
)
@settings(max_examples=50)
def test_transfer_grants_previous_owner_full_rights(
    mainline_count: int, clone_count: int, to_group: bool
) -> None:
    """
    After a transfer from U1, every mainline carries exactly one new
    committership for U1 with review, commit and admin, and clones carry none.
    """
    if clone_count:
        mainline_count = max(mainline_count, 1)
    store = InMemoryStore()
    u1 = create_mock_user("u1")
    u2 = create_mock_user("u2")
    project = make_stored_project(store, u1, mainline_count, clone_count)
    if to_group:
        new_owner = GroupOwner(store.save_group(create_mock_group("team", {u2: Role.ADMIN})))
    else:
        new_owner = IndividualOwner(u2)

    assert change_owner(project, new_owner, store) is True

    assert project.owner == new_owner
    assert project.wiki_repository.owner == new_owner
    for mainline in project.mainlines:
        grants = [c for c in mainline.committerships if c.committer == u1]
        assert len(grants) == 1
        assert grants[0].permissions == FULL_PERMISSIONS
        assert grants[0].creator == u1
    for clone in project.clones:
        assert clone.committerships == []
        assert clone.owner == IndividualOwner(u1)

    reloaded = store.load_project(project.slug)
    assert reloaded.owner.__class__ is new_owner.__class__
    assert reloaded.wiki_repository.owner == reloaded.owner
    assert sum(len(r.committerships) for r in reloaded.mainlines) == mainline_count


# ============================================================================
# Scenarios
# ============================================================================


class TestChangeOwner:
    def test_new_owner_becomes_admin(self, stored_project, mock_store, owner_user, other_user) -> None:
        change_owner(stored_project, IndividualOwner(other_user), mock_store)

        assert is_admin(other_user, stored_project)
        assert not is_admin(owner_user, stored_project)
        mainline = stored_project.mainlines[0]
        for permission in Permission:
            assert has_repository_permission(owner_user, mainline, permission)

    def test_writes_go_through_store(self, stored_project, mock_store, other_user) -> None:
        change_owner(stored_project, IndividualOwner(other_user), mock_store)

        assert mock_store.call_count("save_project") == 1
        assert mock_store.call_count("save_repository") == 1
        assert mock_store.call_count("create_committership") == 1
        call = mock_store.get_calls("create_committership")[0]
        assert call.kwargs["permissions"] == FULL_PERMISSIONS

    def test_transfer_to_group(self, stored_project, mock_store, core_group) -> None:
        mock_store.save_group(core_group)
        assert change_owner(stored_project, GroupOwner(core_group), mock_store)

        reloaded = mock_store.load_project(stored_project.slug)
        assert reloaded.owner.group.name == "core"
        assert mock_store.load_group("core").is_admin(core_group.members[0])

    def test_transfer_leaves_group_roles_alone(
        self, stored_project, mock_store, core_group, other_user
    ) -> None:
        mock_store.save_group(core_group)
        stale_group = mock_store.load_group("core")
        fresh = mock_store.load_group("core")
        fresh.add_member(other_user, Role.COMMITTER)
        mock_store.save_group(fresh)
        mock_store.reset()

        assert change_owner(stored_project, GroupOwner(stale_group), mock_store)

        assert not mock_store.was_called("save_group")
        assert mock_store.load_group("core").is_committer(other_user)
        reloaded = mock_store.load_project(stored_project.slug)
        assert reloaded.owner.group.is_committer(other_user)

    def test_transfer_to_unsaved_group(self, stored_project, mock_store, owner_user) -> None:
        newcomers = create_mock_group("newcomers")

        with pytest.raises(PersistenceError) as exc_info:
            change_owner(stored_project, GroupOwner(newcomers), mock_store)

        assert exc_info.value.code == "GROUP_NOT_SAVED"
        assert stored_project.owner == IndividualOwner(owner_user)
        assert mock_store.load_project(stored_project.slug).owner == IndividualOwner(owner_user)

    def test_group_owned_project_is_left_alone(self, mock_store, core_group, other_user) -> None:
        mock_store.save_group(core_group)
        admin = core_group.members[0]
        project = create_project(
            mock_store,
            creator=admin,
            owner=GroupOwner(core_group),
            slug="team-project",
            title="Team project",
            description="Owned by the core team",
        )
        mock_store.reset()

        assert change_owner(project, IndividualOwner(other_user), mock_store) is False

        assert project.owner.group is core_group
        assert project.wiki_repository.owner.group.name == "core"
        assert mock_store.get_calls() == []

    def test_group_owned_project_strict(self, group_project, mock_store, other_user) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            change_owner(group_project, IndividualOwner(other_user), mock_store, strict=True)

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert group_project.owner.group.name == "core"

    def test_project_without_owner(self, user_project, mock_store, other_user) -> None:
        user_project.owner = None

        with pytest.raises(InvalidTransitionError):
            change_owner(user_project, IndividualOwner(other_user), mock_store)


class TestTransferRollback:
    def test_failed_grant_rolls_everything_back(self, mock_store, owner_user, other_user) -> None:
        project = make_stored_project(mock_store, owner_user, mainline_count=2)
        mock_store.configure_error(
            "create_committership",
            PersistenceError("DISK_FULL", "no space left"),
            after=1,
        )

        with pytest.raises(PersistenceError):
            change_owner(project, IndividualOwner(other_user), mock_store)

        assert mock_store.call_count("create_committership") == 2
        # In-memory aggregate is untouched
        assert project.owner == IndividualOwner(owner_user)
        assert project.wiki_repository.owner == IndividualOwner(owner_user)
        assert all(r.committerships == [] for r in project.mainlines)
        # Store is untouched
        reloaded = mock_store.load_project(project.slug)
        assert reloaded.owner == IndividualOwner(owner_user)
        assert reloaded.wiki_repository.owner == IndividualOwner(owner_user)
        assert all(r.committerships == [] for r in reloaded.mainlines)
        assert not mock_store.in_transaction

    def test_failed_project_save(self, stored_project, mock_store, owner_user, other_user) -> None:
        mock_store.configure_error("save_project", PersistenceError("LOCKED", "record locked"))

        with pytest.raises(PersistenceError):
            change_owner(stored_project, IndividualOwner(other_user), mock_store)

        assert stored_project.owner == IndividualOwner(owner_user)
        assert not mock_store.was_called("create_committership")
