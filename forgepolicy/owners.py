"""
Owner resolution for projects and repositories.

Every permission check starts here: the owner variant decides whether a
check compares against a single user or asks a group's role table.
"""

from forgepolicy.types.actors import User
from forgepolicy.types.owners import GroupOwner, IndividualOwner, Owner, OwnerKind
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import Repository


def resolve_owner(record: Project | Repository) -> Owner | None:
    """Return the owner of a project or repository."""
    return record.owner


def owner_kind(subject: Owner | Project | Repository) -> OwnerKind | None:
    """
    Classify an owner, or the owner of a record, as a user or a group.

    Returns:
        OwnerKind.USER, OwnerKind.GROUP, or None for a record without owner
    """
    owner = subject if isinstance(subject, (IndividualOwner, GroupOwner)) else resolve_owner(subject)
    if isinstance(owner, IndividualOwner):
        return OwnerKind.USER
    if isinstance(owner, GroupOwner):
        return OwnerKind.GROUP
    return None


def owned_by_group(record: Project | Repository) -> bool:
    return owner_kind(record) is OwnerKind.GROUP


def owned_by_user(record: Project | Repository) -> bool:
    return owner_kind(record) is OwnerKind.USER


def owner_param(owner: Owner) -> str:
    """Public name of an owner: the user's login or the group's name."""
    if isinstance(owner, IndividualOwner):
        return owner.user.login
    return owner.group.name


def owner_members(owner: Owner | None) -> list[User]:
    """Users that hold an owner's rights: the owner user, or all group members."""
    if isinstance(owner, IndividualOwner):
        return [owner.user]
    if isinstance(owner, GroupOwner):
        return owner.group.members
    return []
