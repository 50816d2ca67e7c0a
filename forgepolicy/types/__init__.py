"""forgepolicy type definitions.

This module exports all data model types used by the package.
"""

from forgepolicy.types.actors import ANONYMOUS, Actor, AnonymousActor, User, is_authenticated
from forgepolicy.types.groups import COMMITTER_ROLES, Group, Membership, Role
from forgepolicy.types.owners import GroupOwner, IndividualOwner, Owner, OwnerKind
from forgepolicy.types.projects import (
    PUBLIC_VISIBILITIES,
    MergeRequestStatus,
    Project,
    SignoffSettings,
    Site,
    Visibility,
)
from forgepolicy.types.repos import (
    FULL_PERMISSIONS,
    Committership,
    Permission,
    Repository,
    RepositoryKind,
    WikiPermissions,
)

__all__ = [
    # Actors
    "Actor",
    "User",
    "AnonymousActor",
    "ANONYMOUS",
    "is_authenticated",
    # Groups
    "Group",
    "Membership",
    "Role",
    "COMMITTER_ROLES",
    # Owners
    "Owner",
    "OwnerKind",
    "IndividualOwner",
    "GroupOwner",
    # Repositories
    "Repository",
    "RepositoryKind",
    "Committership",
    "Permission",
    "FULL_PERMISSIONS",
    "WikiPermissions",
    # Projects
    "Project",
    "Visibility",
    "PUBLIC_VISIBILITIES",
    "Site",
    "MergeRequestStatus",
    "SignoffSettings",
]
