"""Group data models.

A group's role table is the single source of truth for the permissions it
delegates to the projects and repositories it owns.
"""

from dataclasses import dataclass, field
from enum import Enum

from forgepolicy.types.actors import Actor, User


class Role(str, Enum):
    """Role of a user inside a group."""

    ADMIN = "admin"
    COMMITTER = "committer"
    MEMBER = "member"


# Roles that grant commit rights on group-owned repositories
COMMITTER_ROLES = frozenset({Role.ADMIN, Role.COMMITTER})


@dataclass
class Membership:
    """A user's role in a group."""

    user: User
    role: Role


@dataclass(eq=False)
class Group:
    """A named collection of users, each with a role."""

    name: str
    description: str | None = None
    memberships: list[Membership] = field(default_factory=list)

    def role_of(self, user: Actor) -> Role | None:
        """Return the role of the user, or None if not a member."""
        if not isinstance(user, User):
            return None
        for membership in self.memberships:
            if membership.user == user:
                return membership.role
        return None

    def is_member(self, user: Actor) -> bool:
        return self.role_of(user) is not None

    def is_admin(self, user: Actor) -> bool:
        return self.role_of(user) is Role.ADMIN

    def is_committer(self, user: Actor) -> bool:
        return self.role_of(user) in COMMITTER_ROLES

    def add_member(self, user: User, role: Role) -> Membership:
        """Add a user with a role, replacing any role they already had."""
        for membership in self.memberships:
            if membership.user == user:
                membership.role = role
                return membership
        membership = Membership(user=user, role=role)
        self.memberships.append(membership)
        return membership

    def remove_member(self, user: User) -> bool:
        """Remove a user. Returns False if they were not a member."""
        for index, membership in enumerate(self.memberships):
            if membership.user == user:
                del self.memberships[index]
                return True
        return False

    @property
    def members(self) -> list[User]:
        return [membership.user for membership in self.memberships]

    def __repr__(self) -> str:
        return f"Group(name={self.name!r}, members={len(self.memberships)})"
