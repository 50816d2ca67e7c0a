"""Repository-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from forgepolicy.types.actors import User
from forgepolicy.types.owners import Owner


class RepositoryKind(str, Enum):
    """Kind of repository inside a project."""

    MAINLINE = "mainline"
    CLONE = "clone"
    WIKI = "wiki"


class Permission(str, Enum):
    """Rights a committership can grant."""

    REVIEW = "review"
    COMMIT = "commit"
    ADMIN = "admin"


FULL_PERMISSIONS = frozenset({Permission.REVIEW, Permission.COMMIT, Permission.ADMIN})


class WikiPermissions(str, Enum):
    """Who may write to a project wiki."""

    EVERYONE = "everyone"
    PROJECT_MEMBERS = "project_members"


@dataclass
class Committership:
    """An explicit grant of rights to a user on one repository."""

    committership_id: int
    repository_id: int
    committer: User
    creator: User | None
    permissions: frozenset[Permission]
    created_at: datetime

    def permits(self, permission: Permission) -> bool:
        return permission in self.permissions


@dataclass
class Repository:
    """Repository information."""

    repository_id: int
    project_slug: str
    name: str
    kind: RepositoryKind
    owner: Owner
    creator: User | None
    created_at: datetime
    committerships: list[Committership] = field(default_factory=list)
    parent_id: int | None = None
    wiki_permissions: WikiPermissions = WikiPermissions.EVERYONE
    last_pushed_at: datetime | None = None

    @property
    def is_mainline(self) -> bool:
        return self.kind is RepositoryKind.MAINLINE

    @property
    def is_clone(self) -> bool:
        return self.kind is RepositoryKind.CLONE

    @property
    def is_wiki(self) -> bool:
        return self.kind is RepositoryKind.WIKI
