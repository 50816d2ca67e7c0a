"""Project-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from forgepolicy.types.actors import User
from forgepolicy.types.owners import Owner
from forgepolicy.types.repos import Repository, RepositoryKind


class Visibility(IntEnum):
    """Who may see a project."""

    ALL = 1
    LOGGED_IN = 2
    COLLABORATORS = 3


PUBLIC_VISIBILITIES = (Visibility.ALL, Visibility.LOGGED_IN)


@dataclass(frozen=True)
class Site:
    """A hosting site that can contain projects."""

    site_id: int
    title: str
    subdomain: str | None = None


@dataclass
class MergeRequestStatus:
    """A merge request status a project offers."""

    status_id: int
    name: str
    state: str  # "open" or "closed"
    color: str | None = None
    is_default: bool = False


@dataclass
class SignoffSettings:
    """Connection details of an external merge request signoff site."""

    site: str | None = None
    path_prefix: str | None = None
    signoff_key: str | None = None
    signoff_secret: str | None = None

    @property
    def needs_signoff(self) -> bool:
        return bool(self.site and self.site.strip())

    def __repr__(self) -> str:
        return (
            f"SignoffSettings(site={self.site!r}, path_prefix={self.path_prefix!r}, "
            f"signoff_key={self.signoff_key!r}, signoff_secret='[REDACTED]')"
        )


@dataclass
class Project:
    """Project information.

    ``repositories`` holds every repository of the project in creation
    order, the wiki included.
    """

    slug: str
    title: str
    description: str
    creator: User | None
    owner: Owner | None
    visibility: Visibility
    created_at: datetime
    repositories: list[Repository] = field(default_factory=list)
    containing_site: Site | None = None
    home_url: str | None = None
    mailinglist_url: str | None = None
    bugtracker_url: str | None = None
    merge_request_statuses: list[MergeRequestStatus] = field(default_factory=list)
    merge_request_custom_states: list[str] | None = None
    signoff: SignoffSettings = field(default_factory=SignoffSettings)

    @property
    def wiki_repository(self) -> Repository | None:
        for repository in self.repositories:
            if repository.kind is RepositoryKind.WIKI:
                return repository
        return None

    @property
    def mainlines(self) -> list[Repository]:
        return [r for r in self.repositories if r.kind is RepositoryKind.MAINLINE]

    @property
    def clones(self) -> list[Repository]:
        return [r for r in self.repositories if r.kind is RepositoryKind.CLONE]

    @property
    def code_repositories(self) -> list[Repository]:
        """Every repository except the wiki."""
        return [r for r in self.repositories if r.kind is not RepositoryKind.WIKI]
