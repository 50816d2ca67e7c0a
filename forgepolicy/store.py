"""
Record store for projects, repositories, groups and committerships.

The policy functions work on in-memory aggregates. A RecordStore loads and
saves those aggregates and groups multi-record writes into all-or-nothing
transactions.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from forgepolicy.exceptions import NotFoundError, PersistenceError
from forgepolicy.logging import get_logger
from forgepolicy.types.actors import User
from forgepolicy.types.groups import Group
from forgepolicy.types.owners import GroupOwner, IndividualOwner, Owner
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import Committership, Permission, Repository, RepositoryKind

logger = get_logger("store")


class RecordStore(ABC):
    """Persistence contract used by ownership transfer and project lifecycle."""

    @abstractmethod
    def load_project(self, slug: str) -> Project:
        """Load a project with its repositories and their committerships."""
        pass

    @abstractmethod
    def save_project(self, project: Project) -> Project:
        """Insert or update the project record (not its repositories)."""
        pass

    @abstractmethod
    def list_projects(self) -> list[Project]:
        pass

    @abstractmethod
    def load_repository(self, repository_id: int) -> Repository:
        pass

    @abstractmethod
    def save_repository(self, repository: Repository) -> Repository:
        """Update an existing repository record (not its committerships)."""
        pass

    @abstractmethod
    def create_repository(
        self,
        project: Project,
        name: str,
        kind: RepositoryKind,
        owner: Owner,
        creator: User | None,
        **fields: Any,
    ) -> Repository:
        """Create a repository record. Raises PersistenceError on failure."""
        pass

    @abstractmethod
    def repositories_owned_by(self, owner: Owner) -> list[Repository]:
        pass

    @abstractmethod
    def load_group(self, name: str) -> Group:
        pass

    @abstractmethod
    def save_group(self, group: Group) -> Group:
        pass

    @abstractmethod
    def load_committership(self, committership_id: int) -> Committership:
        pass

    @abstractmethod
    def create_committership(
        self,
        repository: Repository,
        committer: User,
        creator: User | None,
        permissions: Iterable[Permission],
    ) -> Committership:
        """Create a committership. Either succeeds or raises PersistenceError."""
        pass

    @abstractmethod
    def count_projects_created_since(self, user: User, since: datetime) -> int:
        pass

    @abstractmethod
    def transaction(self) -> Any:
        """
        Context manager grouping writes into one all-or-nothing unit.

        Nested blocks join the outermost one. When the outermost block
        raises, every write made inside it is discarded.
        """
        pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore(RecordStore):
    """
    Dictionary-backed RecordStore.

    Records are copied on the way in and on the way out, so callers never
    share mutable state with the store. Group owners are stored by name and
    resolved against the group table on load; the group must be saved first.

    Example:
        ```python
        store = InMemoryStore()
        with store.transaction():
            store.save_project(project)
            store.create_repository(project, "mainline", RepositoryKind.MAINLINE, owner, user)
        project = store.load_project(project.slug)
        ```
    """

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}
        self._repositories: dict[int, Repository] = {}
        self._committerships: dict[int, Committership] = {}
        self._groups: dict[str, Group] = {}
        self._next_ids = {"repository": 1, "committership": 1}
        self._depth = 0

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStore"]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = self._take_snapshot()
        self._depth = 1
        try:
            yield self
        except BaseException:
            self._restore_snapshot(snapshot)
            logger.warning("Transaction rolled back")
            raise
        finally:
            self._depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def _take_snapshot(self) -> tuple[Any, ...]:
        return copy.deepcopy(
            (self._projects, self._repositories, self._committerships, self._groups, self._next_ids)
        )

    def _restore_snapshot(self, snapshot: tuple[Any, ...]) -> None:
        (
            self._projects,
            self._repositories,
            self._committerships,
            self._groups,
            self._next_ids,
        ) = snapshot

    def _next_id(self, table: str) -> int:
        value = self._next_ids[table]
        self._next_ids[table] = value + 1
        return value

    # ------------------------------------------------------------------
    # Owners
    # ------------------------------------------------------------------

    def _store_owner(self, owner: Owner | None) -> Owner | None:
        if isinstance(owner, GroupOwner):
            stored = self._groups.get(owner.group.name)
            if stored is None:
                raise PersistenceError(
                    "GROUP_NOT_SAVED", f"Group '{owner.group.name}' must be saved first"
                )
            # Only save_group changes a role table
            return GroupOwner(stored)
        return owner

    def _load_owner(self, owner: Owner | None, memo: dict[str, Group]) -> Owner | None:
        if isinstance(owner, GroupOwner):
            name = owner.group.name
            if name not in memo:
                memo[name] = copy.deepcopy(self._groups[name])
            return GroupOwner(memo[name])
        return owner

    @staticmethod
    def _same_owner(left: Owner | None, right: Owner) -> bool:
        if isinstance(left, IndividualOwner) and isinstance(right, IndividualOwner):
            return left.user == right.user
        if isinstance(left, GroupOwner) and isinstance(right, GroupOwner):
            return left.group.name == right.group.name
        return False

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def load_project(self, slug: str) -> Project:
        stored = self._projects.get(slug)
        if stored is None:
            raise NotFoundError("NOT_FOUND", f"Project '{slug}' not found")
        return self._assemble_project(stored, {})

    def save_project(self, project: Project) -> Project:
        if not project.slug:
            raise PersistenceError("INVALID_RECORD", "Project slug is required")
        self._projects[project.slug] = replace(
            project,
            owner=self._store_owner(project.owner),
            repositories=[],
            merge_request_statuses=copy.deepcopy(project.merge_request_statuses),
            merge_request_custom_states=copy.copy(project.merge_request_custom_states),
            signoff=copy.copy(project.signoff),
        )
        logger.debug(f"Saved project {project.slug}")
        return project

    def list_projects(self) -> list[Project]:
        memo: dict[str, Group] = {}
        stored = sorted(self._projects.values(), key=lambda p: (p.created_at, p.slug))
        return [self._assemble_project(p, memo) for p in stored]

    def _assemble_project(self, stored: Project, memo: dict[str, Group]) -> Project:
        repositories = sorted(
            (r for r in self._repositories.values() if r.project_slug == stored.slug),
            key=lambda r: (r.created_at, r.repository_id),
        )
        return replace(
            stored,
            owner=self._load_owner(stored.owner, memo),
            repositories=[self._assemble_repository(r, memo) for r in repositories],
            merge_request_statuses=copy.deepcopy(stored.merge_request_statuses),
            merge_request_custom_states=copy.copy(stored.merge_request_custom_states),
            signoff=copy.copy(stored.signoff),
        )

    def count_projects_created_since(self, user: User, since: datetime) -> int:
        return sum(
            1 for p in self._projects.values()
            if p.creator == user and p.created_at > since
        )

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def load_repository(self, repository_id: int) -> Repository:
        stored = self._repositories.get(repository_id)
        if stored is None:
            raise NotFoundError("NOT_FOUND", f"Repository {repository_id} not found")
        return self._assemble_repository(stored, {})

    def save_repository(self, repository: Repository) -> Repository:
        if repository.repository_id not in self._repositories:
            raise NotFoundError(
                "NOT_FOUND", f"Repository {repository.repository_id} not found"
            )
        self._repositories[repository.repository_id] = replace(
            repository, owner=self._store_owner(repository.owner), committerships=[]
        )
        logger.debug(f"Saved repository {repository.repository_id} ({repository.name})")
        return repository

    def create_repository(
        self,
        project: Project,
        name: str,
        kind: RepositoryKind,
        owner: Owner,
        creator: User | None,
        **fields: Any,
    ) -> Repository:
        if project.slug not in self._projects:
            raise PersistenceError(
                "PROJECT_NOT_SAVED", f"Project '{project.slug}' must be saved first"
            )
        if not name:
            raise PersistenceError("INVALID_RECORD", "Repository name is required")
        if owner is None:
            raise PersistenceError("INVALID_RECORD", "Repository owner is required")
        for existing in self._repositories.values():
            if existing.project_slug == project.slug and existing.name == name:
                raise PersistenceError(
                    "DUPLICATE_RECORD",
                    f"Repository '{name}' already exists in '{project.slug}'",
                )

        fields.setdefault("created_at", _utcnow())
        stored = Repository(
            repository_id=self._next_id("repository"),
            project_slug=project.slug,
            name=name,
            kind=kind,
            owner=self._store_owner(owner),
            creator=creator,
            **fields,
        )
        self._repositories[stored.repository_id] = stored
        logger.debug(f"Created {kind.value} repository {name} in {project.slug}")
        return self._assemble_repository(stored, {})

    def repositories_owned_by(self, owner: Owner) -> list[Repository]:
        memo: dict[str, Group] = {}
        return [
            self._assemble_repository(r, memo)
            for r in sorted(self._repositories.values(), key=lambda r: r.repository_id)
            if self._same_owner(r.owner, owner)
        ]

    def _assemble_repository(self, stored: Repository, memo: dict[str, Group]) -> Repository:
        committerships = sorted(
            (c for c in self._committerships.values() if c.repository_id == stored.repository_id),
            key=lambda c: c.committership_id,
        )
        return replace(
            stored,
            owner=self._load_owner(stored.owner, memo),
            committerships=[copy.copy(c) for c in committerships],
        )

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def load_group(self, name: str) -> Group:
        stored = self._groups.get(name)
        if stored is None:
            raise NotFoundError("NOT_FOUND", f"Group '{name}' not found")
        return copy.deepcopy(stored)

    def save_group(self, group: Group) -> Group:
        if not group.name:
            raise PersistenceError("INVALID_RECORD", "Group name is required")
        stored = self._groups.get(group.name)
        if stored is None:
            self._groups[group.name] = copy.deepcopy(group)
        else:
            # Stored owners keep pointing at the same group record
            stored.description = group.description
            stored.memberships = copy.deepcopy(group.memberships)
        return group

    # ------------------------------------------------------------------
    # Committerships
    # ------------------------------------------------------------------

    def load_committership(self, committership_id: int) -> Committership:
        stored = self._committerships.get(committership_id)
        if stored is None:
            raise NotFoundError("NOT_FOUND", f"Committership {committership_id} not found")
        return copy.copy(stored)

    def create_committership(
        self,
        repository: Repository,
        committer: User,
        creator: User | None,
        permissions: Iterable[Permission],
    ) -> Committership:
        if repository.repository_id not in self._repositories:
            raise PersistenceError(
                "REPOSITORY_NOT_SAVED",
                f"Repository {repository.repository_id} must be saved first",
            )
        if not isinstance(committer, User):
            raise PersistenceError("INVALID_RECORD", "Committer must be a user")
        granted = frozenset(Permission(p) for p in permissions)
        if not granted:
            raise PersistenceError("INVALID_RECORD", "Committership needs at least one permission")

        committership = Committership(
            committership_id=self._next_id("committership"),
            repository_id=repository.repository_id,
            committer=committer,
            creator=creator,
            permissions=granted,
            created_at=_utcnow(),
        )
        self._committerships[committership.committership_id] = committership
        logger.debug(
            f"Created committership {committership.committership_id} for "
            f"{committer.login} on repository {repository.repository_id}"
        )
        return copy.copy(committership)
