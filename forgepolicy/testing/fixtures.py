"""
Pytest fixtures for forgepolicy testing.

Provides helpers that build in-memory records and fixtures for common
project setups.
"""

from datetime import datetime, timezone
from typing import Any, Generator

import pytest

from forgepolicy.projects import add_repository, create_project
from forgepolicy.testing.mock import MockRecordStore
from forgepolicy.types.actors import User
from forgepolicy.types.groups import Group, Role
from forgepolicy.types.owners import GroupOwner, IndividualOwner, Owner
from forgepolicy.types.projects import Project, Visibility
from forgepolicy.types.repos import (
    Committership,
    Permission,
    Repository,
    RepositoryKind,
)

_FIXED_TIME = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


# ============================================================================
# Helper functions
# ============================================================================


def create_mock_user(login: str = "test-user", **kwargs: Any) -> User:
    """Create a User whose id is derived from its login."""
    defaults = {"user_id": f"{login}-id", "email": f"{login}@example.org"}
    defaults.update(kwargs)
    return User(login=login, **defaults)


def create_mock_group(
    name: str = "test-group",
    members: dict[User, Role] | None = None,
) -> Group:
    """Create a Group with the given role table."""
    group = Group(name=name)
    for user, role in (members or {}).items():
        group.add_member(user, role)
    return group


def create_mock_repository(
    repository_id: int = 1,
    name: str = "mainline",
    kind: RepositoryKind = RepositoryKind.MAINLINE,
    owner: Owner | None = None,
    project_slug: str = "test-project",
    committers: dict[User, set[Permission]] | None = None,
    **kwargs: Any,
) -> Repository:
    """
    Create a Repository with customizable fields.

    Args:
        repository_id: Repository ID
        name: Repository name
        kind: Mainline, clone or wiki
        owner: Owner (default: an individual test user)
        project_slug: Slug of the containing project
        committers: Users to grant committerships to, with their permissions
        **kwargs: Additional fields to override

    Returns:
        Repository object
    """
    if owner is None:
        owner = IndividualOwner(create_mock_user())
    defaults: dict[str, Any] = {
        "creator": None,
        "created_at": _FIXED_TIME,
    }
    defaults.update(kwargs)
    repository = Repository(
        repository_id=repository_id,
        project_slug=project_slug,
        name=name,
        kind=kind,
        owner=owner,
        **defaults,
    )
    for index, (user, permissions) in enumerate((committers or {}).items(), start=1):
        repository.committerships.append(
            Committership(
                committership_id=repository_id * 1000 + index,
                repository_id=repository_id,
                committer=user,
                creator=None,
                permissions=frozenset(permissions),
                created_at=_FIXED_TIME,
            )
        )
    return repository


def create_mock_project(
    slug: str = "test-project",
    owner: Owner | None = None,
    visibility: Visibility = Visibility.ALL,
    repositories: list[Repository] | None = None,
    with_wiki: bool = True,
    **kwargs: Any,
) -> Project:
    """
    Create an in-memory Project, not persisted anywhere.

    A wiki repository owned by the same owner is added unless
    ``with_wiki`` is False.
    """
    if owner is None:
        owner = IndividualOwner(create_mock_user())
    defaults: dict[str, Any] = {
        "title": slug.replace("-", " ").title(),
        "description": f"The {slug} project",
        "creator": owner.user if isinstance(owner, IndividualOwner) else None,
        "created_at": _FIXED_TIME,
    }
    defaults.update(kwargs)
    project = Project(slug=slug, owner=owner, visibility=visibility, **defaults)
    project.repositories.extend(repositories or [])
    if with_wiki:
        project.repositories.append(
            create_mock_repository(
                repository_id=999,
                name=f"{slug}-wiki",
                kind=RepositoryKind.WIKI,
                owner=owner,
                project_slug=slug,
            )
        )
    return project


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def mock_store() -> Generator[MockRecordStore, None, None]:
    """Provide an empty MockRecordStore."""
    store = MockRecordStore()
    yield store
    store.reset()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def owner_user() -> User:
    return create_mock_user("johan")


@pytest.fixture
def other_user() -> User:
    return create_mock_user("mike")


@pytest.fixture
def core_group(owner_user: User) -> Group:
    """A group where owner_user is admin."""
    return create_mock_group("core", {owner_user: Role.ADMIN})


@pytest.fixture
def user_project(owner_user: User) -> Project:
    """Individually owned project with one mainline repository."""
    owner = IndividualOwner(owner_user)
    return create_mock_project(
        "johans-project",
        owner=owner,
        repositories=[create_mock_repository(1, "mainline", owner=owner, project_slug="johans-project")],
    )


@pytest.fixture
def group_project(core_group: Group) -> Project:
    """Group owned project with one mainline repository."""
    owner = GroupOwner(core_group)
    return create_mock_project(
        "core-project",
        owner=owner,
        repositories=[create_mock_repository(1, "mainline", owner=owner, project_slug="core-project")],
    )


@pytest.fixture
def stored_project(mock_store: MockRecordStore, owner_user: User) -> Project:
    """Individually owned project persisted in mock_store, with a mainline."""
    owner = IndividualOwner(owner_user)
    project = create_project(
        mock_store,
        creator=owner_user,
        owner=owner,
        slug="stored-project",
        title="Stored project",
        description="A project living in the mock store",
        now=_FIXED_TIME,
    )
    add_repository(mock_store, project, "mainline", RepositoryKind.MAINLINE, owner, owner_user)
    mock_store.reset()
    return project


__all__ = [
    # Fixtures (exported for documentation, actual fixtures are auto-discovered)
    "mock_store",
    "owner_user",
    "other_user",
    "core_group",
    "user_project",
    "group_project",
    "stored_project",
    # Helper functions
    "create_mock_user",
    "create_mock_group",
    "create_mock_repository",
    "create_mock_project",
]
