"""
Project lifecycle.

Creating a project also creates its wiki repository and its default merge
request statuses, in one store transaction.
"""

import re
from datetime import datetime, timedelta, timezone

from forgepolicy.config import ForgeSettings
from forgepolicy.exceptions import NotFoundError, ThrottledError, ValidationError
from forgepolicy.logging import get_logger
from forgepolicy.store import RecordStore
from forgepolicy.types.actors import User
from forgepolicy.types.owners import Owner
from forgepolicy.types.projects import MergeRequestStatus, Project, Site, Visibility
from forgepolicy.types.repos import Repository, RepositoryKind
from forgepolicy.validation import URL_FIELDS, clean_url, validate_project

logger = get_logger("projects")

WIKI_NAME_SUFFIX = "-wiki"

MERGE_REQUEST_DEFAULT_STATES = ("Open", "Closed", "Verifying")
MERGE_REQUEST_FIXED_STATES = ("Merged", "Rejected")

_TAG_RE = re.compile(r"</?[^>]*>")


def default_merge_request_statuses() -> list[MergeRequestStatus]:
    return [
        MergeRequestStatus(status_id=1, name="Open", state="open", color="#408000", is_default=True),
        MergeRequestStatus(status_id=2, name="Closed", state="closed", color="#AA0000"),
    ]


def create_project(
    store: RecordStore,
    *,
    creator: User,
    owner: Owner,
    slug: str,
    title: str,
    description: str,
    visibility: Visibility | None = None,
    containing_site: Site | None = None,
    home_url: str | None = None,
    mailinglist_url: str | None = None,
    bugtracker_url: str | None = None,
    settings: ForgeSettings | None = None,
    now: datetime | None = None,
) -> Project:
    """
    Validate and persist a new project together with its wiki repository.

    Args:
        store: Store receiving the records
        creator: User creating the project
        owner: Owner of the project and of its wiki
        slug: URL name; lower-cased before validation
        title: Human readable title
        description: Project description
        visibility: Visibility level (default: settings.default_visibility)
        containing_site: Site hosting the project (optional)
        home_url, mailinglist_url, bugtracker_url: Optional links, cleaned first
        settings: Settings (default: ForgeSettings())
        now: Creation time (default: current UTC time)

    Returns:
        The saved project, wiki repository included

    Raises:
        ValidationError: If a field is invalid or the slug is taken
        ThrottledError: If the creator made too many projects recently
        PersistenceError: If the store refuses a record
    """
    settings = settings or ForgeSettings()
    now = now or datetime.now(timezone.utc)

    project = Project(
        slug=slug.lower() if slug else slug,
        title=title,
        description=description,
        creator=creator,
        owner=owner,
        visibility=visibility if visibility is not None else settings.default_visibility,
        created_at=now,
        containing_site=containing_site,
        home_url=clean_url(home_url),
        mailinglist_url=clean_url(mailinglist_url),
        bugtracker_url=clean_url(bugtracker_url),
        merge_request_statuses=default_merge_request_statuses(),
    )

    validate_project(project, settings.reserved_project_names)
    _check_slug_available(store, project.slug)
    _check_throttle(store, creator, settings, now)

    with store.transaction():
        store.save_project(project)
        wiki = store.create_repository(
            project,
            f"{project.slug}{WIKI_NAME_SUFFIX}",
            RepositoryKind.WIKI,
            owner,
            creator,
            created_at=now,
        )

    project.repositories.append(wiki)
    logger.info(f"Created project {project.slug} for {creator.login}")
    return project


def _check_slug_available(store: RecordStore, slug: str) -> None:
    try:
        store.load_project(slug)
    except NotFoundError:
        return
    raise ValidationError({"slug": ["has already been taken"]})


def _check_throttle(
    store: RecordStore, creator: User, settings: ForgeSettings, now: datetime
) -> None:
    window = settings.project_creation_window
    since = now - timedelta(seconds=window)
    created = store.count_projects_created_since(creator, since)
    if created >= settings.project_creation_limit:
        logger.warning(f"Throttled project creation for {creator.login}")
        raise ThrottledError(
            f"{creator.login} created {created} projects in the last {window} seconds",
            retry_after=window,
        )


def add_repository(
    store: RecordStore,
    project: Project,
    name: str,
    kind: RepositoryKind,
    owner: Owner,
    creator: User | None,
    parent: Repository | None = None,
    now: datetime | None = None,
) -> Repository:
    """
    Create a mainline or clone repository in a project.

    Raises:
        ValidationError: For wiki repositories, or clones without a parent
        PersistenceError: If the store refuses the record
    """
    if kind is RepositoryKind.WIKI:
        raise ValidationError({"kind": ["wiki repositories are created with the project"]})
    if kind is RepositoryKind.CLONE and parent is None:
        raise ValidationError({"parent": ["can't be blank for a clone"]})

    repository = store.create_repository(
        project,
        name,
        kind,
        owner,
        creator,
        parent_id=parent.repository_id if parent is not None else None,
        created_at=now or datetime.now(timezone.utc),
    )
    project.repositories.append(repository)
    return repository


def update_urls(project: Project, **urls: str | None) -> None:
    """Set link fields, cleaning each value."""
    for field, value in urls.items():
        if field not in URL_FIELDS:
            raise ValidationError({field: ["is not a link field"]})
        setattr(project, field, clean_url(value))


def effective_site(project: Project, default_site: Site | None) -> Site | None:
    """The project's containing site, or the default site when unset."""
    if project.containing_site is not None:
        return project.containing_site
    return default_site


# ----------------------------------------------------------------------
# Merge request states
# ----------------------------------------------------------------------


def merge_request_states(project: Project) -> str:
    """Newline separated list of the project's merge request states."""
    states = project.merge_request_custom_states or list(MERGE_REQUEST_DEFAULT_STATES)
    return "\n".join(states)


def set_merge_request_states(project: Project, text: str) -> None:
    project.merge_request_custom_states = [
        line.strip() for line in text.split("\n") if line.strip()
    ]


def has_custom_merge_request_states(project: Project) -> bool:
    return bool(project.merge_request_custom_states)


def default_merge_request_status_id(project: Project) -> int | None:
    for status in project.merge_request_statuses:
        if status.is_default:
            return status.status_id
    return None


def set_default_merge_request_status(project: Project, status_id: int | str) -> None:
    """Mark one status as the default and clear the flag on every other."""
    status_id = int(status_id)
    for status in project.merge_request_statuses:
        status.is_default = status.status_id == status_id


# ----------------------------------------------------------------------
# Description helpers
# ----------------------------------------------------------------------


def stripped_description(project: Project) -> str:
    return _TAG_RE.sub("", project.description or "")


def first_paragraph(project: Project) -> str | None:
    """The first non-empty line of the description."""
    for line in (project.description or "").split("\n"):
        if line:
            return line
    return None
