"""
Project visibility policy.

A project is visible to everyone, to any logged in user, or to its
collaborators only. The logged in tier deliberately ignores collaborator
status.
"""

from collections.abc import Iterable

from forgepolicy.logging import log_policy_decision
from forgepolicy.owners import owner_kind
from forgepolicy.permissions import is_collaborator, is_repository_collaborator
from forgepolicy.types.actors import Actor, is_authenticated
from forgepolicy.types.owners import OwnerKind
from forgepolicy.types.projects import PUBLIC_VISIBILITIES, Project, Visibility
from forgepolicy.types.repos import Repository

_HUMAN_NAMES = {
    Visibility.ALL: "Public",
    Visibility.LOGGED_IN: "Logged in users only",
    Visibility.COLLABORATORS: "Private (project collaborators only)",
}


def can_view(actor: Actor, project: Project) -> bool:
    """Decide whether an actor may see a project."""
    if project.visibility == Visibility.ALL:
        result = True
    elif project.visibility == Visibility.LOGGED_IN:
        result = is_authenticated(actor)
    elif project.visibility == Visibility.COLLABORATORS:
        result = is_collaborator(actor, project)
    else:
        result = False
    log_policy_decision("can_view", actor, project.slug, result)
    return result


def is_public(project: Project) -> bool:
    return project.visibility in PUBLIC_VISIBILITIES


def visibility_human_name(visibility: Visibility) -> str:
    return _HUMAN_NAMES[Visibility(visibility)]


def visibility_scope(logged_in: bool) -> tuple[Visibility, ...]:
    """Visibility levels that may be listed for a visitor."""
    if logged_in:
        return PUBLIC_VISIBILITIES
    return (Visibility.ALL,)


def listable_projects(projects: Iterable[Project], logged_in: bool) -> list[Project]:
    scope = visibility_scope(logged_in)
    return [project for project in projects if project.visibility in scope]


def can_view_repository(actor: Actor, repository: Repository, project: Project) -> bool:
    """A repository is visible with its project, or to its own committers."""
    return can_view(actor, project) or is_repository_collaborator(actor, repository)


def repositories_viewable_by(actor: Actor, project: Project) -> list[Repository]:
    """Non-wiki repositories of the project the actor may view."""
    return [
        repository
        for repository in project.code_repositories
        if can_view_repository(actor, repository, project)
    ]


def recently_updated_clones(
    actor: Actor,
    project: Project,
    kind: OwnerKind,
    limit: int = 5,
) -> list[Repository]:
    """
    Most recently pushed clones owned by users or by groups.

    Args:
        actor: The visitor; clones they may not view are skipped
        project: Project whose clones are listed
        kind: OwnerKind.USER or OwnerKind.GROUP
        limit: Maximum number of clones returned

    Returns:
        Clones ordered by last push, newest first, never-pushed last
    """
    clones = [r for r in project.clones if owner_kind(r) is kind]
    clones.sort(
        key=lambda r: (r.last_pushed_at is not None, r.last_pushed_at or r.created_at),
        reverse=True,
    )
    viewable = [r for r in clones if can_view_repository(actor, r, project)]
    return viewable[:limit]
