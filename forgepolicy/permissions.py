"""
Role and permission policy.

All predicates are total: they never raise for well-formed input, and an
anonymous or missing candidate is simply refused.
"""

from collections.abc import Iterable

from forgepolicy.logging import log_policy_decision
from forgepolicy.owners import owner_members
from forgepolicy.types.actors import Actor, User, is_authenticated
from forgepolicy.types.owners import GroupOwner, IndividualOwner
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import Permission, Repository, WikiPermissions


def is_admin(candidate: Actor, project: Project) -> bool:
    """An individual owner is the sole admin; a group owner asks its role table."""
    owner = project.owner
    if isinstance(owner, IndividualOwner):
        result = candidate == owner.user
    elif isinstance(owner, GroupOwner):
        result = owner.group.is_admin(candidate)
    else:
        result = False
    log_policy_decision("is_admin", candidate, project.slug, result)
    return result


def is_member(candidate: Actor, project: Project) -> bool:
    owner = project.owner
    if isinstance(owner, IndividualOwner):
        result = candidate == owner.user
    elif isinstance(owner, GroupOwner):
        result = owner.group.is_member(candidate)
    else:
        result = False
    log_policy_decision("is_member", candidate, project.slug, result)
    return result


def is_committer(candidate: Actor, project: Project) -> bool:
    owner = project.owner
    if isinstance(owner, IndividualOwner):
        result = candidate == owner.user
    elif isinstance(owner, GroupOwner):
        result = owner.group.is_committer(candidate)
    else:
        result = False
    log_policy_decision("is_committer", candidate, project.slug, result)
    return result


def is_repository_collaborator(candidate: Actor, repository: Repository) -> bool:
    """True if the candidate holds any committership on the repository."""
    if not isinstance(candidate, User):
        return False
    return any(c.committer == candidate for c in repository.committerships)


def has_repository_permission(
    candidate: Actor, repository: Repository, permission: Permission
) -> bool:
    if not isinstance(candidate, User):
        return False
    return any(
        c.committer == candidate and c.permits(permission)
        for c in repository.committerships
    )


def is_collaborator(candidate: Actor, project: Project) -> bool:
    """
    True if any mainline repository grants the candidate a committership,
    or the candidate is a member of the project owner.
    """
    for repository in project.mainlines:
        if is_repository_collaborator(candidate, repository):
            log_policy_decision("is_collaborator", candidate, project.slug, True)
            return True
    result = is_member(candidate, project)
    log_policy_decision("is_collaborator", candidate, project.slug, result)
    return result


def can_delete(candidate: Actor, project: Project) -> bool:
    """Admins may delete a project, but only while it has no clones."""
    result = is_admin(candidate, project) and len(project.clones) == 0
    log_policy_decision("can_delete", candidate, project.slug, result)
    return result


def can_write_wiki(candidate: Actor, project: Project) -> bool:
    wiki = project.wiki_repository
    if wiki is None or not is_authenticated(candidate):
        return False
    if wiki.wiki_permissions is WikiPermissions.EVERYONE:
        return True
    return is_collaborator(candidate, project)


def viewers(project: Project) -> list[User]:
    """Owner members and mainline committers, first occurrence first."""
    seen: list[User] = []
    candidates = list(owner_members(project.owner))
    for repository in project.mainlines:
        candidates.extend(c.committer for c in repository.committerships)
    for user in candidates:
        if user not in seen:
            seen.append(user)
    return seen


def projects_for(user: User, projects: Iterable[Project]) -> list[Project]:
    """
    Projects a user works on.

    Projects owned by the user come first, followed by group-owned projects
    where the user is a group member and a collaborator.
    """
    projects = list(projects)
    owned = [
        p for p in projects
        if isinstance(p.owner, IndividualOwner) and p.owner.user == user
    ]
    through_groups = [
        p for p in projects
        if isinstance(p.owner, GroupOwner)
        and p.owner.group.is_member(user)
        and is_collaborator(user, p)
    ]
    return owned + through_groups
