"""
Project ownership transfer.

Only individually owned projects can change hands. The previous owner keeps
full rights on every mainline repository through new committerships.
"""

from dataclasses import replace

from forgepolicy.exceptions import InvalidTransitionError
from forgepolicy.logging import get_logger
from forgepolicy.owners import owner_param
from forgepolicy.store import RecordStore
from forgepolicy.types.owners import GroupOwner, IndividualOwner, Owner
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import FULL_PERMISSIONS, Committership, Repository

logger = get_logger("transfer")


def change_owner(
    project: Project,
    new_owner: Owner,
    store: RecordStore,
    *,
    strict: bool = False,
) -> bool:
    """
    Hand a project and its wiki over to a new owner.

    The project and wiki owner change, and the previous owner receives a
    review/commit/admin committership on every mainline repository. All
    writes share one store transaction; the in-memory project is updated
    only after it commits.

    Args:
        project: Project to transfer
        new_owner: The new owner (user or group)
        store: Store receiving the writes
        strict: Raise instead of ignoring a group-owned project

    Returns:
        True if ownership changed, False if the project is group-owned

    Raises:
        InvalidTransitionError: If strict and the project is group-owned
        PersistenceError: If any write fails; nothing is changed
    """
    previous = project.owner
    if isinstance(previous, GroupOwner):
        if strict:
            raise InvalidTransitionError(
                f"Project '{project.slug}' is owned by group '{previous.group.name}'"
            )
        logger.warning(
            f"Ignoring ownership transfer of group-owned project {project.slug}"
        )
        return False
    if not isinstance(previous, IndividualOwner):
        raise InvalidTransitionError(f"Project '{project.slug}' has no owner")

    wiki = project.wiki_repository
    grants: list[tuple[Repository, Committership]] = []

    with store.transaction():
        store.save_project(replace(project, owner=new_owner))
        if wiki is not None:
            store.save_repository(replace(wiki, owner=new_owner))
        for repository in project.mainlines:
            committership = store.create_committership(
                repository,
                committer=previous.user,
                creator=previous.user,
                permissions=FULL_PERMISSIONS,
            )
            grants.append((repository, committership))

    project.owner = new_owner
    if wiki is not None:
        wiki.owner = new_owner
    for repository, committership in grants:
        repository.committerships.append(committership)

    logger.info(
        f"Transferred {project.slug} from {previous.user.login} to "
        f"{owner_param(new_owner)} ({len(grants)} committerships granted)"
    )
    return True
