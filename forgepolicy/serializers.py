"""API serialisation of projects."""

import json
from datetime import datetime, timezone
from typing import Any

from forgepolicy.config import ForgeSettings
from forgepolicy.owners import owner_kind, owner_param
from forgepolicy.types.owners import Owner, OwnerKind
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import Repository

# Name of each owner kind in API responses
OWNER_KIND_LABELS = {OwnerKind.USER: "User", OwnerKind.GROUP: "Team"}


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def owner_to_dict(owner: Owner | None) -> dict[str, str] | None:
    if owner is None:
        return None
    return {"name": owner_param(owner), "kind": OWNER_KIND_LABELS[owner_kind(owner)]}


def clone_url(repository: Repository, git_host: str) -> str:
    return f"git://{git_host}/{repository.project_slug}/{repository.name}.git"


def repository_to_dict(repository: Repository, git_host: str) -> dict[str, Any]:
    return {
        "id": repository.repository_id,
        "name": repository.name,
        "owner": owner_to_dict(repository.owner),
        "clone_url": clone_url(repository, git_host),
    }


def project_to_dict(project: Project, settings: ForgeSettings | None = None) -> dict[str, Any]:
    """
    Convert a project to its API representation.

    The wiki repository is not listed. Owners carry a kind of "User" or
    "Team".
    """
    settings = settings or ForgeSettings()
    return {
        "slug": project.slug,
        "title": project.title,
        "description": project.description,
        "home_url": project.home_url,
        "mailinglist_url": project.mailinglist_url,
        "bugtracker_url": project.bugtracker_url,
        "created_at": format_timestamp(project.created_at),
        "visibility": project.visibility.name.lower(),
        "owner": owner_to_dict(project.owner),
        "repositories": {
            "mainlines": [repository_to_dict(r, settings.git_host) for r in project.mainlines],
            "clones": [repository_to_dict(r, settings.git_host) for r in project.clones],
        },
    }


def project_to_json(project: Project, settings: ForgeSettings | None = None) -> str:
    return json.dumps(project_to_dict(project, settings), sort_keys=True)
