"""Project record validation."""

import re

from forgepolicy.config import DEFAULT_RESERVED_PROJECT_NAMES
from forgepolicy.exceptions import ValidationError
from forgepolicy.types.projects import Project

NAME_FORMAT = re.compile(r"^[a-z0-9_\-]+$", re.IGNORECASE)
URL_FORMAT = re.compile(r"^(http|https|nntp)://")

URL_FIELDS = ("home_url", "mailinglist_url", "bugtracker_url")


def clean_url(url: str | None) -> str | None:
    """
    Normalise a user supplied URL.

    Blank values become None and a URL without a scheme gets ``http://``.
    """
    if url is None or not url.strip():
        return None
    url = url.strip()
    if "://" not in url:
        return f"http://{url}"
    return url


def validate_project(
    project: Project,
    reserved_names: frozenset[str] = DEFAULT_RESERVED_PROJECT_NAMES,
) -> None:
    """
    Check a project record before it is saved.

    Raises:
        ValidationError: With every failing field and its messages
    """
    errors: dict[str, list[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    for field in ("title", "slug", "description"):
        value = getattr(project, field)
        if value is None or not str(value).strip():
            add(field, "can't be blank")
    if project.creator is None:
        add("creator", "can't be blank")
    if project.owner is None:
        add("owner", "can't be blank")

    if project.slug:
        if not NAME_FORMAT.match(project.slug):
            add("slug", "must match something in the range of [a-z0-9_-]")
        if project.slug.lower() in reserved_names:
            add("slug", "is reserved")

    for field in URL_FIELDS:
        value = getattr(project, field)
        if value and not URL_FORMAT.match(value):
            add(field, "must begin with http://, https:// or nntp://")

    if errors:
        raise ValidationError(errors)
