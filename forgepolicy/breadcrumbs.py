"""
Breadcrumb trails.

Each record knows its parent in the navigation hierarchy. A trail lists the
ancestors of a record, top-most first, ending with the record itself.
"""

from typing import Any

from forgepolicy.exceptions import NotFoundError
from forgepolicy.store import RecordStore
from forgepolicy.types.projects import Project
from forgepolicy.types.repos import Committership, Repository


def breadcrumb_parent(obj: Any, store: RecordStore | None = None) -> Any:
    """
    Parent of a record in the navigation hierarchy.

    Projects, groups and users are roots. A repository's parent is its
    project, a committership's parent is its repository; both are looked
    up in the store, so without a store they are roots too.
    """
    if store is None:
        return None
    try:
        if isinstance(obj, Repository):
            return store.load_project(obj.project_slug)
        if isinstance(obj, Committership):
            return store.load_repository(obj.repository_id)
    except NotFoundError:
        return None
    return None


def breadcrumb_trail(root: Any, store: RecordStore | None = None) -> list[Any]:
    trail = []
    current = root
    while current is not None:
        trail.append(current)
        current = breadcrumb_parent(current, store)
    trail.reverse()
    return trail


def breadcrumb_css_class(obj: Any) -> str:
    custom = getattr(obj, "breadcrumb_css_class", None)
    if isinstance(custom, str):
        return custom
    return type(obj).__name__.lower()


def breadcrumb_title(obj: Any) -> str:
    if isinstance(obj, Project):
        return obj.title
    for attribute in ("name", "login"):
        value = getattr(obj, attribute, None)
        if value:
            return str(value)
    if isinstance(obj, Committership):
        return obj.committer.login
    return str(obj)
