"""forgepolicy - ownership and permission policy for code hosting projects."""

from forgepolicy.config import ForgeSettings
from forgepolicy.context import RequestContext
from forgepolicy.exceptions import (
    ConfigurationError,
    ForgePolicyError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    SignoffError,
    ThrottledError,
    ValidationError,
)
from forgepolicy.logging import configure_logging, get_logger
from forgepolicy.owners import owned_by_group, owner_kind, resolve_owner
from forgepolicy.permissions import (
    can_delete,
    is_admin,
    is_collaborator,
    is_committer,
    is_member,
)
from forgepolicy.projects import add_repository, create_project, effective_site
from forgepolicy.signoff import SignoffConsumer
from forgepolicy.store import InMemoryStore, RecordStore
from forgepolicy.transfer import change_owner
from forgepolicy.visibility import can_view

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Settings and request scope
    "ForgeSettings",
    "RequestContext",
    # Owner resolution
    "resolve_owner",
    "owner_kind",
    "owned_by_group",
    # Policy
    "can_view",
    "is_admin",
    "is_member",
    "is_committer",
    "is_collaborator",
    "can_delete",
    # Ownership transfer
    "change_owner",
    # Lifecycle
    "create_project",
    "add_repository",
    "effective_site",
    # Storage
    "RecordStore",
    "InMemoryStore",
    # Signoff
    "SignoffConsumer",
    # Exceptions
    "ForgePolicyError",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "InvalidTransitionError",
    "ThrottledError",
    "SignoffError",
    # Logging
    "configure_logging",
    "get_logger",
]
