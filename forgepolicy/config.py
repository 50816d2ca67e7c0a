"""
forgepolicy settings.

Settings are passed explicitly to the functions that need them. They can
be built from keyword arguments or read from the environment.
"""

import os
from dataclasses import dataclass, field

from forgepolicy.exceptions import ConfigurationError
from forgepolicy.types.projects import Site, Visibility

# Names that would clash with top-level routes of the hosting site
DEFAULT_RESERVED_PROJECT_NAMES = frozenset(
    {
        "about",
        "admin",
        "api",
        "dashboard",
        "groups",
        "login",
        "logout",
        "messages",
        "projects",
        "search",
        "sessions",
        "site",
        "teams",
        "users",
    }
)

_VISIBILITY_NAMES = {
    "all": Visibility.ALL,
    "logged_in": Visibility.LOGGED_IN,
    "collaborators": Visibility.COLLABORATORS,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class ForgeSettings:
    """Configuration for policy and lifecycle operations."""

    default_visibility: Visibility = Visibility.ALL
    default_site: Site | None = None
    git_host: str = "git.example.org"
    reserved_project_names: frozenset[str] = field(
        default_factory=lambda: DEFAULT_RESERVED_PROJECT_NAMES
    )
    project_creation_limit: int = 5
    project_creation_window: int = 300  # seconds
    strict_transfers: bool = False
    signoff_timeout: float = 30.0

    @classmethod
    def from_env(cls, default_site: Site | None = None) -> "ForgeSettings":
        """
        Create settings from environment variables.

        Environment variables:
            FORGEPOLICY_DEFAULT_VISIBILITY: all, logged_in or collaborators (optional, default: all)
            FORGEPOLICY_GIT_HOST: Host name used in clone URLs (optional)
            FORGEPOLICY_RESERVED_NAMES: Comma separated extra reserved project names (optional)
            FORGEPOLICY_CREATION_LIMIT: Projects a user may create per window (optional, default: 5)
            FORGEPOLICY_CREATION_WINDOW: Throttle window in seconds (optional, default: 300)
            FORGEPOLICY_STRICT_TRANSFERS: Reject transfers of group-owned projects (optional)
            FORGEPOLICY_SIGNOFF_TIMEOUT: Signoff site timeout in seconds (optional, default: 30)

        Args:
            default_site: Site used for projects without a containing site

        Raises:
            ConfigurationError: If a variable holds a malformed value
        """
        settings = cls(default_site=default_site)

        visibility = os.environ.get("FORGEPOLICY_DEFAULT_VISIBILITY")
        if visibility is not None:
            try:
                settings.default_visibility = _VISIBILITY_NAMES[visibility.strip().lower()]
            except KeyError:
                raise ConfigurationError(
                    f"Invalid FORGEPOLICY_DEFAULT_VISIBILITY: {visibility}. "
                    "Must be 'all', 'logged_in' or 'collaborators'"
                ) from None

        git_host = os.environ.get("FORGEPOLICY_GIT_HOST")
        if git_host:
            settings.git_host = git_host.strip()

        reserved = os.environ.get("FORGEPOLICY_RESERVED_NAMES")
        if reserved:
            extra = {name.strip().lower() for name in reserved.split(",") if name.strip()}
            settings.reserved_project_names = settings.reserved_project_names | extra

        settings.project_creation_limit = _int_from_env(
            "FORGEPOLICY_CREATION_LIMIT", settings.project_creation_limit
        )
        settings.project_creation_window = _int_from_env(
            "FORGEPOLICY_CREATION_WINDOW", settings.project_creation_window
        )

        strict = os.environ.get("FORGEPOLICY_STRICT_TRANSFERS")
        if strict is not None:
            value = strict.strip().lower()
            if value in _TRUE_VALUES:
                settings.strict_transfers = True
            elif value in _FALSE_VALUES:
                settings.strict_transfers = False
            else:
                raise ConfigurationError(
                    f"Invalid FORGEPOLICY_STRICT_TRANSFERS: {strict}"
                )

        timeout = os.environ.get("FORGEPOLICY_SIGNOFF_TIMEOUT")
        if timeout is not None:
            try:
                settings.signoff_timeout = float(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid FORGEPOLICY_SIGNOFF_TIMEOUT: {timeout}"
                ) from None

        return settings


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: {raw}. Must be an integer") from None
    if value < 0:
        raise ConfigurationError(f"Invalid {name}: {raw}. Must not be negative")
    return value
