"""
Per-request context.

Everything that depends on the current visitor or holds open connections
lives here, for the duration of one request, and nowhere else.
"""

from typing import Any

from forgepolicy.config import ForgeSettings
from forgepolicy.exceptions import ConfigurationError
from forgepolicy.projects import effective_site
from forgepolicy.signoff import SignoffConsumer
from forgepolicy.store import RecordStore
from forgepolicy.transfer import change_owner
from forgepolicy.types.actors import ANONYMOUS, Actor, is_authenticated
from forgepolicy.types.owners import Owner
from forgepolicy.types.projects import Project, Site
from forgepolicy.visibility import can_view


class RequestContext:
    """
    State scoped to one request.

    Signoff consumers are built on first use for each project and closed
    with the context.

    Example:
        ```python
        with RequestContext(actor=user, store=store, settings=settings) as ctx:
            if ctx.can_view(project):
                consumer = ctx.signoff_consumer(project)
        ```
    """

    def __init__(
        self,
        actor: Actor,
        store: RecordStore,
        settings: ForgeSettings | None = None,
    ) -> None:
        self.actor = actor if actor is not None else ANONYMOUS
        self.store = store
        self.settings = settings or ForgeSettings()
        self._signoff_consumers: dict[str, SignoffConsumer] = {}

    @property
    def logged_in(self) -> bool:
        return is_authenticated(self.actor)

    def can_view(self, project: Project) -> bool:
        return can_view(self.actor, project)

    def site_for(self, project: Project) -> Site | None:
        return effective_site(project, self.settings.default_site)

    def change_owner(self, project: Project, new_owner: Owner) -> bool:
        """Transfer ownership using the configured strictness."""
        return change_owner(
            project, new_owner, self.store, strict=self.settings.strict_transfers
        )

    def signoff_consumer(self, project: Project) -> SignoffConsumer:
        """
        The project's signoff consumer, built on first use.

        Raises:
            ConfigurationError: If the project does not require signoff
        """
        consumer = self._signoff_consumers.get(project.slug)
        if consumer is None:
            if not project.signoff.needs_signoff:
                raise ConfigurationError(
                    f"Project '{project.slug}' does not require merge request signoff"
                )
            consumer = SignoffConsumer(project.signoff, timeout=self.settings.signoff_timeout)
            self._signoff_consumers[project.slug] = consumer
        return consumer

    def close(self) -> None:
        for consumer in self._signoff_consumers.values():
            consumer.close()
        self._signoff_consumers.clear()

    def __enter__(self) -> "RequestContext":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
