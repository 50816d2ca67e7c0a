"""Actor data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class User:
    """An individual, authenticated user."""

    user_id: str
    login: str
    email: str | None = field(default=None, compare=False)

    @property
    def is_authenticated(self) -> bool:
        return True


class AnonymousActor:
    """Marker for an unauthenticated visitor."""

    _instance: "AnonymousActor | None" = None

    def __new__(cls) -> "AnonymousActor":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_authenticated(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ANONYMOUS"


ANONYMOUS = AnonymousActor()

# None is accepted wherever an actor is and means anonymous.
Actor = User | AnonymousActor | None


def is_authenticated(actor: Actor) -> bool:
    """Return True only for an individual user."""
    return isinstance(actor, User)
