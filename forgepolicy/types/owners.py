"""Owner data models.

An owner is exactly one of IndividualOwner or GroupOwner. The two variants
share no interface: policy code branches on the variant explicitly.
"""

from dataclasses import dataclass
from enum import Enum

from forgepolicy.types.actors import User
from forgepolicy.types.groups import Group


class OwnerKind(str, Enum):
    """Kind of owner."""

    USER = "user"
    GROUP = "group"


@dataclass(frozen=True)
class IndividualOwner:
    """Ownership by a single user, who is the sole admin."""

    user: User


@dataclass(frozen=True)
class GroupOwner:
    """Ownership by a group, which delegates to its role table."""

    group: Group


Owner = IndividualOwner | GroupOwner
