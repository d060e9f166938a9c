"""Value objects describing who receives a fan-out."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .role import ROLE_ADMIN, ROLE_DEALER, ROLE_INDIVIDUAL

GLOBAL_CHANNEL = "global"
ADMIN_CHANNEL = "admin:room"


class AudienceKind(str, Enum):
    """Logical target groups an admin can address."""

    ALL = "all"
    BUYERS = "buyers"
    SELLERS = "sellers"
    DEALERS = "dealers"
    ADMINS = "admins"


PROMOTION_AUDIENCES: frozenset[AudienceKind] = frozenset(
    {AudienceKind.ALL, AudienceKind.BUYERS, AudienceKind.SELLERS, AudienceKind.DEALERS}
)


def role_for_audience(kind: AudienceKind) -> str | None:
    """Return the account role backing ``kind``; ``None`` for ``all``."""

    if kind is AudienceKind.ALL:
        return None
    if kind is AudienceKind.BUYERS or kind is AudienceKind.SELLERS:
        return ROLE_INDIVIDUAL
    if kind is AudienceKind.DEALERS:
        return ROLE_DEALER
    if kind is AudienceKind.ADMINS:
        return ROLE_ADMIN
    raise ValueError(f"Unsupported audience: {kind!r}")


def role_channel(alias: str) -> str:
    return f"role:{alias}"


def user_channel(user_id: int) -> str:
    return f"user:{user_id}"


@dataclass(frozen=True)
class AudienceSelector:
    """Either a logical audience or one explicit recipient (id or email)."""

    kind: AudienceKind | None = None
    recipient: int | str | None = None

    def __post_init__(self) -> None:
        if (self.kind is None) == (self.recipient is None):
            raise ValueError("Provide either an audience kind or a recipient")

    @property
    def is_explicit(self) -> bool:
        return self.recipient is not None

    def describe(self) -> str:
        if self.kind is not None:
            return self.kind.value
        return f"recipient:{self.recipient}"


@dataclass(frozen=True)
class AudienceMember:
    """A user resolved into an audience along with delivery eligibility."""

    user_id: int
    name: str
    email: str | None
    verified: bool
    is_active: bool
    room: str

    @property
    def can_receive_email(self) -> bool:
        return bool(self.email) and self.verified


@dataclass
class ResolvedAudience:
    """Outcome of audience resolution.

    ``broadcast`` means a single shared record is persisted; ``members`` is
    still populated so email dispatch can reach everyone individually.
    """

    selector: AudienceSelector
    broadcast: bool
    role: str | None
    members: list[AudienceMember] = field(default_factory=list)
    truncated: bool = False

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def has_active_members(self) -> bool:
        return any(member.is_active for member in self.members)

    @property
    def channel(self) -> str:
        """Real-time channel matching this audience."""

        if self.broadcast:
            return GLOBAL_CHANNEL
        if self.selector.is_explicit:
            return self.members[0].room
        if self.role is not None:
            return role_channel(self.role)
        raise ValueError(f"No channel for audience {self.selector.describe()}")


__all__ = [
    "ADMIN_CHANNEL",
    "AudienceKind",
    "AudienceMember",
    "AudienceSelector",
    "GLOBAL_CHANNEL",
    "PROMOTION_AUDIENCES",
    "ResolvedAudience",
    "role_channel",
    "role_for_audience",
    "user_channel",
]
