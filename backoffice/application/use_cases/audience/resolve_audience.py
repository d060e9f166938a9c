"""Use case turning an audience selector into concrete recipients."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from backoffice.domain.entities import (
    AudienceKind,
    AudienceMember,
    AudienceSelector,
    ResolvedAudience,
    User,
    role_channel,
    role_for_audience,
    user_channel,
)
from backoffice.domain.exceptions import ValidationError
from backoffice.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_LIMIT = 1000


def resolve_audience(
    session: Session,
    selector: AudienceSelector,
    *,
    limit: int = DEFAULT_MEMBER_LIMIT,
) -> ResolvedAudience:
    """Return the recipients addressed by ``selector``.

    ``all`` resolves to a broadcast whose member list is only used for email.
    Member lookups stop at ``limit`` users and flag the result as truncated.
    """

    repository = UserRepository(session)

    if selector.is_explicit:
        user = _find_recipient(repository, selector.recipient)
        member = _to_member(user, room=user_channel(user.id))
        return ResolvedAudience(
            selector=selector, broadcast=False, role=user.role.alias, members=[member]
        )

    kind = selector.kind
    if kind is AudienceKind.ALL:
        role = None
    elif kind in (
        AudienceKind.BUYERS,
        AudienceKind.SELLERS,
        AudienceKind.DEALERS,
        AudienceKind.ADMINS,
    ):
        role = role_for_audience(kind)
    else:
        raise ValueError(f"Unsupported audience: {kind!r}")

    users = list(repository.list_for_audience(role, limit=limit + 1))
    truncated = len(users) > limit
    if truncated:
        logger.warning(
            "Audience %s exceeds %s members; truncating", selector.describe(), limit
        )
        users = users[:limit]

    members: list[AudienceMember] = []
    seen: set[int] = set()
    for user in users:
        if user.id in seen:
            continue
        seen.add(user.id)
        members.append(_to_member(user, room=role_channel(user.role.alias)))

    logger.info(
        "Resolved audience %s to %s members", selector.describe(), len(members)
    )
    return ResolvedAudience(
        selector=selector,
        broadcast=kind is AudienceKind.ALL,
        role=role,
        members=members,
        truncated=truncated,
    )


def parse_recipient(raw: int | str) -> int | str:
    """Normalize a recipient given as id, numeric string or email."""

    if isinstance(raw, int):
        return raw
    candidate = str(raw).strip()
    if candidate.isdigit():
        return int(candidate)
    if "@" in candidate:
        return candidate.lower()
    raise ValidationError(f'Recipient "{raw}" is neither a user id nor an email.')


def _find_recipient(repository: UserRepository, raw: int | str | None) -> User:
    recipient = parse_recipient(raw)
    if isinstance(recipient, int):
        user = repository.get(recipient)
        if user is None:
            raise ValidationError(f"User with id {recipient} not found.")
        return user
    user = repository.get_by_email(recipient)
    if user is None:
        raise ValidationError(f'User with email "{recipient}" not found.')
    return user


def _to_member(user: User, *, room: str) -> AudienceMember:
    return AudienceMember(
        user_id=user.id,
        name=user.name,
        email=user.email,
        verified=user.verified,
        is_active=user.is_active,
        room=room,
    )


__all__ = ["DEFAULT_MEMBER_LIMIT", "parse_recipient", "resolve_audience"]
