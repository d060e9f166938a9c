"""Use case for admin-issued notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.audience import resolve_audience
from backoffice.domain.entities import (
    AudienceKind,
    AudienceSelector,
    NotificationDraft,
    NotificationKind,
)
from backoffice.domain.exceptions import ValidationError

from .options import FanoutOptions
from .pipeline import DeliveryReport, deliver_notification


def create_notification(
    session: Session,
    *,
    title: str,
    message: str,
    kind: NotificationKind = NotificationKind.INFO,
    recipient: int | str | None = None,
    target_audience: AudienceKind | str | None = None,
    action_url: str | None = None,
    action_text: str | None = None,
    expires_at: datetime | None = None,
    metadata: dict[str, Any] | None = None,
    created_by: int | None,
    broadcaster: BroadcastPort | None,
    send_email: EmailSender | None,
    options: FanoutOptions,
) -> DeliveryReport:
    """Create a notification for a recipient, a role audience or everyone.

    An explicit ``recipient`` wins over ``target_audience``; with neither the
    notification is broadcast to all users.
    """

    title = (title or "").strip()
    message = (message or "").strip()
    if not title or not message:
        raise ValidationError("Title and message are required.")

    if recipient is not None and str(recipient).strip():
        selector = AudienceSelector(recipient=recipient)
    else:
        selector = AudienceSelector(kind=_parse_audience(target_audience))

    audience = resolve_audience(session, selector, limit=options.audience_limit)
    if not audience.broadcast and not selector.is_explicit:
        if not audience.has_active_members:
            raise ValidationError(
                f'No active users found with role "{audience.role}" to send notifications to.'
            )

    draft = NotificationDraft(
        title=title,
        message=message,
        kind=kind,
        action_url=action_url or None,
        action_text=action_text or None,
        expires_at=expires_at,
        metadata=metadata or {},
        created_by=created_by,
    )
    return deliver_notification(
        session,
        draft,
        audience,
        broadcaster=broadcaster,
        send_email=send_email,
        options=options,
    )


def _parse_audience(raw: AudienceKind | str | None) -> AudienceKind:
    if raw is None or raw == "":
        return AudienceKind.ALL
    try:
        return AudienceKind(raw)
    except ValueError as exc:
        raise ValidationError(f'Invalid target audience "{raw}".') from exc


__all__ = ["create_notification"]
