"""Fan a newly created promotion out to its target audience."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.audience import resolve_audience
from backoffice.application.use_cases.notifications import (
    DeliveryReport,
    FanoutOptions,
    deliver_notification,
)
from backoffice.domain.entities import (
    AudienceKind,
    AudienceSelector,
    NotificationDraft,
    NotificationKind,
    Promotion,
    User,
    format_amount,
)
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def promotion_draft(promotion: Promotion, *, created_by: int | None) -> NotificationDraft:
    """Return the in-app notification announcing ``promotion``."""

    message = f"Use code {promotion.promo_code} to get {promotion.discount_label()} off!"
    if promotion.min_purchase_amount > 0:
        message += f" Minimum purchase: ${format_amount(promotion.min_purchase_amount)}"
    return NotificationDraft(
        title=f"New Promotion: {promotion.title}",
        message=message,
        kind=NotificationKind.PROMOTION,
        action_url="/",
        action_text="View Details",
        expires_at=promotion.end_date,
        metadata=promotion.snapshot(),
        created_by=created_by,
    )


def announce_promotion(
    session: Session,
    promotion: Promotion,
    *,
    admin: User,
    broadcaster: BroadcastPort | None,
    send_email: EmailSender | None,
    options: FanoutOptions,
) -> DeliveryReport | None:
    """Notify the promotion audience by in-app record, email and realtime push.

    When no active user matches the audience the creating admin receives a
    warning notification instead and ``None`` is returned.
    """

    selector = AudienceSelector(kind=AudienceKind(promotion.target_audience))
    audience = resolve_audience(session, selector, limit=options.audience_limit)

    if not audience.has_active_members:
        logger.warning(
            "No users found to notify for promotion %s (audience %s)",
            promotion.id,
            promotion.target_audience,
        )
        _warn_admin(session, promotion, admin)
        return None

    draft = promotion_draft(promotion, created_by=admin.id)
    return deliver_notification(
        session,
        draft,
        audience,
        broadcaster=broadcaster,
        send_email=send_email,
        options=options,
    )


def _warn_admin(session: Session, promotion: Promotion, admin: User) -> None:
    draft = NotificationDraft(
        title="Promotion Created - No Users Notified",
        message=(
            f'Promotion "{promotion.title}" was created but no users found for '
            f"target audience: {promotion.target_audience}"
        ),
        kind=NotificationKind.WARNING,
        action_url="/admin/promotions",
        action_text="View Promotion",
        created_by=admin.id,
    )
    record = draft.build(
        recipient_id=admin.id, target_role=None, created_at=now_in_app_timezone()
    )
    try:
        NotificationRepository(session).create(record)
    except Exception:
        logger.exception(
            "Failed to create empty-audience warning for promotion %s", promotion.id
        )


__all__ = ["announce_promotion", "promotion_draft"]
