"""Run the persist, email and realtime stages of a fan-out in order."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.domain.entities import NotificationDraft, ResolvedAudience
from backoffice.infrastructure.repositories import NotificationRepository

from .broadcast import RealtimeBroadcast
from .email_dispatch import EmailDispatch, build_email_renderer
from .fanout import FanoutResult, NotificationFanout
from .options import FanoutOptions

logger = logging.getLogger(__name__)


@dataclass
class DeliveryReport:
    """Per-stage outcome of a fan-out, used for responses and logs."""

    result: FanoutResult
    audience_size: int
    emails_sent: int = 0
    realtime_emits: int = 0


def deliver_notification(
    session: Session,
    draft: NotificationDraft,
    audience: ResolvedAudience,
    *,
    broadcaster: BroadcastPort | None,
    send_email: EmailSender | None,
    options: FanoutOptions,
) -> DeliveryReport:
    """Persist ``draft`` for ``audience`` then email and broadcast it.

    Email and realtime failures never propagate.
    """

    fanout = NotificationFanout(
        NotificationRepository(session), batch_size=options.batch_size
    )
    result = fanout.persist(draft, audience)
    report = DeliveryReport(result=result, audience_size=audience.size)

    if options.email_enabled and send_email is not None:
        try:
            render = build_email_renderer(
                draft, site_name=options.site_name, frontend_url=options.frontend_url
            )
            dispatch = EmailDispatch(send_email, max_workers=options.email_max_workers)
            report.emails_sent = dispatch.send(audience.members, render)
        except Exception:
            logger.exception("Email stage for '%s' aborted", draft.title)
    else:
        logger.info("Email notifications disabled; skipping email stage for '%s'", draft.title)

    report.realtime_emits = RealtimeBroadcast(broadcaster).announce(audience, result)

    logger.info(
        "Delivered '%s' to %s: %s records, %s emails, %s realtime emits",
        draft.title,
        audience.selector.describe(),
        result.count,
        report.emails_sent,
        report.realtime_emits,
    )
    return report


__all__ = ["DeliveryReport", "deliver_notification"]
