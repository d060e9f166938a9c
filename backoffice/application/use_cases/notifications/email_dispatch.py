"""Send the email leg of a fan-out."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Sequence

from backoffice.application.ports import EmailSender
from backoffice.domain.entities import (
    AudienceMember,
    DiscountType,
    NotificationDraft,
    NotificationKind,
    format_amount,
)
from backoffice.infrastructure.email import render_notification_email, render_promotion_email
from backoffice.utils import format_display_date

logger = logging.getLogger(__name__)

EmailRenderer = Callable[[AudienceMember], tuple[str, str]]


class EmailDispatch:
    """Render and submit one email per eligible member.

    Sends run on a bounded thread pool. Each send is independent: a failure
    is logged and left out of the returned count.
    """

    def __init__(self, send_email: EmailSender, *, max_workers: int = 8) -> None:
        self._send_email = send_email
        self._max_workers = max(1, max_workers)

    def send(self, members: Sequence[AudienceMember], render: EmailRenderer) -> int:
        eligible = [member for member in members if member.can_receive_email]
        skipped = len(members) - len(eligible)
        if skipped:
            logger.debug("Skipping %s members without a verified email", skipped)
        if not eligible:
            return 0

        workers = min(self._max_workers, len(eligible))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout-email") as pool:
            outcomes = list(pool.map(lambda member: self._send_one(member, render), eligible))

        sent = sum(1 for outcome in outcomes if outcome)
        logger.info("Sent %s of %s emails", sent, len(eligible))
        return sent

    def _send_one(self, member: AudienceMember, render: EmailRenderer) -> bool:
        try:
            subject, html_content = render(member)
            delivered = bool(self._send_email(subject, html_content, member.email))
        except Exception:
            logger.exception(
                "Email to user %s <%s> failed", member.user_id, member.email
            )
            return False
        if not delivered:
            logger.error("Email to user %s <%s> was not accepted", member.user_id, member.email)
        return delivered


def build_email_renderer(
    draft: NotificationDraft, *, site_name: str, frontend_url: str
) -> EmailRenderer:
    """Return the renderer matching ``draft``: promotion or plain notification."""

    metadata = draft.metadata or {}
    if draft.kind is NotificationKind.PROMOTION and metadata.get("promo_code"):
        return _promotion_renderer(metadata, cta_url=frontend_url)

    action_href = _absolute_url(frontend_url, draft.action_url)

    def render(member: AudienceMember) -> tuple[str, str]:
        html_content = render_notification_email(
            site_name=site_name,
            recipient_name=member.name,
            title=draft.title,
            message=draft.message,
            action_href=action_href,
            action_text=draft.action_text,
        )
        return draft.title, html_content

    return render


def _promotion_renderer(snapshot: dict[str, Any], *, cta_url: str) -> EmailRenderer:
    title = str(snapshot.get("title") or "")
    discount_value = float(snapshot.get("discount_value") or 0)
    if snapshot.get("discount_type") == DiscountType.PERCENTAGE.value:
        discount_text = f"{format_amount(discount_value)}% OFF"
    else:
        discount_text = f"${format_amount(discount_value)} OFF"
    min_purchase = float(snapshot.get("min_purchase_amount") or 0)
    min_purchase_text = f"${format_amount(min_purchase)}" if min_purchase > 0 else None
    valid_until = _display_date(snapshot.get("end_date"))
    subject = f"Exclusive Promotion: {title}"

    def render(member: AudienceMember) -> tuple[str, str]:
        html_content = render_promotion_email(
            recipient_name=member.name,
            title=title,
            description=snapshot.get("description"),
            promo_code=str(snapshot["promo_code"]),
            discount_text=discount_text,
            min_purchase_text=min_purchase_text,
            valid_until=valid_until,
            usage_limit=snapshot.get("usage_limit"),
            cta_url=cta_url,
        )
        return subject, html_content

    return render


def _display_date(value: Any) -> str:
    if isinstance(value, datetime):
        return format_display_date(value)
    if isinstance(value, str) and value:
        try:
            return format_display_date(datetime.fromisoformat(value))
        except ValueError:
            return value
    return ""


def _absolute_url(base: str, path: str | None) -> str | None:
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


__all__ = ["EmailDispatch", "EmailRenderer", "build_email_renderer"]
