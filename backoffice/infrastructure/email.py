"""Utility helpers for sending marketing and notification emails via SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from backoffice.config import get_settings

logger = logging.getLogger(__name__)

_ACCENT_COLOR = "#F97316"


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception, recipient: str) -> None:
    """Log a SendGrid API error with helpful troubleshooting details."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error(
            "SendGrid request for %s failed with status %s: %s",
            recipient,
            status_code,
            details,
        )
    elif status_code:
        logger.error(
            "SendGrid request for %s failed with status %s", recipient, status_code
        )
    else:
        logger.exception("Error sending email to %s via SendGrid: %s", recipient, exc)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email to %s", recipient)
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_exception(exc, recipient)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        logger.error(
            "SendGrid responded with status %s for %s%s",
            status_code,
            recipient,
            f": {details}" if details else "",
        )
        return False

    return True


def render_promotion_email(
    *,
    recipient_name: str | None,
    title: str,
    description: str | None,
    promo_code: str,
    discount_text: str,
    min_purchase_text: str | None,
    valid_until: str,
    usage_limit: int | None,
    cta_url: str,
) -> str:
    """Return the HTML body announcing a promotion."""

    parts = [
        '<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #111827;">',
        '<h2 style="color:#111827;margin-bottom:8px;">Exclusive Promotion Available!</h2>',
        f'<p style="margin:0 0 12px 0;">Hi {escape(recipient_name or "there")},</p>',
        '<p style="margin:0 0 16px 0;">We\'re excited to offer you an exclusive promotion with great savings!</p>',
        '<div style="background:#F3F4F6;padding:20px;border-radius:8px;margin:20px 0;'
        f'border-left:4px solid {_ACCENT_COLOR};">',
        f'<h3 style="color:#111827;margin:0 0 12px 0;font-size:18px;">{escape(title)}</h3>',
    ]
    if description:
        parts.append(
            f'<p style="margin:0 0 16px 0;color:#6B7280;">{escape(description)}</p>'
        )
    parts.extend(
        [
            '<div style="background:#FFFFFF;padding:16px;border-radius:6px;'
            f'border:2px dashed {_ACCENT_COLOR};text-align:center;margin:16px 0;">',
            '<p style="margin:0 0 8px 0;font-size:12px;color:#6B7280;text-transform:uppercase;'
            'letter-spacing:1px;">Your Promo Code</p>',
            f'<p style="margin:0;font-size:24px;font-weight:700;color:{_ACCENT_COLOR};'
            "font-family:'Courier New',monospace;letter-spacing:2px;\">"
            f"{escape(promo_code)}</p>",
            "</div>",
            '<p style="margin:0 0 8px 0;"><strong>Your Discount:</strong> '
            f'<span style="color:#059669;font-weight:700;">{escape(discount_text)}</span></p>',
        ]
    )
    if min_purchase_text:
        parts.append(
            '<p style="margin:0 0 8px 0;"><strong>Min Purchase:</strong> '
            f'<span style="color:#7C3AED;font-weight:700;">{escape(min_purchase_text)}</span></p>'
        )
    parts.extend(
        [
            '<p style="margin:0 0 8px 0;"><strong>Valid Until:</strong> '
            f'<span style="color:#DC2626;font-weight:700;">{escape(valid_until)}</span></p>',
            "</div>",
            _render_button(cta_url, "Shop Now & Save Big"),
        ]
    )
    if usage_limit:
        parts.append(f'<p style="margin:0 0 16px 0;">Limited to {usage_limit} uses.</p>')
    parts.extend(
        [
            '<p style="margin:0 0 16px 0;">Cannot be combined with other offers. '
            "Terms and conditions apply.</p>",
            '<p style="font-size:12px;color:#6B7280;margin-top:24px;">'
            "If you didn't expect this promotion, you can safely ignore this email.</p>",
            "</div>",
        ]
    )
    return "".join(parts)


def render_notification_email(
    *,
    site_name: str,
    recipient_name: str | None,
    title: str,
    message: str,
    action_href: str | None,
    action_text: str | None,
) -> str:
    """Return the HTML body mirroring an in-app notification."""

    parts = [
        '<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #111827;">',
        f'<h2 style="color:#111827;margin-bottom:8px;">{escape(site_name)} - {escape(title)}</h2>',
        f'<p style="margin:0 0 12px 0;">Hi {escape(recipient_name or "")},</p>',
        f'<p style="margin:0 0 16px 0;">{escape(message)}</p>',
    ]
    if action_href:
        parts.append(_render_button(action_href, action_text or "View details"))
    parts.extend(
        [
            '<p style="font-size:12px;color:#6B7280;margin-top:24px;">'
            f"You are receiving this because you have an account on {escape(site_name)}.</p>",
            "</div>",
        ]
    )
    return "".join(parts)


def _render_button(href: str, label: str) -> str:
    return (
        '<p style="margin:0 0 16px 0;">'
        f'<a href="{escape(href, quote=True)}" style="display:inline-block;padding:10px 18px;'
        f"background:{_ACCENT_COLOR};color:#ffffff;text-decoration:none;border-radius:999px;"
        f'font-size:14px;">{escape(label)}</a></p>'
    )


__all__ = ["render_notification_email", "render_promotion_email", "send_email"]
