"""Tests for the email leg of a fan-out."""

from __future__ import annotations

from backoffice.application.use_cases.notifications import (
    EmailDispatch,
    build_email_renderer,
)
from backoffice.domain.entities import AudienceMember, NotificationDraft, NotificationKind


def _member(user_id: int, *, email: str | None = "", verified: bool = True) -> AudienceMember:
    return AudienceMember(
        user_id=user_id,
        name=f"User {user_id}",
        email=f"user{user_id}@example.com" if email == "" else email,
        verified=verified,
        is_active=True,
        room="global",
    )


def _render(member: AudienceMember) -> tuple[str, str]:
    return "Subject", f"<p>{member.name}</p>"


def test_only_verified_members_with_email_are_sent(email_sender):
    members = [_member(1), _member(2, verified=False), _member(3, email=None), _member(4)]

    sent = EmailDispatch(email_sender, max_workers=4).send(members, _render)

    assert sent == 2
    assert sorted(recipient for recipient, _ in email_sender.sent) == [
        "user1@example.com",
        "user4@example.com",
    ]


def test_failed_sends_are_excluded_from_count(email_sender):
    email_sender.failing = {"user2@example.com"}

    def exploding_sender(subject, html_content, recipient):
        if recipient == "user3@example.com":
            raise RuntimeError("smtp down")
        return email_sender(subject, html_content, recipient)

    sent = EmailDispatch(exploding_sender).send([_member(i) for i in range(1, 6)], _render)

    assert sent == 3


def test_no_eligible_members_sends_nothing(email_sender):
    assert EmailDispatch(email_sender).send([_member(1, verified=False)], _render) == 0
    assert email_sender.sent == []


def test_promotion_renderer_uses_promo_template():
    draft = NotificationDraft(
        title="New Promotion: Summer Sale",
        message="Use code SUMMER20 to get 20% off!",
        kind=NotificationKind.PROMOTION,
        metadata={
            "title": "Summer Sale",
            "promo_code": "SUMMER20",
            "discount_type": "percentage",
            "discount_value": 20,
            "min_purchase_amount": 50,
            "end_date": "2026-10-25T12:00:00+00:00",
            "usage_limit": 100,
        },
    )

    subject, html = build_email_renderer(
        draft, site_name="Sello", frontend_url="https://shop.example.com"
    )(_member(1))

    assert subject == "Exclusive Promotion: Summer Sale"
    assert "SUMMER20" in html
    assert "20% OFF" in html
    assert "$50" in html
    assert "Oct 25, 2026" in html


def test_generic_renderer_links_to_frontend():
    draft = NotificationDraft(
        title="Maintenance <tonight>",
        message="We will be offline.",
        action_url="/status",
        action_text="Details",
    )

    subject, html = build_email_renderer(
        draft, site_name="Sello", frontend_url="https://shop.example.com/"
    )(_member(1))

    assert subject == "Maintenance <tonight>"
    assert "https://shop.example.com/status" in html
    assert "&lt;tonight&gt;" in html
