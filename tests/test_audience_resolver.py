"""Tests for turning audience selectors into recipients."""

from __future__ import annotations

import pytest

from backoffice.application.use_cases.audience import parse_recipient, resolve_audience
from backoffice.domain.entities import (
    ADMIN_CHANNEL,
    AudienceKind,
    AudienceSelector,
    GLOBAL_CHANNEL,
    role_for_audience,
)
from backoffice.domain.exceptions import ValidationError


@pytest.mark.parametrize(
    ("kind", "role"),
    [
        (AudienceKind.ALL, None),
        (AudienceKind.BUYERS, "individual"),
        (AudienceKind.SELLERS, "individual"),
        (AudienceKind.DEALERS, "dealer"),
        (AudienceKind.ADMINS, "admin"),
    ],
)
def test_role_mapping(kind, role):
    assert role_for_audience(kind) == role


def test_selector_requires_exactly_one_target():
    with pytest.raises(ValueError):
        AudienceSelector()
    with pytest.raises(ValueError):
        AudienceSelector(kind=AudienceKind.ALL, recipient=3)


def test_role_audience_lists_only_that_role(db_session, make_user):
    dealer_a = make_user("dealer")
    make_user("individual")
    dealer_b = make_user("dealer", verified=False)
    make_user("dealer", deleted=True)

    audience = resolve_audience(db_session, AudienceSelector(kind=AudienceKind.DEALERS))

    assert audience.broadcast is False
    assert audience.role == "dealer"
    assert [m.user_id for m in audience.members] == [dealer_a.id, dealer_b.id]
    assert {m.room for m in audience.members} == {"role:dealer"}
    assert audience.channel == "role:dealer"
    assert audience.channel != ADMIN_CHANNEL


def test_all_audience_is_a_broadcast_with_members(db_session, make_user):
    make_user("dealer")
    make_user("individual")

    audience = resolve_audience(db_session, AudienceSelector(kind=AudienceKind.ALL))

    assert audience.broadcast is True
    assert audience.size == 2
    assert audience.channel == GLOBAL_CHANNEL


def test_audience_is_truncated_at_limit(db_session, make_user):
    for _ in range(4):
        make_user("individual")

    audience = resolve_audience(
        db_session, AudienceSelector(kind=AudienceKind.BUYERS), limit=3
    )

    assert audience.size == 3
    assert audience.truncated is True


def test_recipient_by_email_and_id(db_session, make_user):
    user = make_user("individual", email="Shopper@Example.com")

    by_email = resolve_audience(db_session, AudienceSelector(recipient="shopper@example.com"))
    by_id = resolve_audience(db_session, AudienceSelector(recipient=str(user.id)))

    assert by_email.members[0].user_id == user.id
    assert by_id.members[0].user_id == user.id
    assert by_email.channel == f"user:{user.id}"


def test_unknown_recipient_email_is_rejected(db_session):
    with pytest.raises(ValidationError, match='User with email "ghost@example.com" not found.'):
        resolve_audience(db_session, AudienceSelector(recipient="ghost@example.com"))


def test_parse_recipient_rejects_garbage():
    assert parse_recipient(" 12 ") == 12
    assert parse_recipient("A@B.com") == "a@b.com"
    with pytest.raises(ValidationError):
        parse_recipient("nobody")
