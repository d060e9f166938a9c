"""Tests for per-user read state over personal and broadcast notifications."""

from __future__ import annotations

import pytest

from backoffice.application.use_cases.notifications import (
    count_unread_notifications,
    list_user_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from backoffice.domain.entities import NotificationDraft
from backoffice.domain.exceptions import NotFoundError, PermissionDeniedError
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.utils import now_in_app_timezone


def _store(session, *, recipient_id, title="Note", is_read=False):
    record = NotificationDraft(title=title, message="Body").build(
        recipient_id=recipient_id, target_role=None, created_at=now_in_app_timezone()
    )
    record.is_read = is_read
    if is_read:
        record.read_at = now_in_app_timezone()
    return NotificationRepository(session).create(record)


def test_mark_all_read_flips_personal_and_broadcast(db_session, make_user):
    user = make_user()
    other = make_user()
    for _ in range(3):
        _store(db_session, recipient_id=user.id)
    for _ in range(2):
        _store(db_session, recipient_id=None)
    already_read = _store(db_session, recipient_id=user.id, is_read=True)
    foreign = _store(db_session, recipient_id=other.id)

    assert count_unread_notifications(db_session, user=user) == 5

    updated = mark_all_notifications_read(db_session, user=user)

    assert updated == 5
    assert count_unread_notifications(db_session, user=user) == 0
    db_session.expire_all()
    repository = NotificationRepository(db_session)
    assert repository.get(already_read.id).read_at == already_read.read_at
    assert repository.get(foreign.id).is_read is False


def test_mark_one_read_keeps_first_timestamp(db_session, make_user):
    user = make_user()
    notification = _store(db_session, recipient_id=user.id)

    first = mark_notification_read(db_session, notification.id, user=user)
    second = mark_notification_read(db_session, notification.id, user=user)

    assert first.is_read is True
    assert second.read_at == first.read_at


def test_broadcast_can_be_marked_by_any_user(db_session, make_user):
    user = make_user()
    broadcast = _store(db_session, recipient_id=None)

    assert mark_notification_read(db_session, broadcast.id, user=user).is_read is True


def test_foreign_notification_is_forbidden(db_session, make_user):
    owner = make_user()
    intruder = make_user()
    notification = _store(db_session, recipient_id=owner.id)

    with pytest.raises(PermissionDeniedError):
        mark_notification_read(db_session, notification.id, user=intruder)


def test_missing_notification_is_not_found(db_session, make_user):
    with pytest.raises(NotFoundError):
        mark_notification_read(db_session, 999, user=make_user())


def test_user_listing_includes_broadcasts_and_unread_count(db_session, make_user):
    user = make_user()
    other = make_user()
    _store(db_session, recipient_id=user.id, title="Mine")
    _store(db_session, recipient_id=None, title="Everyone")
    _store(db_session, recipient_id=other.id, title="Theirs")

    page = list_user_notifications(db_session, user=user)

    assert {n.title for n in page.notifications} == {"Mine", "Everyone"}
    assert page.total == 2
    assert page.unread_count == 2
