"""Tests for the notification fan-out engine."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from backoffice.application.use_cases.notifications import NotificationFanout
from backoffice.domain.entities import (
    AudienceKind,
    AudienceMember,
    AudienceSelector,
    Notification,
    NotificationDraft,
    ResolvedAudience,
)


class FakeWriter:
    """In-memory notification writer.

    Batches containing a recipient listed in ``poisoned`` fail as a whole, and
    single writes for those recipients fail too.
    """

    def __init__(self, poisoned: set[int] | None = None) -> None:
        self.poisoned = poisoned or set()
        self.saved: list[Notification] = []
        self.batch_calls = 0

    def _save(self, notification: Notification) -> Notification:
        notification.id = len(self.saved) + 1
        self.saved.append(notification)
        return notification

    def create(self, notification: Notification) -> Notification:
        if notification.recipient_id in self.poisoned:
            raise RuntimeError("write failed")
        return self._save(notification)

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        self.batch_calls += 1
        if any(n.recipient_id in self.poisoned for n in notifications):
            raise RuntimeError("batch failed")
        return [self._save(n) for n in notifications]


def _members(count: int, *, inactive: frozenset[int] = frozenset()) -> list[AudienceMember]:
    return [
        AudienceMember(
            user_id=i,
            name=f"User {i}",
            email=f"user{i}@example.com",
            verified=True,
            is_active=i not in inactive,
            room="role:individual",
        )
        for i in range(1, count + 1)
    ]


def _role_audience(members) -> ResolvedAudience:
    return ResolvedAudience(
        selector=AudienceSelector(kind=AudienceKind.BUYERS),
        broadcast=False,
        role="individual",
        members=members,
    )


DRAFT = NotificationDraft(title="Hello", message="World")


def test_one_record_per_member_in_batches():
    writer = FakeWriter()

    result = NotificationFanout(writer, batch_size=100).persist(
        DRAFT, _role_audience(_members(250))
    )

    assert result.count == 250
    assert result.intended == 250
    assert writer.batch_calls == 3
    assert {n.recipient_id for n in result.notifications} == set(range(1, 251))
    assert all(n.target_role == "individual" for n in result.notifications)


def test_single_failing_write_is_isolated():
    writer = FakeWriter(poisoned={137})

    result = NotificationFanout(writer, batch_size=100).persist(
        DRAFT, _role_audience(_members(250))
    )

    assert result.count == 249
    assert result.is_partial is True
    assert 137 not in {n.recipient_id for n in result.notifications}


def test_inactive_members_get_no_record():
    result = NotificationFanout(FakeWriter()).persist(
        DRAFT, _role_audience(_members(5, inactive={2, 4}))
    )

    assert sorted(n.recipient_id for n in result.notifications) == [1, 3, 5]


def test_broadcast_creates_single_shared_record():
    audience = ResolvedAudience(
        selector=AudienceSelector(kind=AudienceKind.ALL),
        broadcast=True,
        role=None,
        members=_members(40),
    )

    result = NotificationFanout(FakeWriter()).persist(DRAFT, audience)

    assert result.count == 1
    assert result.first.recipient_id is None
    assert result.first.is_broadcast


def test_explicit_recipient_creates_single_record():
    member = _members(1)[0]
    audience = ResolvedAudience(
        selector=AudienceSelector(recipient=member.user_id),
        broadcast=False,
        role="individual",
        members=[member],
    )

    result = NotificationFanout(FakeWriter()).persist(DRAFT, audience)

    assert [n.recipient_id for n in result.notifications] == [member.user_id]
    assert result.first.target_role is None


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        NotificationFanout(FakeWriter(), batch_size=0)
