"""Persist notifications for a resolved audience."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from backoffice.application.ports import NotificationWriter
from backoffice.domain.entities import (
    AudienceMember,
    Notification,
    NotificationDraft,
    ResolvedAudience,
)
from backoffice.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


@dataclass
class FanoutResult:
    """Records created by a fan-out.

    ``intended`` is the number of records the audience called for, so a
    ``count`` below it signals partial delivery.
    """

    notifications: list[Notification] = field(default_factory=list)
    intended: int = 0

    @property
    def count(self) -> int:
        return len(self.notifications)

    @property
    def is_partial(self) -> bool:
        return self.count < self.intended

    @property
    def first(self) -> Notification | None:
        return self.notifications[0] if self.notifications else None


class NotificationFanout:
    """Write one notification per recipient, or one shared broadcast record."""

    def __init__(
        self, writer: NotificationWriter, *, batch_size: int = DEFAULT_BATCH_SIZE
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._writer = writer
        self._batch_size = batch_size

    def persist(self, draft: NotificationDraft, audience: ResolvedAudience) -> FanoutResult:
        """Create the notifications ``audience`` calls for.

        Individual write failures are logged and skipped; nothing already
        written is rolled back.
        """

        created_at = now_in_app_timezone()

        if audience.broadcast:
            record = draft.build(recipient_id=None, target_role=None, created_at=created_at)
            saved = self._write_one(record, context=audience.selector.describe())
            return FanoutResult(notifications=[saved] if saved else [], intended=1)

        if audience.selector.is_explicit:
            member = audience.members[0]
            record = draft.build(
                recipient_id=member.user_id, target_role=None, created_at=created_at
            )
            saved = self._write_one(record, context=f"user {member.user_id}")
            return FanoutResult(notifications=[saved] if saved else [], intended=1)

        recipients = [member for member in audience.members if member.is_active]
        result = FanoutResult(intended=len(recipients))
        for index, batch in enumerate(_chunks(recipients, self._batch_size)):
            records = [
                draft.build(
                    recipient_id=member.user_id,
                    target_role=audience.role,
                    created_at=created_at,
                )
                for member in batch
            ]
            result.notifications.extend(self._write_batch(index, batch, records))

        logger.info(
            "Fan-out '%s' to %s created %s of %s notifications",
            draft.title,
            audience.selector.describe(),
            result.count,
            result.intended,
        )
        return result

    def _write_batch(
        self,
        index: int,
        members: Sequence[AudienceMember],
        records: Sequence[Notification],
    ) -> list[Notification]:
        try:
            return list(self._writer.create_many(records))
        except Exception:
            logger.exception(
                "Notification batch %s (%s records) failed; retrying one by one",
                index,
                len(records),
            )

        saved: list[Notification] = []
        for member, record in zip(members, records):
            notification = self._write_one(record, context=f"user {member.user_id}")
            if notification is not None:
                saved.append(notification)
        return saved

    def _write_one(self, record: Notification, *, context: str) -> Notification | None:
        try:
            return self._writer.create(record)
        except Exception:
            logger.exception(
                "Failed to create notification '%s' for %s", record.title, context
            )
            return None


def _chunks(items: Sequence[AudienceMember], size: int) -> Iterator[Sequence[AudienceMember]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


__all__ = ["DEFAULT_BATCH_SIZE", "FanoutResult", "NotificationFanout"]
