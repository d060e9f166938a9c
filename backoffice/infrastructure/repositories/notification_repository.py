"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backoffice.domain.entities import Notification, NotificationKind
from backoffice.infrastructure.models import NotificationModel
from backoffice.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD and read-state operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        """Persist ``notifications`` in a single transaction."""

        models: list[NotificationModel] = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            models.append(model)
        if not models:
            return []
        self.session.add_all(models)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        for model in models:
            self.session.refresh(model)
        return [self._to_entity(model) for model in models]

    def delete(self, notification_id: int) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def list(
        self,
        *,
        kind: str | None = None,
        recipient_id: int | None = None,
        is_read: bool | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        query = self.session.query(NotificationModel)
        if kind:
            query = query.filter(NotificationModel.kind == kind)
        if recipient_id is not None:
            query = query.filter(NotificationModel.recipient_id == recipient_id)
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        total = query.count()
        models = (
            query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def list_for_user(
        self,
        user_id: int,
        *,
        is_read: bool | None = None,
        skip: int = 0,
        limit: int | None = 20,
    ) -> tuple[Sequence[Notification], int]:
        """Return personal and broadcast notifications visible to ``user_id``."""

        query = self._visible_to(user_id)
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        total = query.count()
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        notifications, _ = self.list_for_user(user_id, is_read=False, limit=limit)
        return notifications

    def count_unread_for_user(self, user_id: int) -> int:
        return (
            self._visible_to(user_id)
            .filter(NotificationModel.is_read.is_(False))
            .count()
        )

    def mark_read(self, notification_id: int, *, read_at: datetime) -> Notification:
        """Flip the read flag of one record, keeping the first read timestamp."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        if not model.is_read:
            model.is_read = True
            model.read_at = ensure_app_naive_datetime(read_at)
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        """Mark the given unread notifications visible to ``user_id`` as read."""

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self._visible_to(user_id)
            .filter(NotificationModel.id.in_(ids))
            .filter(NotificationModel.is_read.is_(False))
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        """Bulk flip every unread notification visible to ``user_id``."""

        updated = (
            self._visible_to(user_id)
            .filter(NotificationModel.is_read.is_(False))
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(read_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def _visible_to(self, user_id: int):
        return self.session.query(NotificationModel).filter(
            or_(
                NotificationModel.recipient_id == user_id,
                NotificationModel.recipient_id.is_(None),
            )
        )

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.recipient_id = notification.recipient_id
        model.target_role = notification.target_role
        model.kind = notification.kind.value
        model.title = notification.title
        model.message = notification.message
        model.action_url = notification.action_url
        model.action_text = notification.action_text
        model.is_read = notification.is_read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.payload = notification.metadata or {}
        model.created_by = notification.created_by

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            kind=NotificationKind(model.kind),
            recipient_id=model.recipient_id,
            target_role=model.target_role,
            action_url=model.action_url,
            action_text=model.action_text,
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            expires_at=ensure_app_timezone(model.expires_at),
            metadata=model.payload or {},
            created_by=model.created_by,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
