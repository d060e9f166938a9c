"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from backoffice.domain.entities import Role, User
from backoffice.infrastructure.models import RoleModel, UserModel


class UserRepository:
    """Provide read and create operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter(UserModel.deleted.is_(False))
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            role_id=user.role.id,
            name=user.name,
            email=user.email,
            password=user.password,
            verified=user.verified,
            is_active=user.is_active,
            deleted=user.deleted,
        )
        if user.created_at is not None:
            model.created_at = user.created_at
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        if model.role is None:
            self.session.refresh(model, attribute_names=["role"])
        return self._to_entity(model)

    def list_for_audience(
        self, role_alias: str | None, *, limit: int
    ) -> Sequence[User]:
        """Return non-deleted users holding ``role_alias`` (any role when ``None``)."""

        query = (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter(UserModel.deleted.is_(False))
        )
        if role_alias is not None:
            query = query.join(RoleModel, UserModel.role_id == RoleModel.id).filter(
                RoleModel.alias.ilike(role_alias)
            )
        query = query.order_by(UserModel.id.asc()).limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def _get_model(self, include_deleted: bool = False, **filters) -> UserModel | None:
        query = self.session.query(UserModel).options(joinedload(UserModel.role))
        if not include_deleted:
            query = query.filter(UserModel.deleted.is_(False))
        return query.filter_by(**filters).first()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            role=UserRepository._role_to_entity(model.role),
            name=model.name,
            email=model.email,
            password=model.password,
            verified=model.verified,
            is_active=model.is_active,
            deleted=model.deleted,
            created_at=model.created_at,
        )

    @staticmethod
    def _role_to_entity(model_role) -> Role:
        if model_role is None:
            msg = "User role is not set"
            raise ValueError(msg)
        return Role(id=model_role.id, name=model_role.name, alias=model_role.alias)


__all__ = ["UserRepository"]
