"""Use case for creating users."""

from sqlalchemy.orm import Session

from backoffice.domain.entities import ROLE_ADMIN, ROLE_DEALER, ROLE_INDIVIDUAL, User
from backoffice.domain.exceptions import ConflictError, ValidationError
from backoffice.infrastructure.repositories import RoleRepository, UserRepository
from backoffice.infrastructure.security import get_password_hash
from backoffice.utils import now_in_app_naive_datetime

_ROLE_NAMES = {
    ROLE_INDIVIDUAL: "Individual",
    ROLE_DEALER: "Dealer",
    ROLE_ADMIN: "Administrator",
}


def create_user(
    session: Session,
    *,
    name: str,
    role_alias: str,
    password: str,
    email: str | None = None,
    verified: bool = False,
    is_active: bool = True,
) -> User:
    """Create a marketplace account, bootstrapping its role when needed."""

    alias = role_alias.strip().lower()
    if alias not in _ROLE_NAMES:
        raise ValidationError(f'Unknown role "{role_alias}".')

    repository = UserRepository(session)
    if email and repository.get_by_email(email):
        raise ConflictError("Email address is already registered.")

    role = RoleRepository(session).get_or_create(alias, _ROLE_NAMES[alias])
    user = User(
        id=None,
        role=role,
        name=name,
        email=email.strip().lower() if email else None,
        password=get_password_hash(password),
        verified=verified,
        is_active=is_active,
        deleted=False,
        created_at=now_in_app_naive_datetime(),
    )
    return repository.create(user)
