"""FastAPI dependency utilities."""

from hashlib import sha256

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.notifications import FanoutOptions
from backoffice.config import get_settings
from backoffice.domain.entities import User
from backoffice.infrastructure.database import get_db
from backoffice.infrastructure.email import send_email
from backoffice.infrastructure.repositories import UserRepository
from backoffice.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def password_signature(user: User) -> str:
    """Fingerprint embedded in tokens so password or status changes revoke them."""

    return sha256(f"{user.password}:{int(user.is_active)}".encode()).hexdigest()


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    email = payload.get("sub")
    signature = payload.get("pwd_sig")
    if not isinstance(email, str) or not isinstance(signature, str):
        raise _credentials_error()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("User not found")
    if signature != password_signature(user):
        raise _credentials_error()
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can perform this action.",
        )
    return current_user


def get_broadcaster(request: Request) -> BroadcastPort | None:
    """Return the realtime broadcaster wired at startup, if any."""

    return getattr(request.app.state, "broadcaster", None)


def get_email_sender() -> EmailSender:
    return send_email


def get_fanout_options() -> FanoutOptions:
    return FanoutOptions.from_settings(get_settings())
