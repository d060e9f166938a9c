"""Helper utilities shared across API route handlers."""

from math import ceil

from fastapi import HTTPException, status

from backoffice.domain.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate a domain exception raised by a use case into an HTTP error."""

    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, PermissionDeniedError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    detail = exc.args[0] if exc.args else str(exc)
    return HTTPException(status_code=status_code, detail=detail)


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    return ceil(total / limit) if limit else 0
