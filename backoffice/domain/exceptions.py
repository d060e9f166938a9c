"""Exceptions raised by use cases and translated into HTTP errors by the API."""

from __future__ import annotations


class ValidationError(ValueError):
    """The request is malformed or violates a business rule."""


class NotFoundError(LookupError):
    """The requested resource does not exist."""


class ConflictError(ValueError):
    """The request collides with existing state, e.g. a duplicated promo code."""


class PermissionDeniedError(PermissionError):
    """The acting user is not allowed to touch the resource."""


__all__ = [
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
]
