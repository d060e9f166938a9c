"""Audience resolution for promotion and notification fan-outs."""

from .resolve_audience import DEFAULT_MEMBER_LIMIT, parse_recipient, resolve_audience

__all__ = ["DEFAULT_MEMBER_LIMIT", "parse_recipient", "resolve_audience"]
