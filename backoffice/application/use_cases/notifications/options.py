"""Tunables shared by the fan-out stages."""

from __future__ import annotations

from dataclasses import dataclass

from backoffice.config import Settings


@dataclass(frozen=True)
class FanoutOptions:
    batch_size: int = 100
    audience_limit: int = 1000
    email_enabled: bool = False
    email_max_workers: int = 8
    site_name: str = "Sello"
    frontend_url: str = "http://localhost:5173"

    @classmethod
    def from_settings(cls, settings: Settings) -> "FanoutOptions":
        return cls(
            batch_size=settings.notification_batch_size,
            audience_limit=settings.audience_member_limit,
            email_enabled=settings.email_notifications_enabled,
            email_max_workers=settings.email_max_workers,
            site_name=settings.site_name,
            frontend_url=settings.frontend_url,
        )


__all__ = ["FanoutOptions"]
