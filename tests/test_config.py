"""Tests for environment driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from backoffice.config import Settings


def test_sendgrid_settings_must_come_in_pairs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENDGRID_API_KEY", "SG.fake")

    with pytest.raises(ValidationError):
        Settings()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "Development")

    settings = Settings()

    assert settings.is_development is True
    assert settings.audience_member_limit == 1000
    assert settings.notification_batch_size == 100
    assert settings.email_notifications_enabled is False
