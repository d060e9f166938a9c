"""Unit tests for the SendGrid email helper utilities."""

from __future__ import annotations

import json
import types

import pytest

from backoffice.infrastructure import email as email_module


class DummySettings:
    sendgrid_api_key = "SG.fake"
    sendgrid_sender = "sender@example.com"


class _StubSendGridAPIClient:
    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        return types.SimpleNamespace(status_code=202, body=None)


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """When SendGrid settings are missing the helper should exit early."""

    class UnconfiguredSettings:
        sendgrid_api_key = None
        sendgrid_sender = None

    monkeypatch.setattr(email_module, "get_settings", lambda: UnconfiguredSettings())

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is False


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridAPIClient)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is True


def test_send_email_rejects_non_2xx(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    class RejectingClient(_StubSendGridAPIClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=400, body=b'{"errors": [{"message": "bad to"}]}')

    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", RejectingClient)

    with caplog.at_level("ERROR"):
        assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is False
    assert "bad to" in caplog.text


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog):
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {
                "errors": [
                    {
                        "message": "The provided authorization grant is invalid.",
                        "help": "https://sendgrid.com/docs/for-developers/sending-email/authentication/",
                    }
                ]
            }
        ).encode()

    class FailingClient(_StubSendGridAPIClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_promotion_email_escapes_user_content() -> None:
    html = email_module.render_promotion_email(
        recipient_name="<b>Ana</b>",
        title="Summer Sale",
        description=None,
        promo_code="SUMMER20",
        discount_text="$15 OFF",
        min_purchase_text=None,
        valid_until="Oct 25, 2026",
        usage_limit=None,
        cta_url="https://shop.example.com",
    )

    assert "&lt;b&gt;Ana&lt;/b&gt;" in html
    assert "Min Purchase" not in html
    assert "Limited to" not in html
