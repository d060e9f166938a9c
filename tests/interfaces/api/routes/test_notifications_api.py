"""Integration tests for the notification endpoints and websocket."""

from __future__ import annotations

import logging

import pytest
from starlette.websockets import WebSocketDisconnect


@pytest.fixture()
def admin(make_user):
    return make_user("admin", email="admin@example.com")


@pytest.fixture()
def admin_headers(admin, login):
    return login(admin)


def _send(client, headers, **payload):
    return client.post("/notifications", json=payload, headers=headers)


def test_role_audience_gets_one_record_each(client, admin_headers, make_user, broadcaster, email_sender):
    dealers = [make_user("dealer") for _ in range(3)]
    make_user("dealer", is_active=False)
    make_user("individual")

    response = _send(
        client, admin_headers, title="Inventory", message="Update listings", target_audience="dealers"
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["count"] == 3
    assert body["intended"] == 3
    assert body["emails_sent"] == 4
    assert body["notification"]["target_role"] == "dealer"
    assert {recipient for recipient, _ in email_sender.sent} >= {d.email for d in dealers}
    assert broadcaster.channels() == ["role:dealer", "admin:room"]
    assert broadcaster.events[0][2]["title"] == "Inventory"


def test_explicit_recipient_by_email(client, admin_headers, make_user, broadcaster):
    shopper = make_user("individual", email="ana@example.com")

    body = _send(
        client, admin_headers, title="Hi", message="Your order shipped", recipient="ANA@example.com"
    ).json()

    assert body["count"] == 1
    assert body["notification"]["recipient_id"] == shopper.id
    assert broadcaster.channels()[0] == f"user:{shopper.id}"


def test_default_audience_is_a_single_broadcast(client, admin_headers, make_user, broadcaster, email_sender):
    make_user("individual")
    make_user("dealer", verified=False)

    body = _send(client, admin_headers, title="Sale", message="Everything 10% off", type="success").json()

    assert body["count"] == 1
    assert body["notification"]["recipient_id"] is None
    assert body["notification"]["type"] == "success"
    assert body["emails_sent"] == 2
    assert broadcaster.events[1][2]["total_recipients"] == "all"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"title": "", "message": "x"}, "Title and message are required."),
        ({"title": "x", "message": "y", "target_audience": "dealers"},
         'No active users found with role "dealer" to send notifications to.'),
        ({"title": "x", "message": "y", "recipient": "ghost@example.com"},
         'User with email "ghost@example.com" not found.'),
        ({"title": "x", "message": "y", "target_audience": "martians"},
         'Invalid target audience "martians".'),
    ],
)
def test_create_rejects_bad_requests(client, admin_headers, broadcaster, payload, message):
    response = _send(client, admin_headers, **payload)

    assert response.status_code == 400
    assert response.json()["detail"] == message
    assert broadcaster.events == []


def test_only_admins_send(client, make_user, login):
    headers = login(make_user("dealer"))

    assert _send(client, headers, title="x", message="y").status_code == 403


def test_me_read_and_read_all(client, admin_headers, make_user, login):
    shopper = make_user("individual")
    other = make_user("individual")
    headers = login(shopper)
    personal = _send(client, admin_headers, title="Personal", message="m", recipient=shopper.id).json()
    _send(client, admin_headers, title="Everyone", message="m")
    foreign = _send(client, admin_headers, title="Other", message="m", recipient=other.id).json()

    mine = client.get("/notifications/me", headers=headers).json()
    assert {n["title"] for n in mine["notifications"]} == {"Personal", "Everyone"}
    assert mine["unread_count"] == 2
    assert mine["pagination"]["total"] == 2

    read = client.put(f"/notifications/{personal['notification']['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True

    denied = client.put(f"/notifications/{foreign['notification']['id']}/read", headers=headers)
    assert denied.status_code == 403
    assert denied.json()["detail"] == "You don't have access to this notification."
    assert client.put("/notifications/999/read", headers=headers).status_code == 404

    assert client.put("/notifications/read-all", headers=headers).json() == {"updated": 1}
    unread = client.get("/notifications/me", params={"is_read": False}, headers=headers).json()
    assert unread["unread_count"] == 0
    assert unread["notifications"] == []


def test_admin_listing_filters(client, admin_headers, make_user):
    shopper = make_user("individual")
    _send(client, admin_headers, title="A", message="m", recipient=shopper.id, type="warning")
    _send(client, admin_headers, title="B", message="m")

    warnings = client.get("/notifications", params={"type": "warning"}, headers=admin_headers).json()
    for_shopper = client.get(
        "/notifications", params={"recipient": shopper.id}, headers=admin_headers
    ).json()

    assert [n["title"] for n in warnings["notifications"]] == ["A"]
    assert [n["title"] for n in for_shopper["notifications"]] == ["A"]
    assert warnings["pagination"]["pages"] == 1


def test_delete_notification(client, admin_headers):
    created = _send(client, admin_headers, title="Temp", message="m").json()
    notification_id = created["notification"]["id"]

    assert client.delete(f"/notifications/{notification_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/notifications/{notification_id}", headers=admin_headers).status_code == 404


def test_websocket_init_ping_and_ack(client, admin_headers, make_user, login, caplog):
    caplog.set_level(logging.INFO, logger="backoffice.interfaces.api.routes.notifications")
    shopper = make_user("individual")
    created = _send(client, admin_headers, title="Hello", message="m", recipient=shopper.id).json()
    token = login(shopper)["Authorization"].split()[1]

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert init["unread_count"] == 1
        assert [n["title"] for n in init["data"]] == ["Hello"]
        assert f"(1 open on user:{shopper.id})" in caplog.text

        websocket.send_json({"type": "ack", "ids": [created["notification"]["id"]]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    mine = client.get("/notifications/me", headers=login(shopper)).json()
    assert mine["unread_count"] == 0


def test_websocket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws?token=garbage") as websocket:
            websocket.receive_json()
