"""Tests for the notification endpoints and websocket."""

from __future__ import annotations


def _plant_notifications(client, headers):
    response = client.get("/notifications/", params={"category": "plant"}, headers=headers)
    assert response.status_code == 200
    return response.json()["notifications"]


def test_keyed_notifications_are_stored_once(client, auth_headers):
    payload = {
        "type": "in-app",
        "category": "plant",
        "title": "Watering",
        "message": "Water the fern",
        "key": "water-fern",
    }

    first = client.post("/notifications/", json=payload, headers=auth_headers)
    second = client.post(
        "/notifications/", json={**payload, "message": "Water it again"}, headers=auth_headers
    )

    assert first.status_code == 200
    assert first.json()["icon"] == "🌿"
    assert second.json() is None
    assert [item["message"] for item in _plant_notifications(client, auth_headers)] == [
        "Water the fern"
    ]


def test_toasts_are_not_stored(client, auth_headers):
    response = client.post(
        "/notifications/",
        json={"type": "toast", "category": "plant", "title": "Hi", "message": "Shown once"},
        headers=auth_headers,
    )

    assert response.json() is None
    assert _plant_notifications(client, auth_headers) == []


def test_invalid_notification_is_rejected(client, auth_headers):
    response = client.post(
        "/notifications/",
        json={"type": "in-app", "category": "plant", "title": "Hi", "message": ""},
        headers=auth_headers,
    )

    assert response.status_code == 422


def test_mark_read_and_read_all(client, auth_headers):
    ids = []
    for title in ("First", "Second"):
        response = client.post(
            "/notifications/",
            json={"type": "in-app", "category": "plant", "title": title, "message": title},
            headers=auth_headers,
        )
        ids.append(response.json()["id"])

    response = client.post(f"/notifications/{ids[0]}/read", headers=auth_headers)
    read_flags = {item["id"]: item["read"] for item in response.json()["notifications"]}
    assert read_flags[ids[0]] is True
    assert read_flags[ids[1]] is False

    unchanged = client.post("/notifications/999999/read", headers=auth_headers)
    assert unchanged.status_code == 200

    response = client.post("/notifications/read-all", headers=auth_headers)
    assert response.json()["unread_count"] == 0
    assert all(item["read"] for item in response.json()["notifications"])


def test_push_permission_follows_the_vapid_key(client, auth_headers):
    response = client.post("/notifications/push-permission", headers=auth_headers)

    assert response.json() == {"granted": True}


def test_websocket_sends_the_list_and_answers_pings(client, auth_headers):
    client.post(
        "/notifications/",
        json={"type": "in-app", "category": "plant", "title": "Hello", "message": "Hello"},
        headers=auth_headers,
    )
    token = auth_headers["Authorization"].split()[1]

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        first = websocket.receive_json()
        assert first["type"] == "notifications"
        assert "Hello" in [item["title"] for item in first["data"]]

        websocket.send_json({"type": "ping"})
        for _ in range(10):
            message = websocket.receive_json()
            if message["type"] == "pong":
                break
        else:
            raise AssertionError("pong not received")
