"""Tests for the scan, favorites, chat, weather and push endpoints."""

from __future__ import annotations

import base64

SAMPLE_PLANT = {
    "name": "Monstera",
    "scientific_name": "Monstera deliciosa",
    "description": "Split-leaf philodendron",
    "care_guide": {
        "water": "Weekly",
        "sunlight": "Bright indirect",
        "soil": "Chunky aroid mix",
        "temperature": "18-27°C",
    },
    "fun_facts": ["Its fruit is edible when ripe"],
}


def test_identify_uploaded_image(client, auth_headers, png_bytes):
    response = client.post(
        "/scan/identify",
        files={"file": ("leaf.png", png_bytes, "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["plant"]["name"] == "Sample Plant"
    assert body["image"]["content_type"] == "image/jpeg"
    assert base64.b64decode(body["image"]["data"])[:2] == b"\xff\xd8"


def test_identify_rejects_files_that_are_not_images(client, auth_headers):
    response = client.post(
        "/scan/identify",
        files={"file": ("notes.txt", b"not an image", "text/plain")},
        headers=auth_headers,
    )

    assert response.status_code == 422


def test_browser_capture_flow(client, services, auth_headers, png_bytes):
    assert client.post("/scan/capture/photo", headers=auth_headers).status_code == 409

    started = client.post("/scan/capture/start", headers=auth_headers)
    assert started.json() == {"backend": "browser", "streaming": True}

    missing_frame = client.post("/scan/capture/photo", headers=auth_headers)
    assert missing_frame.status_code == 409
    assert missing_frame.json()["detail"] == "No frame received from the camera yet"

    frame = client.post(
        "/scan/capture/frame",
        files={"file": ("frame.png", png_bytes, "image/png")},
        headers=auth_headers,
    )
    assert frame.status_code == 200

    photo = client.post("/scan/capture/photo", headers=auth_headers)
    assert photo.status_code == 200
    assert photo.json()["plant"]["name"] == "Sample Plant"

    stopped = client.post("/scan/capture/stop", headers=auth_headers)
    assert stopped.json()["streaming"] is False


def test_favorites_round_trip_announces_the_plant(client, auth_headers):
    image = base64.b64encode(b"\xff\xd8jpeg").decode()

    created = client.post(
        "/favorites/",
        json={"plant": SAMPLE_PLANT, "image": f"data:image/jpeg;base64,{image}"},
        headers=auth_headers,
    )

    assert created.status_code == 201
    favorite = created.json()
    assert favorite["name"] == "Monstera"
    assert favorite["image"].endswith(image)

    listed = client.get("/favorites/", headers=auth_headers).json()
    assert [item["id"] for item in listed] == [favorite["id"]]

    notifications = client.get(
        "/notifications/", params={"category": "plant"}, headers=auth_headers
    ).json()["notifications"]
    assert notifications[0]["title"] == "Plant Saved"
    assert notifications[0]["message"] == "Monstera has been added to your favorites"

    assert client.delete(f"/favorites/{favorite['id']}", headers=auth_headers).status_code == 204
    assert client.delete(f"/favorites/{favorite['id']}", headers=auth_headers).status_code == 404
    assert client.get("/favorites/", headers=auth_headers).json() == []


def test_favorite_with_invalid_image_is_rejected(client, auth_headers):
    response = client.post(
        "/favorites/", json={"plant": SAMPLE_PLANT, "image": "***"}, headers=auth_headers
    )

    assert response.status_code == 422


def test_chat_uses_canned_answers_without_a_key(client, auth_headers):
    response = client.post(
        "/chat/message", json={"message": "How often should I water?"}, headers=auth_headers
    )

    body = response.json()
    assert body["from_fallback"] is True
    assert "water" in body["reply"].lower()
    assert [turn["role"] for turn in body["history"]] == ["user", "assistant"]

    status = client.get("/chat/status", headers=auth_headers).json()
    assert status["configured"] is False
    assert client.get("/chat/models", headers=auth_headers).status_code == 503


def test_chat_model_can_be_switched(client, auth_headers):
    response = client.put(
        "/chat/model", json={"model": "mistralai/mistral-7b-instruct"}, headers=auth_headers
    )

    assert response.json()["model"] == "mistralai/mistral-7b-instruct"


def test_manual_location_emits_a_weather_update(client, auth_headers):
    response = client.put(
        "/weather/location", json={"latitude": 48.8566, "longitude": 2.3522}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["latitude"] == 48.8566
    assert body["weather"]["temperature"] == 22
    assert body["weather"]["icon"] == "☀️"
    assert body["weather"]["dedupe_key"].endswith("-48.86-2.35")

    weather = client.get(
        "/notifications/", params={"category": "weather"}, headers=auth_headers
    ).json()["notifications"]
    assert any(item["key"] == body["weather"]["dedupe_key"] for item in weather)


def test_device_location_is_accepted(client, services, auth_headers):
    response = client.post(
        "/weather/device-location",
        json={"latitude": 51.5, "longitude": -0.12},
        headers=auth_headers,
    )

    assert response.status_code == 202
    assert services.location_provider._fresh_position() is not None


def test_push_token_and_foreground_messages(client, auth_headers):
    registered = client.post(
        "/push/token", json={"token": "device-token-123"}, headers=auth_headers
    )

    assert registered.json() == {"configured": True, "initialized": True, "has_token": True}

    delivered = client.post(
        "/push/messages",
        json={"title": "Water reminder", "body": "Time to water the fern", "category": "plant"},
        headers=auth_headers,
    )
    assert delivered.json() == {"delivered": 1}

    notifications = client.get(
        "/notifications/", params={"category": "plant"}, headers=auth_headers
    ).json()["notifications"]
    assert notifications[0]["type"] == "push"
    assert notifications[0]["icon"] == "🔔"


def test_push_permission_denied_by_the_device(client, auth_headers):
    response = client.post(
        "/push/token", json={"permission_granted": False}, headers=auth_headers
    )

    assert response.json() == {"configured": True, "initialized": False, "has_token": False}
    permission = client.post("/notifications/push-permission", headers=auth_headers)
    assert permission.json() == {"granted": False}
