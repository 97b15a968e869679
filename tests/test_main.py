"""Tests for the application bootstrap: root, health, static files, lifespan."""

import threading
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from src.fridge_fusion.config import PROFILE_UPLOAD_DIR
from src.fridge_fusion.main import app

client = TestClient(app)


# ──────────────────────────────────────────────
# Root & health
# ──────────────────────────────────────────────
def test_root_is_plain_text() -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Fridge Fusion API is running"
    assert response.headers["content-type"].startswith("text/plain")


def test_health_without_database() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "degraded"}


def test_health_with_database() -> None:
    app.state.database = MagicMock(is_connected=True)
    try:
        response = client.get("/health")
    finally:
        del app.state.database
    assert response.json() == {"status": "ok", "database": "connected"}


# ──────────────────────────────────────────────
# Static uploads
# ──────────────────────────────────────────────
def test_uploaded_image_is_served(auth_headers) -> None:
    content = b"\x89PNG\r\n\x1a\nfake"
    response = client.post(
        "/api/upload/profile-image",
        headers=auth_headers,
        files={"image": ("avatar.png", content, "image/png")},
    )
    assert response.status_code == 200
    file_url = response.json()["fileUrl"]

    try:
        served = client.get(file_url)
        assert served.status_code == 200
        assert served.content == content
    finally:
        (PROFILE_UPLOAD_DIR / file_url.rsplit("/", 1)[-1]).unlink(missing_ok=True)


def test_missing_upload_is_404() -> None:
    response = client.get("/uploads/profiles/profile-nobody-0-0.png")
    assert response.status_code == 404


# ──────────────────────────────────────────────
# Lifespan
# ──────────────────────────────────────────────
@patch("src.fridge_fusion.main.Database")
def test_lifespan_keeps_running_without_database(mock_database: MagicMock) -> None:
    attempted = threading.Event()
    instance = mock_database.return_value
    instance.connect.side_effect = lambda: attempted.set() or False
    instance.is_connected = False

    with TestClient(app) as lifespan_client:
        assert attempted.wait(timeout=5)
        response = lifespan_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "degraded"

    instance.connect.assert_called_once()
    instance.close.assert_called_once()
    del app.state.database


@patch("src.fridge_fusion.main.Database")
def test_requests_are_served_while_database_connects(mock_database: MagicMock) -> None:
    started = threading.Event()
    release = threading.Event()

    def slow_connect() -> bool:
        started.set()
        release.wait(timeout=10)
        return False

    instance = mock_database.return_value
    instance.connect.side_effect = slow_connect
    instance.is_connected = False

    try:
        with TestClient(app) as lifespan_client:
            assert started.wait(timeout=5)
            response = lifespan_client.get("/")
            assert response.status_code == 200
            assert response.text == "Fridge Fusion API is running"
            assert instance.connect.call_count == 1
            release.set()
    finally:
        release.set()

    instance.close.assert_called_once()
    del app.state.database


# ──────────────────────────────────────────────
# CORS
# ──────────────────────────────────────────────
def test_cors_preflight_allows_any_origin_without_credentials() -> None:
    response = client.options(
        "/api/upload/profile-image",
        headers={
            "Origin": "https://elsewhere.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-credentials" not in response.headers


def test_http_errors_use_message_body() -> None:
    response = client.get("/uploads/profiles/profile-nobody-0-0.png")
    assert response.json() == {"message": "Not Found"}
