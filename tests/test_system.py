"""Tests for GET /health, GET /robots.txt, the SPA fallback, the catch-alls and the entry point."""

import runpy
import time
from unittest.mock import patch


def test_health(client):
    before = int(time.time() * 1000)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "VoxVerify"
    assert data["timestamp"] >= before


def test_robots_txt(client):
    response = client.get("/robots.txt")
    assert response.status_code == 200
    assert "User-agent: *" in response.text
    assert "Disallow: /" in response.text


def test_root_serves_spa_entry(client, static_dir):
    response = client.get("/")
    assert response.status_code == 200
    assert "<title>VoxVerify</title>" in response.text


def test_unknown_path_falls_back_to_spa_entry(client, static_dir):
    response = client.get("/results/123")
    assert response.status_code == 200
    assert "<title>VoxVerify</title>" in response.text


def test_existing_asset_is_served(client, static_dir):
    response = client.get("/assets/app.js")
    assert response.status_code == 200
    assert "console.log('vox');" in response.text


def test_path_traversal_falls_back_to_spa_entry(client, static_dir):
    (static_dir.parent / "secret.txt").write_text("top secret")
    response = client.get("/..%2Fsecret.txt")
    assert response.status_code == 200
    assert "top secret" not in response.text


def test_missing_static_dir_returns_404(client, tmp_path, monkeypatch):
    from voxverify.config import settings

    monkeypatch.setattr(settings, "static_dir", str(tmp_path / "missing"))
    response = client.get("/")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_bundled_ui_is_served_by_default(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "VoxVerify" in response.text


def test_post_to_unknown_path_returns_404(client):
    response = client.post("/", json={"audioBase64": "QUJD"})
    assert response.status_code == 404


def test_delete_returns_404(client):
    response = client.delete("/analyze")
    assert response.status_code == 404


def test_plain_options_returns_200(client):
    response = client.options("/analyze")
    assert response.status_code == 200


def test_cors_preflight(client):
    response = client.options(
        "/analyze",
        headers={
            "Origin": "https://tester.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type, x-api-key",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_cors_header_on_error_response(client, no_api_key):
    response = client.post(
        "/analyze",
        json={},
        headers={"Origin": "https://tester.example.com"},
    )
    assert response.status_code == 400
    assert response.headers["access-control-allow-origin"] == "*"


def test_package_entry_point_starts_server():
    with patch("voxverify.main.run") as run:
        runpy.run_module("voxverify", run_name="__main__")
    run.assert_called_once_with()
