"""
Shared pytest fixtures for all test modules.

The Gemini credential is read from the environment on every request, so
each test controls it with the `api_key` / `no_api_key` fixtures instead of
a process-wide default.
"""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from voxverify.main import app


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("API_KEY", "stub-key-for-tests")
    return "stub-key-for-tests"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def static_dir(tmp_path, monkeypatch):
    """A throwaway UI build: index.html plus one asset."""
    from voxverify.config import settings

    (tmp_path / "index.html").write_text("<!doctype html><title>VoxVerify</title>")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "app.js").write_text("console.log('vox');")
    monkeypatch.setattr(settings, "static_dir", str(tmp_path))
    return tmp_path


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------


def make_tiny_mp3() -> bytes:
    """An MPEG-1 Layer III frame header followed by silence — enough bytes to look like an MP3."""
    return b"ID3\x03\x00\x00\x00\x00\x00\x00" + b"\xff\xfb\x90\x64" + b"\x00" * 413


def tiny_mp3_b64() -> str:
    return base64.b64encode(make_tiny_mp3()).decode("ascii")


@pytest.fixture
def tiny_mp3(tmp_path) -> str:
    """Write a tiny MP3 to a temp file and return the path."""
    p = tmp_path / "sample.mp3"
    p.write_bytes(make_tiny_mp3())
    return str(p)


MOCK_VERDICT = {
    "classification": "HUMAN",
    "confidence": 0.92,
    "language": "English",
    "explanation": "natural jitter detected",
}

MOCK_VERDICT_TEXT = json.dumps(MOCK_VERDICT)
