"""Application startup checks."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from outage_admin.main import build_session_codec, create_app
from outage_admin.settings import Settings, get_settings


@pytest.fixture
def fresh_settings(monkeypatch):
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_session_codec_requires_secret():
    with pytest.raises(RuntimeError, match="OUTAGE_SESSION_SECRET"):
        build_session_codec(Settings(session_secret=None))


def test_session_codec_from_settings():
    codec = build_session_codec(Settings(session_secret="s3cret", session_ttl_minutes=15))
    assert codec.ttl.total_seconds() == 900


def test_startup_refuses_without_secret(fresh_settings):
    fresh_settings.delenv("OUTAGE_SESSION_SECRET", raising=False)

    with pytest.raises(RuntimeError, match="OUTAGE_SESSION_SECRET"):
        with TestClient(create_app(init_database=False)):
            pass


def test_startup_with_secret(fresh_settings):
    fresh_settings.setenv("OUTAGE_SESSION_SECRET", "from-env")

    with TestClient(create_app(init_database=False)) as client:
        assert client.app.state.session_codec is not None
        assert client.app.state.security_config.match("/health", "GET").auth_required is False
