from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from booking_api.config import Settings
from booking_api.main import create_app
from booking_api.set_admin_claim import main as set_admin_claim_main, set_admin_claim
from booking_api.services.identity import UserNotFoundError


def test_defaults(settings):
    assert settings.session_cookie_name == "session"
    assert settings.session_max_age == 3600
    assert settings.jwt_expires_delta == timedelta(hours=12)
    assert settings.session_cookie_secure is False
    assert settings.origins == ["*"]


def test_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    settings = Settings(_env_file=None)
    assert settings.jwt_secret == "from-env"
    assert settings.session_cookie_secure is True
    assert settings.origins == ["https://a.example", "https://b.example"]


def test_web_api_key_format_is_checked():
    with pytest.raises(ValueError):
        Settings(_env_file=None, jwt_secret="x", firebase_web_api_key="not-a-key")


def test_production_cookie_is_secure(identity, store):
    settings = Settings(_env_file=None, jwt_secret="test-secret-key", environment="production")
    with TestClient(create_app(settings, identity=identity, store=store)) as client:
        r = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    attrs = [part.strip().lower() for part in r.headers["set-cookie"].split(";")[1:]]
    assert "secure" in attrs


@pytest.mark.anyio
async def test_set_admin_claim_by_email(identity):
    record = await set_admin_claim(identity, "a@x.com")
    assert record.is_admin
    record = await set_admin_claim(identity, "a@x.com", admin=False)
    assert not record.is_admin


@pytest.mark.anyio
async def test_set_admin_claim_unknown_email(identity):
    with pytest.raises(UserNotFoundError):
        await set_admin_claim(identity, "nobody@x.com")


def test_set_admin_claim_usage(capsys):
    assert set_admin_claim_main([]) == 1
    assert "Usage" in capsys.readouterr().out
