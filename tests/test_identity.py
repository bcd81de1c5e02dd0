from types import SimpleNamespace

import httpx
import pytest
from firebase_admin import auth as firebase_auth

from booking_api.services.identity import (
    EmailAlreadyExistsError, FirebaseIdentityProvider, IdentityProviderError,
    InvalidCredentialsError, UserNotFoundError,
)

pytestmark = pytest.mark.anyio

API_KEY = "AIzaTestKey"


def _fb_user(uid="u1", email="a@x.com", claims=None):
    return SimpleNamespace(uid=uid, email=email, email_verified=True, display_name="Ana",
                           photo_url=None, custom_claims=claims)


def _provider(handler=None):
    transport = httpx.MockTransport(handler) if handler else None
    return FirebaseIdentityProvider(app=None, web_api_key=API_KEY, transport=transport)


async def test_get_user_maps_the_sdk_record(monkeypatch):
    monkeypatch.setattr(firebase_auth, "get_user", lambda uid, app=None: _fb_user(uid, claims={"admin": True}))
    record = await _provider().get_user("u1")
    assert record.uid == "u1"
    assert record.email_verified is True
    assert record.is_admin is True


async def test_sdk_errors_are_translated(monkeypatch):
    def missing(uid, app=None):
        raise firebase_auth.UserNotFoundError("No user record found")

    def duplicate(app=None, **kwargs):
        raise firebase_auth.EmailAlreadyExistsError("exists", None, None)

    def bad_input(app=None, **kwargs):
        raise ValueError("Invalid password string.")

    monkeypatch.setattr(firebase_auth, "get_user", missing)
    with pytest.raises(UserNotFoundError):
        await _provider().get_user("ghost")

    monkeypatch.setattr(firebase_auth, "create_user", duplicate)
    with pytest.raises(EmailAlreadyExistsError):
        await _provider().create_user("a@x.com", "secret1")

    monkeypatch.setattr(firebase_auth, "create_user", bad_input)
    with pytest.raises(IdentityProviderError, match="Invalid password"):
        await _provider().create_user("a@x.com", "1")


async def test_verify_password_success(monkeypatch):
    seen = {}

    def handler(request):
        seen["key"] = request.url.params["key"]
        return httpx.Response(200, json={"localId": "u1", "idToken": "t", "refreshToken": "r"})

    monkeypatch.setattr(firebase_auth, "get_user", lambda uid, app=None: _fb_user(uid))
    record = await _provider(handler).verify_password("a@x.com", "secret1")
    assert record.uid == "u1"
    assert seen["key"] == API_KEY


@pytest.mark.parametrize("message", ["INVALID_PASSWORD", "EMAIL_NOT_FOUND", "INVALID_LOGIN_CREDENTIALS"])
async def test_verify_password_bad_credentials(message):
    def handler(request):
        return httpx.Response(400, json={"error": {"code": 400, "message": message}})

    with pytest.raises(InvalidCredentialsError):
        await _provider(handler).verify_password("a@x.com", "wrong")


async def test_verify_password_other_failures_pass_through():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "TOO_MANY_ATTEMPTS_TRY_LATER : slow down"}})

    with pytest.raises(IdentityProviderError, match="TOO_MANY_ATTEMPTS") as exc:
        await _provider(handler).verify_password("a@x.com", "secret1")
    assert not isinstance(exc.value, InvalidCredentialsError)


async def test_verify_password_requires_web_api_key():
    with pytest.raises(IdentityProviderError, match="FIREBASE_WEB_API_KEY"):
        await FirebaseIdentityProvider().verify_password("a@x.com", "secret1")


async def test_set_admin_claim_keeps_other_claims(monkeypatch):
    stored = {"claims": {"tier": "gold"}}

    def set_claims(uid, claims, app=None):
        stored["claims"] = claims

    monkeypatch.setattr(firebase_auth, "get_user", lambda uid, app=None: _fb_user(uid, claims=stored["claims"]))
    monkeypatch.setattr(firebase_auth, "set_custom_user_claims", set_claims)

    record = await _provider().set_admin_claim("u1")
    assert record.custom_claims == {"tier": "gold", "admin": True}

    record = await _provider().set_admin_claim("u1", admin=False)
    assert record.custom_claims == {"tier": "gold"}
