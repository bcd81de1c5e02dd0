"""
# `booking_api/services/identity.py` — Identity Provider Adaptörü

## Genel Bilgi
Kimlik sağlayıcı (Firebase Authentication) ile konuşan tek katman. Uygulamanın geri kalanı
yalnızca `IdentityProvider` arayüzünü görür; testler bellek içi bir sahte sağlayıcı enjekte eder.

- Firebase Admin SDK senkron çalışır; her çağrı `run_in_threadpool` ile event loop dışına alınır.
- Şifre doğrulaması Admin SDK'da yoktur; Identity Toolkit REST API'si (`signInWithPassword`)
  `httpx.AsyncClient` ile çağrılır ve `FIREBASE_WEB_API_KEY` gerektirir.
- Firebase hataları `IdentityProviderError` ailesine çevrilir; yeniden deneme yapılmaz.
"""
import logging
from typing import Optional, Protocol

import firebase_admin
import httpx
from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from booking_api.core.errors import UpstreamError
from booking_api.schemas.user import UserRecord

logger = logging.getLogger("booking.identity")

FIREBASE_SIGNIN_ENDPOINT = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Identity Toolkit error codes that mean "wrong e-mail or password"
_BAD_CREDENTIAL_CODES = {"EMAIL_NOT_FOUND", "INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS", "USER_DISABLED"}


class IdentityProviderError(UpstreamError):
    error = "Identity Provider Error"


class UserNotFoundError(IdentityProviderError):
    error = "User Not Found"


class EmailAlreadyExistsError(IdentityProviderError):
    error = "Email Already Exists"


class InvalidCredentialsError(IdentityProviderError):
    error = "Invalid Credentials"


class IdentityProvider(Protocol):
    async def get_user(self, uid: str) -> UserRecord: ...

    async def get_user_by_email(self, email: str) -> UserRecord: ...

    async def create_user(self, email: str, password: str) -> UserRecord: ...

    async def update_user(self, uid: str, **fields) -> UserRecord: ...

    async def delete_user(self, uid: str) -> None: ...

    async def verify_password(self, email: str, password: str) -> UserRecord: ...

    async def create_custom_token(self, uid: str) -> str: ...

    async def set_admin_claim(self, uid: str, admin: bool = True) -> UserRecord: ...


def _to_record(user) -> UserRecord:
    return UserRecord(
        uid=user.uid,
        email=user.email,
        email_verified=bool(user.email_verified),
        display_name=user.display_name,
        photo_url=user.photo_url,
        custom_claims=dict(user.custom_claims or {}),
    )


class FirebaseIdentityProvider:
    """`IdentityProvider` backed by the Firebase Admin SDK."""

    # update_user keyword -> Admin SDK keyword
    _UPDATABLE = {"display_name": "display_name", "photo_url": "photo_url",
                  "email": "email", "password": "password", "disabled": "disabled"}

    def __init__(self, app: Optional[firebase_admin.App] = None, web_api_key: Optional[str] = None,
                 timeout: float = 10, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._app = app
        self._web_api_key = web_api_key
        self._timeout = timeout
        self._transport = transport

    async def _call(self, fn, *args, **kwargs):
        try:
            return await run_in_threadpool(fn, *args, app=self._app, **kwargs)
        except firebase_auth.UserNotFoundError as exc:
            raise UserNotFoundError(f"User not found: {exc}") from exc
        except firebase_auth.EmailAlreadyExistsError as exc:
            raise EmailAlreadyExistsError(f"Email already in use: {exc}") from exc
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            # ValueError: the SDK's own argument validation (bad e-mail, short password, ...)
            raise IdentityProviderError(str(exc)) from exc

    async def get_user(self, uid: str) -> UserRecord:
        return _to_record(await self._call(firebase_auth.get_user, uid))

    async def get_user_by_email(self, email: str) -> UserRecord:
        return _to_record(await self._call(firebase_auth.get_user_by_email, email))

    async def create_user(self, email: str, password: str) -> UserRecord:
        user = await self._call(firebase_auth.create_user, email=email, password=password,
                                email_verified=False)
        logger.info("Created identity user %s", user.uid)
        return _to_record(user)

    async def update_user(self, uid: str, **fields) -> UserRecord:
        unknown = set(fields) - set(self._UPDATABLE)
        if unknown:
            raise IdentityProviderError(f"Unsupported user fields: {', '.join(sorted(unknown))}")
        kwargs = {self._UPDATABLE[k]: v for k, v in fields.items() if v is not None}
        if not kwargs:
            return await self.get_user(uid)
        return _to_record(await self._call(firebase_auth.update_user, uid, **kwargs))

    async def delete_user(self, uid: str) -> None:
        await self._call(firebase_auth.delete_user, uid)

    async def create_custom_token(self, uid: str) -> str:
        token = await self._call(firebase_auth.create_custom_token, uid)
        return token.decode("utf-8") if isinstance(token, bytes) else token

    async def set_admin_claim(self, uid: str, admin: bool = True) -> UserRecord:
        current = await self.get_user(uid)
        claims = dict(current.custom_claims)
        if admin:
            claims["admin"] = True
        else:
            claims.pop("admin", None)
        await self._call(firebase_auth.set_custom_user_claims, uid, claims or None)
        return await self.get_user(uid)

    async def verify_password(self, email: str, password: str) -> UserRecord:
        """Form verisiyle Firebase'e proxy olur; başarılıysa kullanıcı kaydını döndürür."""
        if not self._web_api_key:
            raise IdentityProviderError("Password sign-in is not configured (missing FIREBASE_WEB_API_KEY)")

        payload = {"email": email, "password": password, "returnSecureToken": True}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(FIREBASE_SIGNIN_ENDPOINT, params={"key": self._web_api_key},
                                         json=payload)
        except httpx.HTTPError as exc:
            logger.exception("signInWithPassword request failed")
            raise IdentityProviderError(f"Password sign-in service error: {exc}") from exc

        if resp.status_code != 200:
            try:
                message = resp.json().get("error", {}).get("message", "")
            except ValueError:
                message = ""
            code = message.split(" ")[0].split(":")[0]
            if code in _BAD_CREDENTIAL_CODES:
                raise InvalidCredentialsError("Invalid email or password")
            logger.warning("signInWithPassword failed: %s %s", resp.status_code, message)
            raise IdentityProviderError(message or "Password sign-in failed")

        return await self.get_user(resp.json()["localId"])
