# booking_api/core/auth.py
import logging
from typing import Optional

from fastapi import Depends, Request

from booking_api.core.errors import AuthenticationError, UpstreamError
from booking_api.core.tokens import SessionTokens, TokenKind, classify_token, decode_claims
from booking_api.schemas.principal import Principal
from booking_api.schemas.user import AuthStatus, StatusUser
from booking_api.services.identity import IdentityProvider

logger = logging.getLogger("booking.auth")


class TokenVerifier:
    """
    Turns a bearer token into a Principal through one of two trust paths:

    - ``jwt``: session token signed with the server secret; the signed claims
      are the principal.
    - ``firebase``: externally-issued token; only its ``uid`` claim is read and
      resolved against the identity provider, which supplies every other field.
    """

    def __init__(self, sessions: SessionTokens, identity: IdentityProvider):
        self.sessions = sessions
        self.identity = identity

    def verify_local(self, token: str) -> Principal:
        claims = self.sessions.verify(token)
        return Principal(
            uid=claims["uid"],
            email=claims.get("email"),
            admin=claims.get("admin") is True,
            method="jwt",
        )

    async def verify_external(self, token: str) -> Principal:
        claims = decode_claims(token) or {}
        uid = claims.get("uid")
        if not uid or not isinstance(uid, str):
            raise AuthenticationError("Invalid token format: no UID found")
        try:
            record = await self.identity.get_user(uid)
        except UpstreamError as exc:
            logger.warning("Identity lookup for token uid %s failed: %s", uid, exc.message)
            raise AuthenticationError("Token verification failed") from exc
        return Principal(
            uid=record.uid,
            email=record.email,
            admin=record.is_admin,
            email_verified=record.email_verified,
            method="firebase",
        )

    async def authenticate(self, token: Optional[str]) -> Principal:
        """Enforcing path: Principal or AuthenticationError."""
        if not token:
            raise AuthenticationError("No token provided")
        kind = classify_token(token)
        if kind is TokenKind.JWT:
            return self.verify_local(token)
        if kind is TokenKind.FIREBASE:
            return await self.verify_external(token)
        logger.info("Rejected bearer token classified as %s", kind.value)
        raise AuthenticationError("Invalid token format")

    async def check_status(self, token: Optional[str]) -> AuthStatus:
        """Non-throwing probe: local verification first, then the identity provider."""
        if not token:
            return AuthStatus(authenticated=False)
        for strategy in (self._probe_local, self.verify_external):
            try:
                principal = await strategy(token)
            except AuthenticationError:
                continue
            return AuthStatus(
                authenticated=True,
                method=principal.method,
                user=StatusUser(uid=principal.uid, email=principal.email),
            )
        return AuthStatus(authenticated=False)

    async def _probe_local(self, token: str) -> Principal:
        return self.verify_local(token)


def extract_token(request: Request, cookie_name: str = "session") -> Optional[str]:
    """
    Authorization: Bearer <token> başlığından token'ı alır; yoksa oturum çerezine bakar.
    İkisi de yoksa None döner.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header:
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return request.cookies.get(cookie_name) or None


# --------- FastAPI Dependencies --------- #

def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.verifier


async def get_principal(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Principal:
    """
    Token zorunlu: doğrular ve Principal döner.
    Korunan tüm route'larda kapı olarak kullanılır; hata durumunda 401 döner.
    """
    token = extract_token(request, request.app.state.settings.session_cookie_name)
    try:
        principal = await verifier.authenticate(token)
    except AuthenticationError as exc:
        logger.warning("Authentication failed on %s %s: %s", request.method, request.url.path, exc.message)
        raise
    request.state.principal = principal
    return principal
