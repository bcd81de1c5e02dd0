"""
# `booking_api/core/tokens.py` — Token Sınıflandırma ve Oturum Token'ları

## Sınıflandırma
Bearer token `.` ile üç parçaya bölünür, ortadaki parça base64url çözülüp JSON claim
nesnesi olarak okunur. Öncelik listesi yukarıdan aşağıya uygulanır:

| Sıra | Koşul                         | Tür        |
|------|-------------------------------|------------|
| 1    | `uid` ve `email` claim'i var  | `jwt`      |
| 2    | yalnızca `uid` var            | `firebase` |
| 3    | hiçbiri                       | `unknown`  |

Üç parça değilse ya da payload çözülemiyorsa tür `invalid` olur.
Sınıflandırma imzayı doğrulamaz; yalnızca hangi güven yolunun deneneceğini seçer.

## Oturum token'ları
`SessionTokens`, sunucunun kendi gizli anahtarıyla HS256 imzalı JWT üretir ve doğrular
(python-jose). Varsayılan ömür 12 saattir.
"""
import base64
import binascii
import json
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from booking_api.core.errors import AuthenticationError

logger = logging.getLogger("booking.auth")


class TokenKind(str, Enum):
    JWT = "jwt"
    FIREBASE = "firebase"
    UNKNOWN = "unknown"
    INVALID = "invalid"


def decode_claims(token: str) -> Optional[Dict[str, Any]]:
    """Unverified claims of a three-segment token, or None if they cannot be read."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload = parts[1]
    try:
        raw = base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4))
        claims = json.loads(raw)
    except (binascii.Error, ValueError, RecursionError):
        return None
    return claims if isinstance(claims, dict) else None


def classify_token(token: str) -> TokenKind:
    claims = decode_claims(token)
    if claims is None:
        return TokenKind.INVALID
    if claims.get("uid") and claims.get("email"):
        return TokenKind.JWT
    if claims.get("uid"):
        return TokenKind.FIREBASE
    return TokenKind.UNKNOWN


class SessionTokens:
    """Issues and verifies locally-signed session tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256",
                 expires_delta: timedelta = timedelta(hours=12)):
        if not secret:
            raise ValueError("A signing secret is required for session tokens")
        self._secret = secret
        self._algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, uid: str, email: Optional[str], admin: bool = False,
              expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "uid": uid,
            "email": email,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.expires_delta),
        }
        if admin:
            claims["admin"] = True
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Signed claims of a valid token; AuthenticationError otherwise."""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except JWTError as exc:
            logger.debug("Session token rejected: %s", exc)
            raise AuthenticationError("Invalid session token") from exc
        if not claims.get("uid"):
            raise AuthenticationError("Invalid token payload")
        return claims
