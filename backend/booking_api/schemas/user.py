"""
# `booking_api/schemas/user.py` — Kullanıcı ve Auth Şemaları

## Genel Bilgi
Identity provider kayıtları ve `/api/auth` uç noktalarının istek/yanıt modelleri.
Alan adları, tarayıcı arayüzünün beklediği camelCase biçimindedir.

| Model           | Kullanım                                   |
|-----------------|--------------------------------------------|
| `UserRecord`    | Identity provider'dan çözümlenen kullanıcı |
| `RegisterRequest` / `RegisterResponse` | POST /api/auth/register |
| `LoginRequest` / `LoginResponse`       | POST /api/auth/login    |
| `UserProfile`   | GET/PUT /api/auth/me yanıtı                |
| `ProfileUpdate` | PUT /api/auth/me gövdesi                   |
| `AuthStatus`    | GET /api/auth/status yanıtı                |
"""
from typing import Annotated, Dict, Optional, Any
from pydantic import BaseModel, ConfigDict, EmailStr, Field, AnyUrl

from booking_api.schemas.principal import AuthMethod


class UserRecord(BaseModel):
    """Canonical user as stored by the identity provider."""
    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    custom_claims: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.custom_claims.get("admin") is True


class RegisterRequest(BaseModel):
    email:    EmailStr                              = Field(..., description="E-posta")
    password: Annotated[str, Field(min_length=6)]   = Field(..., description="Şifre (≥6 kr.)")


class RegisterResponse(BaseModel):
    uid:   str
    email: Optional[str] = None


class LoginRequest(BaseModel):
    email:    EmailStr = Field(..., description="E-posta")
    password: str      = Field(..., min_length=1, description="Şifre")


class SessionUser(BaseModel):
    uid:           str
    email:         Optional[str] = None
    emailVerified: bool = False


class LoginResponse(BaseModel):
    """Başarılı girişte dönen token paketi."""
    user:          SessionUser
    token:         str            # locally-signed session JWT
    firebaseToken: str            # Firebase custom token for the client SDK


class UserProfile(BaseModel):
    uid:           str
    email:         Optional[str] = None
    emailVerified: bool = False
    displayName:   Optional[str] = None
    photoURL:      Optional[str] = None

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserProfile":
        return cls(
            uid=record.uid,
            email=record.email,
            emailVerified=record.email_verified,
            displayName=record.display_name,
            photoURL=record.photo_url,
        )


class ProfileUpdate(BaseModel):
    """Profil güncellerken – tüm alanlar opsiyonel."""
    model_config = ConfigDict(extra="forbid")

    displayName: Optional[str]    = None
    photoURL:    Optional[AnyUrl] = None


class StatusUser(BaseModel):
    uid:   str
    email: Optional[str] = None


class AuthStatus(BaseModel):
    authenticated: bool
    method:        Optional[AuthMethod] = None
    user:          Optional[StatusUser] = None
