"""
# booking_api/routers/auth.py — Kimlik Doğrulama Dokümantasyonu

## Genel Bilgi
Kayıt, giriş, çıkış, oturum durumu ve profil uç noktaları. Kullanıcılar Firebase
Authentication'da tutulur; giriş başarılı olduğunda sunucu kendi imzaladığı bir oturum
token'ı (JWT, 12 saat) üretir ve `session` çerezine yazar.

---

### GET /api/auth/status
Token'ı (başlık ya da çerez) önce yerel JWT olarak, olmazsa Firebase üzerinden doğrulamayı
dener. Her durumda `200` döner: `{"authenticated": false}` veya
`{"authenticated": true, "method": "jwt"|"firebase", "user": {uid, email}}`.

### POST /api/auth/register
Gövde (JSON): `email`, `password` (min. 6). Firebase'de kullanıcı oluşturur → `201 {uid, email}`.
Firebase hatası `400` olarak döner.

### POST /api/auth/login
Gövde (JSON): `email`, `password`. Şifre Identity Toolkit REST API'si ile doğrulanır, ardından:
1. `{uid, email, admin?}` claim'li oturum JWT'si imzalanır,
2. `session` çerezi yazılır (HTTP-only, SameSite=lax, 1 saat, production'da `secure`),
3. istemci SDK'sı için Firebase custom token üretilir.
Başarısızsa `401`.

### POST /api/auth/logout
Oturum çerezini siler.

### GET /api/auth/me, PUT /api/auth/me
Firebase'deki profil; PUT ile `displayName` / `photoURL` güncellenir.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from booking_api.core.auth import TokenVerifier, extract_token, get_principal, get_token_verifier
from booking_api.core.errors import AuthenticationError, UpstreamError, ValidationError
from booking_api.schemas.principal import Principal
from booking_api.schemas.user import (
    AuthStatus, LoginRequest, LoginResponse, ProfileUpdate, RegisterRequest,
    RegisterResponse, SessionUser, UserProfile,
)
from booking_api.services.identity import IdentityProvider, IdentityProviderError, InvalidCredentialsError

logger = logging.getLogger("booking.auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


@router.get("/status", response_model=AuthStatus, response_model_exclude_none=True)
async def auth_status(request: Request, verifier: TokenVerifier = Depends(get_token_verifier)):
    token = extract_token(request, request.app.state.settings.session_cookie_name)
    return await verifier.check_status(token)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, identity: IdentityProvider = Depends(get_identity)):
    try:
        record = await identity.create_user(str(body.email), body.password)
    except IdentityProviderError as exc:
        raise ValidationError(f"Error creating user: {exc.message}") from exc
    return RegisterResponse(uid=record.uid, email=record.email)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    identity: IdentityProvider = Depends(get_identity),
    verifier: TokenVerifier = Depends(get_token_verifier),
):
    try:
        user = await identity.verify_password(str(body.email), body.password)
        firebase_token = await identity.create_custom_token(user.uid)
    except InvalidCredentialsError as exc:
        raise AuthenticationError("Invalid email or password") from exc
    except IdentityProviderError as exc:
        logger.warning("Login for %s failed: %s", body.email, exc.message)
        raise AuthenticationError(f"Authentication failed: {exc.message}") from exc

    token = verifier.sessions.issue(user.uid, user.email, admin=user.is_admin)

    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    return LoginResponse(
        user=SessionUser(uid=user.uid, email=user.email, emailVerified=user.email_verified),
        token=token,
        firebaseToken=firebase_token,
    )


@router.post("/logout")
def logout(request: Request, response: Response, principal: Principal = Depends(get_principal)):
    response.delete_cookie(key=request.app.state.settings.session_cookie_name, path="/")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=UserProfile)
async def get_me(principal: Principal = Depends(get_principal),
                 identity: IdentityProvider = Depends(get_identity)):
    try:
        record = await identity.get_user(principal.uid)
    except UpstreamError as exc:
        raise ValidationError(exc.message) from exc
    return UserProfile.from_record(record)


@router.put("/me", response_model=UserProfile)
async def update_me(body: ProfileUpdate,
                    principal: Principal = Depends(get_principal),
                    identity: IdentityProvider = Depends(get_identity)):
    try:
        record = await identity.update_user(
            principal.uid,
            display_name=body.displayName,
            photo_url=str(body.photoURL) if body.photoURL else None,
        )
    except UpstreamError as exc:
        raise ValidationError(exc.message) from exc
    return UserProfile.from_record(record)
