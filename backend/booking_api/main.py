"""
# `booking_api/main.py` — Ana Uygulama Dokümantasyonu

## Genel Bilgi
FastAPI uygulamasının başlangıç noktası. `create_app` ayarları yükler, Firebase Admin SDK'yı
başlatır, kimlik sağlayıcı ve Firestore istemcilerini **bir kez** kurar ve bunları
`app.state` üzerinden token doğrulayıcıya ve rezervasyon servisine enjekte eder.
Testler `identity` ve `store` parametreleriyle bellek içi sahte bileşenler verir.

---

## Router'lar
- `/api/auth`: kayıt, giriş, çıkış, durum, profil
- `/api`: karşılama ve korumalı örnek uç nokta
- `/api/reservations`: rezervasyon CRUD

## Çalıştırma
`uvicorn booking_api.main:create_app --factory --port 3000`
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking_api.config import Settings, get_settings, init_firebase_app
from booking_api.core.auth import TokenVerifier
from booking_api.core.errors import register_exception_handlers
from booking_api.core.tokens import SessionTokens
from booking_api.repositories.documents import DocumentStore, FirestoreDocumentStore
from booking_api.routers import auth, index, reservations
from booking_api.services.identity import FirebaseIdentityProvider, IdentityProvider
from booking_api.services.reservations import ReservationService

logger = logging.getLogger("booking.app")


def create_app(
    settings: Optional[Settings] = None,
    identity: Optional[IdentityProvider] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if identity is None or store is None:
        firebase_app = init_firebase_app(settings)
        if identity is None:
            identity = FirebaseIdentityProvider(firebase_app, web_api_key=settings.firebase_web_api_key)
        if store is None:
            store = FirestoreDocumentStore(app=firebase_app)

    app = FastAPI(
        title="Reservations API",
        description="Authentication gate and reservation management backed by Firebase.",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.identity = identity
    app.state.verifier = TokenVerifier(
        SessionTokens(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expires_delta),
        identity,
    )
    app.state.reservations = ReservationService(store, identity, settings.reservations_collection)

    # Configure CORS (allow front-end domain or all origins as specified)
    origins = settings.origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(index.router)
    app.include_router(reservations.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    logger.info("Reservations API configured (environment=%s, collection=%s)",
                settings.environment, settings.reservations_collection)
    return app


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("booking_api.main:create_app", factory=True, host="0.0.0.0",
                port=get_settings().port, reload=True)
