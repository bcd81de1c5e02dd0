"""
booking_api/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and a helper that initializes the Firebase Admin SDK with the provided credentials.
Nothing is initialized at import time: `create_app` builds the settings, the Firebase app
and the clients once at startup and hands them to the components that need them.
"""
from datetime import timedelta
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    firebase_cred_file: str = Field('firebase_service_account.json')
    firebase_project_id: Optional[str] = Field(None)

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = Field(None)
    firebase_private_key: Optional[str] = Field(None)
    firebase_client_email: Optional[str] = Field(None)
    firebase_client_id: Optional[str] = Field(None)
    firebase_auth_uri: Optional[str] = Field(None)
    firebase_token_uri: Optional[str] = Field(None)
    firebase_auth_provider_x509_cert_url: Optional[str] = Field(None)
    firebase_client_x509_cert_url: Optional[str] = Field(None)

    # Needed for password sign-in through the Identity Toolkit REST API
    firebase_web_api_key: Optional[str] = Field(None)

    jwt_secret: str = Field(..., min_length=1)
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 12

    session_cookie_name: str = "session"
    session_max_age: int = 60 * 60

    environment: str = "development"        # development | production
    reservations_collection: str = "reservations"
    allowed_origins: str = Field('*')       # Comma-separated list or '*' for all
    log_level: str = "INFO"
    port: int = 3000

    def model_post_init(self, __context):
        """Validate Firebase Web API Key format"""
        if self.firebase_web_api_key and not self.firebase_web_api_key.startswith('AIza'):
            raise ValueError("FIREBASE_WEB_API_KEY must be a valid Firebase Web API Key starting with 'AIza'")

    @property
    def jwt_expires_delta(self) -> timedelta:
        return timedelta(hours=self.jwt_expires_hours)

    @property
    def session_cookie_secure(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def origins(self) -> list:
        if not self.allowed_origins or self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(',') if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    # Load settings from environment (.env file, etc.)
    return Settings()


def init_firebase_app(settings: Settings) -> firebase_admin.App:
    """
    Initialize the Firebase Admin SDK.
    Split environment variables win over the service account file (Cloud Run).
    """
    if all([
        settings.firebase_private_key_id,
        settings.firebase_private_key,
        settings.firebase_client_email,
        settings.firebase_client_id,
        settings.firebase_auth_uri,
        settings.firebase_token_uri,
        settings.firebase_auth_provider_x509_cert_url,
        settings.firebase_client_x509_cert_url
    ]):
        cred_dict = {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            # Keys pasted into env vars usually carry escaped newlines
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "auth_uri": settings.firebase_auth_uri,
            "token_uri": settings.firebase_token_uri,
            "auth_provider_x509_cert_url": settings.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": settings.firebase_client_x509_cert_url
        }
        cred = credentials.Certificate(cred_dict)
    else:
        # Use service account file (local development)
        cred = credentials.Certificate(settings.firebase_cred_file)

    options = {'projectId': settings.firebase_project_id} if settings.firebase_project_id else None
    try:
        return firebase_admin.initialize_app(cred, options)
    except ValueError as e:
        if "already exists" in str(e):
            # Firebase app already initialized, get the default app
            return firebase_admin.get_app()
        raise
