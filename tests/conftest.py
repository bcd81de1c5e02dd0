# tests/conftest.py
import base64
import itertools
import json

import pytest
from fastapi.testclient import TestClient

from booking_api.config import Settings
from booking_api.core.auth import TokenVerifier
from booking_api.core.tokens import SessionTokens
from booking_api.main import create_app
from booking_api.schemas.user import UserRecord
from booking_api.services.identity import (
    EmailAlreadyExistsError, IdentityProviderError, InvalidCredentialsError, UserNotFoundError,
)
from booking_api.services.reservations import ReservationService

COLLECTION = "reservations"


def _b64(data: dict) -> str:
    raw = json.dumps(data).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def make_token(claims: dict, header: dict = None) -> str:
    """Unsigned three-segment token with the given claims."""
    return ".".join([_b64(header or {"alg": "RS256", "typ": "JWT"}), _b64(claims), "c2lnbmF0dXJl"])


class InMemoryDocumentStore:
    """DocumentStore keeping collections in dicts; ids are 'doc-1', 'doc-2', ..."""

    def __init__(self):
        self.collections = {}
        self._ids = itertools.count(1)
        self.calls = []

    def _col(self, collection):
        return self.collections.setdefault(collection, {})

    async def get(self, collection, doc_id):
        self.calls.append(("get", collection, doc_id))
        data = self._col(collection).get(doc_id)
        return {**data, "id": doc_id} if data is not None else None

    async def query(self, collection, field, value):
        self.calls.append(("query", collection, field, value))
        return [{**d, "id": k} for k, d in self._col(collection).items() if d.get(field) == value]

    async def all(self, collection):
        self.calls.append(("all", collection))
        return [{**d, "id": k} for k, d in self._col(collection).items()]

    async def add(self, collection, record):
        self.calls.append(("add", collection))
        doc_id = f"doc-{next(self._ids)}"
        self._col(collection)[doc_id] = dict(record)
        return doc_id

    async def set(self, collection, doc_id, record):
        self.calls.append(("set", collection, doc_id))
        self._col(collection)[doc_id] = dict(record)

    async def update(self, collection, doc_id, partial):
        self.calls.append(("update", collection, doc_id, dict(partial)))
        self._col(collection)[doc_id].update(partial)

    async def delete(self, collection, doc_id):
        self.calls.append(("delete", collection, doc_id))
        self._col(collection).pop(doc_id, None)


class FakeIdentityProvider:
    """IdentityProvider keeping users in memory; custom tokens carry only a uid claim."""

    def __init__(self):
        self.users = {}
        self.passwords = {}
        self._ids = itertools.count(1)

    def add_user(self, uid, email=None, password="secret1", admin=False, email_verified=False,
                 display_name=None):
        record = UserRecord(uid=uid, email=email, email_verified=email_verified,
                            display_name=display_name,
                            custom_claims={"admin": True} if admin else {})
        self.users[uid] = record
        self.passwords[uid] = password
        return record

    async def get_user(self, uid):
        if uid not in self.users:
            raise UserNotFoundError(f"No user record found for the provided user ID: {uid}")
        return self.users[uid]

    async def get_user_by_email(self, email):
        for record in self.users.values():
            if record.email == email:
                return record
        raise UserNotFoundError(f"No user record found for the provided email: {email}")

    async def create_user(self, email, password):
        if any(r.email == email for r in self.users.values()):
            raise EmailAlreadyExistsError("The user with the provided email already exists")
        if len(password) < 6:
            raise IdentityProviderError("Invalid password string. Password must be at least 6 characters long.")
        return self.add_user(f"user-{next(self._ids)}", email=email, password=password)

    async def update_user(self, uid, **fields):
        record = await self.get_user(uid)
        changes = {k: v for k, v in fields.items() if v is not None}
        self.users[uid] = record.model_copy(update=changes)
        return self.users[uid]

    async def delete_user(self, uid):
        await self.get_user(uid)
        del self.users[uid]

    async def verify_password(self, email, password):
        try:
            record = await self.get_user_by_email(email)
        except UserNotFoundError:
            raise InvalidCredentialsError("Invalid email or password")
        if self.passwords[record.uid] != password:
            raise InvalidCredentialsError("Invalid email or password")
        return record

    async def create_custom_token(self, uid):
        await self.get_user(uid)
        return make_token({
            "iss": "firebase-adminsdk@test-project.iam.gserviceaccount.com",
            "sub": "firebase-adminsdk@test-project.iam.gserviceaccount.com",
            "aud": "https://identitytoolkit.googleapis.com/google.identity.identitytoolkit.v1.IdentityToolkit",
            "uid": uid,
        })

    async def set_admin_claim(self, uid, admin=True):
        record = await self.get_user(uid)
        claims = dict(record.custom_claims)
        if admin:
            claims["admin"] = True
        else:
            claims.pop("admin", None)
        self.users[uid] = record.model_copy(update={"custom_claims": claims})
        return self.users[uid]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(_env_file=None, jwt_secret="test-secret-key", reservations_collection=COLLECTION)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def identity():
    provider = FakeIdentityProvider()
    provider.add_user("u1", email="a@x.com")
    provider.add_user("u2", email="b@x.com")
    provider.add_user("boss", email="admin@x.com", admin=True)
    return provider


@pytest.fixture
def sessions(settings):
    return SessionTokens(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expires_delta)


@pytest.fixture
def verifier(sessions, identity):
    return TokenVerifier(sessions, identity)


@pytest.fixture
def service(store, identity):
    return ReservationService(store, identity, COLLECTION)


@pytest.fixture
def app(settings, identity, store):
    return create_app(settings, identity=identity, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def bearer(sessions):
    """Authorization header for a session token."""
    def _bearer(uid, email, admin=False):
        return {"Authorization": f"Bearer {sessions.issue(uid, email, admin=admin)}"}
    return _bearer


def nested_json_token(depth: int = 1100) -> str:
    """Token whose payload is a JSON array nested deeper than the parser's recursion limit."""
    payload = base64.urlsafe_b64encode(b"[" * depth).decode("ascii").rstrip("=")
    return ".".join([_b64({"alg": "HS256"}), payload, "c2ln"])
