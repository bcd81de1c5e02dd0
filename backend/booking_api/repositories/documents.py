"""
Document store adapter.

`DocumentStore` is the narrow surface the services use; `FirestoreDocumentStore`
implements it on top of the `firebase_admin.firestore_async` client. Every record
handed back carries its document key under "id".
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

from firebase_admin import firestore_async
from google.api_core import exceptions as gcp_exceptions

from booking_api.core.errors import UpstreamError

logger = logging.getLogger("booking.store")

Record = Dict[str, Any]


class DocumentStoreError(UpstreamError):
    error = "Document Store Error"


class DocumentStore(Protocol):
    async def get(self, collection: str, doc_id: str) -> Optional[Record]: ...

    async def query(self, collection: str, field: str, value: Any) -> List[Record]: ...

    async def all(self, collection: str) -> List[Record]: ...

    async def add(self, collection: str, record: Record) -> str: ...

    async def set(self, collection: str, doc_id: str, record: Record) -> None: ...

    async def update(self, collection: str, doc_id: str, partial: Record) -> None: ...

    async def delete(self, collection: str, doc_id: str) -> None: ...


def _with_id(doc) -> Record:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


class FirestoreDocumentStore:
    def __init__(self, client=None, app=None):
        self._db = client if client is not None else firestore_async.client(app)

    async def get(self, collection: str, doc_id: str) -> Optional[Record]:
        try:
            doc = await self._db.collection(collection).document(doc_id).get()
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error getting {collection}/{doc_id}: {exc}") from exc
        return _with_id(doc) if doc.exists else None

    async def query(self, collection: str, field: str, value: Any) -> List[Record]:
        try:
            return [_with_id(doc) async for doc in
                    self._db.collection(collection).where(field, "==", value).stream()]
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error querying {collection} by {field}: {exc}") from exc

    async def all(self, collection: str) -> List[Record]:
        try:
            return [_with_id(doc) async for doc in self._db.collection(collection).stream()]
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error listing {collection}: {exc}") from exc

    async def add(self, collection: str, record: Record) -> str:
        try:
            _, ref = await self._db.collection(collection).add(record)
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error adding to {collection}: {exc}") from exc
        logger.debug("Added %s/%s", collection, ref.id)
        return ref.id

    async def set(self, collection: str, doc_id: str, record: Record) -> None:
        try:
            await self._db.collection(collection).document(doc_id).set(record)
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error writing {collection}/{doc_id}: {exc}") from exc

    async def update(self, collection: str, doc_id: str, partial: Record) -> None:
        try:
            await self._db.collection(collection).document(doc_id).update(partial)
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error updating {collection}/{doc_id}: {exc}") from exc

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._db.collection(collection).document(doc_id).delete()
        except gcp_exceptions.GoogleAPIError as exc:
            raise DocumentStoreError(f"Error deleting {collection}/{doc_id}: {exc}") from exc
