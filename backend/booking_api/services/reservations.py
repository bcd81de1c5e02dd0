"""
# `booking_api/services/reservations.py` — Rezervasyon Servisi

Firestore'daki rezervasyon koleksiyonu üzerindeki tüm okuma/yazma işlemleri.
Route'lar yalnızca bu servisi çağırır; mağaza (`DocumentStore`) ve kimlik sağlayıcı
(`IdentityProvider`) uygulama başlarken enjekte edilir.

- **Oluşturma:** `id` verilmişse o anahtara `set`, yoksa `add` (Firestore ID üretir).
- **Güncelleme:** yalnızca gönderilen alanlar yazılır; `dates` değişirse `totalNights`
  yeniden hesaplanır, `status` değişirse `statusUpdatedAt` damgalanır.
  Eşzamanlı güncellemelerde son yazan kazanır (kilit/transaction yok).
- **Sahiplik listesi:** önce `userId`, sonuç yoksa kimlik sağlayıcıdan e-posta çözülüp
  `email` ile tekrar sorgulanır (eski kayıtlarda yalnızca `email` vardır).
"""
import logging
from typing import List, Optional

from booking_api.core.access import ensure_can_modify
from booking_api.core.errors import NotFoundError, ValidationError
from booking_api.repositories.documents import DocumentStore
from booking_api.schemas.principal import Principal
from booking_api.schemas.reservation import Reservation, ReservationCreate, ReservationUpdate
from booking_api.services.identity import IdentityProvider, UserNotFoundError
from booking_api.utils.dates import to_iso, utc_now_iso

logger = logging.getLogger("booking.reservations")


class ReservationService:
    def __init__(self, store: DocumentStore, identity: IdentityProvider, collection: str = "reservations"):
        self.store = store
        self.identity = identity
        self.collection = collection

    async def get(self, reservation_id: str) -> Optional[Reservation]:
        data = await self.store.get(self.collection, reservation_id)
        return Reservation(**data) if data is not None else None

    async def list_all(self) -> List[Reservation]:
        return [Reservation(**d) for d in await self.store.all(self.collection)]

    async def list_by_email(self, email: str) -> List[Reservation]:
        return [Reservation(**d) for d in await self.store.query(self.collection, "email", email)]

    async def list_for_user(self, uid: str) -> List[Reservation]:
        docs = await self.store.query(self.collection, "userId", uid)
        if docs:
            return [Reservation(**d) for d in docs]

        # Older records only carry the e-mail
        try:
            record = await self.identity.get_user(uid)
        except UserNotFoundError:
            logger.info("No identity for uid %s; no e-mail fallback possible", uid)
            return []
        if not record.email:
            return []
        return await self.list_by_email(record.email)

    async def list_visible_to(self, principal: Principal) -> List[Reservation]:
        if principal.admin:
            return await self.list_all()
        return await self.list_for_user(principal.uid)

    async def authorize(self, principal: Principal, reservation_id: str) -> Reservation:
        """Fetch a reservation and run the access rules against it."""
        reservation = await self.get(reservation_id)
        return ensure_can_modify(principal, reservation, reservation_id)

    async def create(self, payload: ReservationCreate, principal: Principal) -> Reservation:
        email = payload.email or principal.email
        if not email:
            raise ValidationError("email is required when the session has no e-mail")

        record = {
            "createdAt": to_iso(payload.createdAt) or utc_now_iso(),
            "dates": [to_iso(d) for d in payload.dates],
            "email": str(email),
            "hosts": payload.hosts,
            "name": payload.name,
            "pets": payload.pets,
            "phone": payload.phone,
            "status": payload.status,
            "totalNights": len(payload.dates),
            "userId": principal.uid,
        }

        if payload.id:
            await self.store.set(self.collection, payload.id, record)
            reservation_id = payload.id
        else:
            reservation_id = await self.store.add(self.collection, record)
        logger.info("Reservation %s created by %s", reservation_id, principal.uid)
        return Reservation(id=reservation_id, **record)

    async def update(self, reservation_id: str, changes: ReservationUpdate,
                     current: Optional[Reservation] = None) -> Reservation:
        if current is None:
            current = await self.get(reservation_id)
            if current is None:
                raise NotFoundError(f"Reservation {reservation_id} not found")

        partial = changes.model_dump(exclude_unset=True, exclude_none=True)
        partial.pop("totalNights", None)
        if "dates" in partial:
            partial["dates"] = [to_iso(d) for d in changes.dates]
            partial["totalNights"] = len(partial["dates"])
        if "createdAt" in partial:
            partial["createdAt"] = to_iso(changes.createdAt)
        if "email" in partial:
            partial["email"] = str(partial["email"])
        if "status" in partial and partial["status"] != current.status:
            partial["statusUpdatedAt"] = utc_now_iso()

        if partial:
            await self.store.update(self.collection, reservation_id, partial)
            logger.info("Reservation %s updated: %s", reservation_id, ", ".join(sorted(partial)))
        return current.model_copy(update=partial)

    async def delete(self, reservation_id: str) -> None:
        await self.store.delete(self.collection, reservation_id)
        logger.info("Reservation %s deleted", reservation_id)
