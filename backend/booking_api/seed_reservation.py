#!/usr/bin/env python3
"""
Bir kullanıcı adına Firestore'a örnek rezervasyon yazar ve geri okuyarak doğrular.

    seed-reservation <user_email> [--nights N] [--id DOC_ID]

Kullanıcı Firebase Auth'ta email ile bulunur; rezervasyon onun uid'i ile
`ReservationService.create` üzerinden oluşturulur. Geceler yarından başlar.
Kimlik bilgileri `.env` / ortam değişkenlerinden okunur (bkz. `config.Settings`).
"""
import asyncio
import sys
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from booking_api.config import get_settings, init_firebase_app
from booking_api.repositories.documents import FirestoreDocumentStore
from booking_api.schemas.principal import Principal
from booking_api.schemas.reservation import Reservation, ReservationCreate
from booking_api.services.identity import FirebaseIdentityProvider, IdentityProvider, UserNotFoundError
from booking_api.services.reservations import ReservationService

USAGE = "Usage: seed-reservation <user_email> [--nights N] [--id DOC_ID]"


def sample_reservation(email: str, nights: int = 3, doc_id: Optional[str] = None,
                       start: Optional[datetime] = None) -> ReservationCreate:
    if start is None:
        tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
        start = datetime.combine(tomorrow, time(), tzinfo=timezone.utc)
    return ReservationCreate(
        id=doc_id,
        dates=[start + timedelta(days=i) for i in range(nights)],
        name="Reserva desde Script",
        email=email,
        phone="555987654",
        hosts=2,
        pets="No",
        status="pending",
    )


async def seed_reservation(service: ReservationService, identity: IdentityProvider, user_email: str,
                           nights: int = 3, doc_id: Optional[str] = None) -> Optional[Reservation]:
    """Kullanıcıyı email ile bulur, rezervasyonu oluşturur ve kaydedilmiş halini döner."""
    user = await identity.get_user_by_email(user_email)
    principal = Principal(uid=user.uid, email=user.email, method="firebase")
    created = await service.create(sample_reservation(user_email, nights, doc_id), principal)
    return await service.get(created.id)


def _parse(args):
    nights, doc_id, rest = 3, None, []
    it = iter(args)
    for arg in it:
        if arg in ("--nights", "--id"):
            value = next(it, None)
            if value is None:
                raise ValueError(f"{arg} needs a value")
            if arg == "--nights":
                nights = int(value)
                if nights < 1:
                    raise ValueError("--nights must be at least 1")
            else:
                doc_id = value
        else:
            rest.append(arg)
    if len(rest) != 1:
        raise ValueError("exactly one user e-mail is required")
    return rest[0], nights, doc_id


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        user_email, nights, doc_id = _parse(args)
    except ValueError as exc:
        print(f"{USAGE}\n{exc}")
        print("Example: seed-reservation guest@example.com --nights 2")
        return 1

    settings = get_settings()
    app = init_firebase_app(settings)
    identity = FirebaseIdentityProvider(app)
    service = ReservationService(FirestoreDocumentStore(app=app), identity, settings.reservations_collection)
    try:
        reservation = asyncio.run(seed_reservation(service, identity, user_email, nights, doc_id))
    except UserNotFoundError:
        print(f"User not found: {user_email}")
        return 1

    if reservation is None:
        print("The reservation was written but could not be read back.")
        return 1
    print(f"Reservation {reservation.id} created for {reservation.email} ({reservation.userId}):")
    print(reservation.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
