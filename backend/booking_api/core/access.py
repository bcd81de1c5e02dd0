"""
# `booking_api/core/access.py` — Rezervasyon Yetkilendirme

## Kural
1. `principal.admin` → her zaman izin.
2. Aksi halde rezervasyonun `email` alanı principal'ın e-postasına **veya** `userId`
   alanı principal'ın `uid`'ine eşitse izin (ikisinden biri yeterli; `userId` alanı
   olmayan eski kayıtlar e-posta ile eşleşir).
3. Diğer tüm durumlar `403`.

Kayıt yoksa admin olmayan çağırana da `403` döner (`NotFoundTreatedAsDenied`); böylece
yetkisiz kullanıcı bir ID'nin var olup olmadığını öğrenemez. Admin için kayıt yoksa `404`.
"""
from typing import Any, Mapping, Optional, Union

from booking_api.core.errors import AuthorizationError, NotFoundError, NotFoundTreatedAsDenied
from booking_api.schemas.principal import Principal
from booking_api.schemas.reservation import Reservation

ReservationLike = Union[Reservation, Mapping[str, Any]]


def _field(reservation: ReservationLike, name: str) -> Optional[str]:
    if isinstance(reservation, Mapping):
        return reservation.get(name)
    return getattr(reservation, name, None)


def is_owner(principal: Principal, reservation: ReservationLike) -> bool:
    email = _field(reservation, "email")
    user_id = _field(reservation, "userId")
    if principal.email and email and email == principal.email:
        return True
    return bool(user_id) and user_id == principal.uid


def can_modify(principal: Principal, reservation: ReservationLike) -> bool:
    return principal.admin or is_owner(principal, reservation)


def ensure_can_modify(principal: Principal, reservation: Optional[ReservationLike],
                      reservation_id: str = "") -> ReservationLike:
    """Return the reservation if the principal may act on it; raise otherwise."""
    if reservation is None:
        if principal.admin:
            raise NotFoundError(f"Reservation {reservation_id} not found" if reservation_id
                                else "Reservation not found")
        raise NotFoundTreatedAsDenied()
    if not can_modify(principal, reservation):
        raise AuthorizationError()
    return reservation
