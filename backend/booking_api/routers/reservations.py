"""
# `booking_api/routers/reservations.py` — Rezervasyon Uç Noktaları

Tüm uç noktalar `get_principal` ile kimlik doğrulaması ister.

| Method | Path                       | Açıklama |
|--------|----------------------------|----------|
| GET    | `/api/reservations`        | Admin: tüm kayıtlar; diğerleri: kendi kayıtları |
| GET    | `/api/reservations/my`     | Kendi kayıtları (`userId`, yoksa e-posta ile) |
| GET    | `/api/reservations/{id}`   | Tek kayıt (sahibi veya admin) |
| POST   | `/api/reservations`        | Yeni kayıt → `201` |
| PUT    | `/api/reservations/{id}`   | Kısmi güncelleme (sahibi veya admin) |
| DELETE | `/api/reservations/{id}`   | Silme (sahibi veya admin) |

Yetkisiz erişim ve admin olmayan kullanıcı için bulunamayan kayıt aynı `403` yanıtını alır.
"""
from fastapi import APIRouter, Depends, Request, status

from booking_api.core.auth import get_principal
from booking_api.schemas.principal import Principal
from booking_api.schemas.reservation import (
    DeleteResult, Reservation, ReservationCreate, ReservationList, ReservationUpdate,
)
from booking_api.services.reservations import ReservationService

router = APIRouter(prefix="/api/reservations", tags=["Reservations"])


def get_reservation_service(request: Request) -> ReservationService:
    return request.app.state.reservations


@router.get("", response_model=ReservationList)
async def list_reservations(principal: Principal = Depends(get_principal),
                            service: ReservationService = Depends(get_reservation_service)):
    return ReservationList(reservations=await service.list_visible_to(principal))


@router.get("/my", response_model=ReservationList)
async def list_my_reservations(principal: Principal = Depends(get_principal),
                               service: ReservationService = Depends(get_reservation_service)):
    return ReservationList(reservations=await service.list_for_user(principal.uid))


@router.get("/{reservation_id}", response_model=Reservation)
async def get_reservation(reservation_id: str,
                          principal: Principal = Depends(get_principal),
                          service: ReservationService = Depends(get_reservation_service)):
    return await service.authorize(principal, reservation_id)


@router.post("", response_model=Reservation, status_code=status.HTTP_201_CREATED)
async def create_reservation(body: ReservationCreate,
                             principal: Principal = Depends(get_principal),
                             service: ReservationService = Depends(get_reservation_service)):
    return await service.create(body, principal)


@router.put("/{reservation_id}", response_model=Reservation)
async def update_reservation(reservation_id: str,
                             body: ReservationUpdate,
                             principal: Principal = Depends(get_principal),
                             service: ReservationService = Depends(get_reservation_service)):
    current = await service.authorize(principal, reservation_id)
    return await service.update(reservation_id, body, current)


@router.delete("/{reservation_id}", response_model=DeleteResult)
async def delete_reservation(reservation_id: str,
                             principal: Principal = Depends(get_principal),
                             service: ReservationService = Depends(get_reservation_service)):
    await service.authorize(principal, reservation_id)
    await service.delete(reservation_id)
    return DeleteResult()
