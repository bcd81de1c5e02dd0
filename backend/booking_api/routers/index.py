from fastapi import APIRouter, Depends

from booking_api.core.auth import get_principal
from booking_api.schemas.principal import Principal

router = APIRouter(prefix="/api", tags=["Index"])


@router.get("/")
def welcome():
    return {"message": "Welcome to the reservations API"}


@router.get("/protected")
def protected(principal: Principal = Depends(get_principal)):
    return {"message": "This is a protected route", "user": principal.model_dump(by_alias=True)}
