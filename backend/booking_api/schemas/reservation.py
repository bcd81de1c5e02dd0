"""
# `booking_api/schemas/reservation.py` — Reservation (Rezervasyon) Şema Dokümantasyonu

## Genel Bilgi
Bu dosya, rezervasyon oluşturma, güncelleme ve listeleme işlemleri için kullanılan Pydantic
veri modellerini tanımlar. Firestore dokümanındaki alan adları (camelCase) birebir korunur.

---

### `ReservationCreate`
| Alan        | Tip              | Zorunlu | Açıklama |
|-------------|------------------|---------|----------|
| id          | `str`            | ✖       | Verilirse doküman anahtarı olarak kullanılır |
| dates       | `list[datetime]` | ✔       | En az bir gece |
| name        | `str`            | ✔       | Misafir adı |
| email       | `EmailStr`       | ✖       | Boşsa oturumdaki kullanıcının e-postası |
| phone       | `str`            | ✔       | Telefon |
| hosts       | `int ≥ 1`        | ✖       | Varsayılan 1 |
| pets        | `"Sí"` \| `"No"` | ✖       | Varsayılan "No" |
| status      | `ReservationStatus` | ✖    | Varsayılan "pending" |
| createdAt   | `datetime`       | ✖       | Varsayılan: şimdi |
| totalNights | `int ≥ 1`        | ✖       | Verilirse `len(dates)` ile aynı olmalı |

---

### `ReservationUpdate`
Kısmi güncelleme. Bilinmeyen alanlar reddedilir; `userId` değiştirilemez.
`totalNights` yalnızca `dates` ile birlikte ve ona eşit olarak gönderilebilir.

---

### `Reservation`
Firestore'dan okunan kayıt. Eski kayıtlarda eksik olabilecek alanlar için varsayılanlar vardır.

## Enum
| `ReservationStatus` | Açıklama |
|---------------------|----------|
| `pending`           | Beklemede |
| `confirmed`         | Onaylandı |
| `cancelled`         | İptal edildi |
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from booking_api.utils.dates import to_iso

ReservationStatus = Literal["pending", "confirmed", "cancelled"]
Pets = Literal["Sí", "No"]


class ReservationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id:          Optional[str]         = Field(None, min_length=1, description="Caller-chosen document ID")
    dates:       List[datetime]        = Field(..., min_length=1)
    name:        str                   = Field(...)
    email:       Optional[EmailStr]    = Field(None)
    phone:       str                   = Field(...)
    hosts:       int                   = Field(1, ge=1)
    pets:        Pets                  = Field("No")
    status:      ReservationStatus     = Field("pending")
    createdAt:   Optional[datetime]    = Field(None)
    totalNights: Optional[int]         = Field(None, ge=1)

    @model_validator(mode="after")
    def _nights_match_dates(self):
        if self.totalNights is not None and self.totalNights != len(self.dates):
            raise ValueError("totalNights must equal the number of dates")
        return self


class ReservationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dates:       Optional[List[datetime]]    = Field(None, min_length=1)
    name:        Optional[str]               = None
    email:       Optional[EmailStr]          = None
    phone:       Optional[str]               = None
    hosts:       Optional[int]               = Field(None, ge=1)
    pets:        Optional[Pets]              = None
    status:      Optional[ReservationStatus] = None
    createdAt:   Optional[datetime]          = None
    totalNights: Optional[int]               = Field(None, ge=1)

    @model_validator(mode="after")
    def _nights_follow_dates(self):
        if self.totalNights is None:
            return self
        if self.dates is None:
            raise ValueError("totalNights is derived from dates and cannot be set on its own")
        if self.totalNights != len(self.dates):
            raise ValueError("totalNights must equal the number of dates")
        return self


class Reservation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id:              str
    dates:           List[str]             = Field(default_factory=list)
    email:           Optional[str]         = None
    userId:          Optional[str]         = None
    hosts:           int                   = 1
    name:            str                   = ""
    phone:           str                   = ""
    pets:            str                   = "No"
    status:          str                   = "pending"
    totalNights:     int                   = 0
    createdAt:       Optional[str]         = None
    statusUpdatedAt: Optional[str]         = None

    @field_validator("createdAt", "statusUpdatedAt", mode="before")
    @classmethod
    def _coerce_timestamp(cls, v):
        return to_iso(v)

    @field_validator("dates", mode="before")
    @classmethod
    def _coerce_dates(cls, v):
        return [to_iso(d) for d in v or []]


class ReservationList(BaseModel):
    reservations: List[Reservation]


class DeleteResult(BaseModel):
    success: bool = True
    message: str = "Reservation deleted successfully"
