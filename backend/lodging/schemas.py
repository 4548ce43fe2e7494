from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .models import Reservation


class ReservationCreate(BaseModel):
    host_email: str = Field(min_length=3)
    guest_email: str = Field(min_length=3)
    start_date: date
    end_date: date


class ReservationUpdate(BaseModel):
    start_date: date
    end_date: date


class QuoteRequest(BaseModel):
    host_email: str = Field(min_length=3)
    start_date: date
    end_date: date


class QuoteRead(BaseModel):
    host_id: str
    start_date: date
    end_date: date
    total: Decimal


class ReservationRead(BaseModel):
    reservation_id: int
    host_id: str
    guest_id: int
    guest_email: Optional[str] = None
    start_date: date
    end_date: date
    total: Optional[Decimal]

    @classmethod
    def from_db(cls, *, reservation: Reservation) -> "ReservationRead":
        return cls(
            reservation_id=reservation.id,
            host_id=reservation.host_id,
            guest_id=reservation.guest_id,
            guest_email=reservation.guest.email if reservation.guest is not None else None,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            total=reservation.total,
        )
