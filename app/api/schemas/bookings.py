from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, condecimal, field_validator

from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.entities.room import Room
from app.domain.entities.service_usage import ServiceUsage

Money = condecimal(max_digits=12, decimal_places=2)


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_id: int
    check_in: date
    check_out: date
    guests: int = Field(default=1)
    holder_id: int | None = None

    @field_validator("guests")
    @classmethod
    def validate_guests(cls, value: int) -> int:
        if value < 1:
            raise ValueError("guests must be >= 1")
        return value

    @field_validator("check_out")
    @classmethod
    def validate_dates(cls, value: date, info: Any) -> date:
        check_in = info.data.get("check_in")
        if check_in and value <= check_in:
            raise ValueError("check_out must be after check_in")
        return value


class UpdateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_id: int | None = None
    check_in: date | None = None
    check_out: date | None = None
    guests: int | None = None

    @field_validator("guests")
    @classmethod
    def validate_guests(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("guests must be >= 1")
        return value


class BookingResponse(BaseModel):
    model_config = ConfigDict(json_encoders={Decimal: lambda v: format(v, ".2f")})

    id: int
    room_id: int
    holder_id: int
    created_by: int
    check_in: date
    check_out: date
    guests: int
    nights: int
    room_charge: Money
    status: ReservationStatus
    lock_version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> "BookingResponse":
        return cls(
            id=reservation.id,
            room_id=reservation.room_id,
            holder_id=reservation.holder_id,
            created_by=reservation.created_by,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            guests=reservation.guests,
            nights=reservation.nights,
            room_charge=reservation.room_charge,
            status=reservation.status,
            lock_version=reservation.lock_version,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class RoomSummary(BaseModel):
    model_config = ConfigDict(json_encoders={Decimal: lambda v: format(v, ".2f")})

    id: int
    code: str
    room_type: str | None = None
    capacity: int
    rate_per_night: Money
    status: str

    @classmethod
    def from_entity(cls, room: Room) -> "RoomSummary":
        return cls(
            id=room.id,
            code=room.code,
            room_type=room.room_type,
            capacity=room.capacity,
            rate_per_night=room.rate_per_night,
            status=room.status.value,
        )


class RoomAvailabilityResponse(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    available: bool


class AvailabilitySearchResponse(BaseModel):
    check_in: date
    check_out: date
    booked_room_ids: list[int]
    available_rooms: list[RoomSummary]


class AddServiceUsageRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_id: int
    quantity: int = Field(default=1)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: int) -> int:
        if value < 1:
            raise ValueError("quantity must be >= 1")
        return value


class ServiceUsageResponse(BaseModel):
    model_config = ConfigDict(json_encoders={Decimal: lambda v: format(v, ".2f")})

    id: int
    reservation_id: int
    service_id: int
    service_name: str
    quantity: int
    unit_price: Money
    amount: Money
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, usage: ServiceUsage) -> "ServiceUsageResponse":
        return cls(
            id=usage.id,
            reservation_id=usage.reservation_id,
            service_id=usage.service_id,
            service_name=usage.service_name,
            quantity=usage.quantity,
            unit_price=usage.unit_price,
            amount=usage.amount,
            created_at=usage.created_at,
        )
