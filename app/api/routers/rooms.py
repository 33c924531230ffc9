from datetime import date

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_actor, get_use_cases
from app.api.schemas.bookings import (
    AvailabilitySearchResponse,
    RoomAvailabilityResponse,
    RoomSummary,
)
from app.domain.entities.actor import Actor

router = APIRouter()


@router.get("/rooms/availability", response_model=AvailabilitySearchResponse)
async def search_availability(
    check_in: date = Query(...),
    check_out: date = Query(...),
    guests: int | None = Query(default=None, ge=1),
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> AvailabilitySearchResponse:
    result = await use_cases["check_availability"].search(check_in, check_out, guests)
    return AvailabilitySearchResponse(
        check_in=result.check_in,
        check_out=result.check_out,
        booked_room_ids=sorted(result.booked_room_ids),
        available_rooms=[RoomSummary.from_entity(room) for room in result.available_rooms],
    )


@router.get("/rooms/{room_id}/availability", response_model=RoomAvailabilityResponse)
async def room_availability(
    room_id: int,
    check_in: date = Query(...),
    check_out: date = Query(...),
    exclude_booking_id: int | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> RoomAvailabilityResponse:
    available = await use_cases["check_availability"].execute(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        exclude_reservation_id=exclude_booking_id,
    )
    return RoomAvailabilityResponse(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        available=available,
    )
