from fastapi import APIRouter, Depends, Query, Response, status

from app.api.dependencies import get_actor, get_use_cases
from app.api.schemas.bookings import (
    AddServiceUsageRequest,
    BookingResponse,
    CreateBookingRequest,
    ServiceUsageResponse,
    UpdateBookingRequest,
)
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import ReservationStatus
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    async def create():
        return await use_cases["create_booking"].execute(
            actor=actor,
            room_id=payload.room_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            guests=payload.guests,
            holder_id=payload.holder_id,
        )

    reservation = await retry_on_deadlock(create, operation="create_booking")
    return BookingResponse.from_entity(reservation)


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    holder_id: int | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> list[BookingResponse]:
    reservations = await use_cases["list_bookings"].execute(
        actor=actor, status=status_filter, holder_id=holder_id
    )
    return [BookingResponse.from_entity(r) for r in reservations]


@router.get("/bookings/{reservation_id}", response_model=BookingResponse)
async def get_booking(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    reservation = await use_cases["get_booking"].execute(actor=actor, reservation_id=reservation_id)
    return BookingResponse.from_entity(reservation)


@router.patch("/bookings/{reservation_id}", response_model=BookingResponse)
async def update_booking(
    reservation_id: int,
    payload: UpdateBookingRequest,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    async def update():
        return await use_cases["update_booking"].execute(
            actor=actor,
            reservation_id=reservation_id,
            room_id=payload.room_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            guests=payload.guests,
        )

    reservation = await retry_on_deadlock(update, operation="update_booking")
    return BookingResponse.from_entity(reservation)


async def _transition(use_cases, name: str, actor: Actor, reservation_id: int) -> BookingResponse:
    async def run():
        return await use_cases[name].execute(actor=actor, reservation_id=reservation_id)

    return BookingResponse.from_entity(await retry_on_deadlock(run, operation=name))


@router.post("/bookings/{reservation_id}/approve", response_model=BookingResponse)
async def approve_booking(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    return await _transition(use_cases, "approve_booking", actor, reservation_id)


@router.post("/bookings/{reservation_id}/check-in", response_model=BookingResponse)
async def check_in_booking(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    return await _transition(use_cases, "check_in_booking", actor, reservation_id)


@router.post("/bookings/{reservation_id}/check-out", response_model=BookingResponse)
async def check_out_booking(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    return await _transition(use_cases, "check_out_booking", actor, reservation_id)


@router.post("/bookings/{reservation_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    return await _transition(use_cases, "cancel_booking", actor, reservation_id)


@router.get("/bookings/{reservation_id}/services", response_model=list[ServiceUsageResponse])
async def list_service_usages(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> list[ServiceUsageResponse]:
    usages = await use_cases["list_service_usages"].execute(actor=actor, reservation_id=reservation_id)
    return [ServiceUsageResponse.from_entity(u) for u in usages]


@router.post(
    "/bookings/{reservation_id}/services",
    response_model=ServiceUsageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_service_usage(
    reservation_id: int,
    payload: AddServiceUsageRequest,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> ServiceUsageResponse:
    usage = await use_cases["add_service_usage"].execute(
        actor=actor,
        reservation_id=reservation_id,
        service_id=payload.service_id,
        quantity=payload.quantity,
    )
    return ServiceUsageResponse.from_entity(usage)


@router.delete(
    "/bookings/{reservation_id}/services/{usage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_service_usage(
    reservation_id: int,
    usage_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> Response:
    await use_cases["remove_service_usage"].execute(
        actor=actor, reservation_id=reservation_id, usage_id=usage_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
