from functools import lru_cache
from typing import Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.interfaces.clock import Clock, SystemClock
from app.application.interfaces.id_generator import IdGenerator, RealIdGenerator
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.services.availability_checker import AvailabilityChecker
from app.application.services.billing_calculator import BillingCalculator
from app.application.services.payment_ledger import GatewayUrls, PaymentLedger
from app.application.use_cases.approve_booking import ApproveBookingUseCase
from app.application.use_cases.cancel_booking import CancelBookingUseCase
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.application.use_cases.check_in_booking import CheckInBookingUseCase
from app.application.use_cases.check_out_booking import CheckOutBookingUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.generate_invoice import GenerateInvoiceUseCase
from app.application.use_cases.get_booking import GetBookingUseCase, ListBookingsUseCase
from app.application.use_cases.get_payment_history import GetPaymentHistoryUseCase
from app.application.use_cases.handle_gateway_callback import HandleGatewayCallbackUseCase
from app.application.use_cases.manage_service_usage import (
    AddServiceUsageUseCase,
    ListServiceUsagesUseCase,
    RemoveServiceUsageUseCase,
)
from app.application.use_cases.record_payment import RecordPaymentUseCase
from app.application.use_cases.update_booking import UpdateBookingUseCase
from app.config import Settings, get_settings
from app.domain.entities.actor import Actor, ActorRole
from app.domain.entities.room import Room
from app.domain.entities.service_usage import Service
from app.infrastructure.db.repositories.catalog_sql import RoomCatalogSQL, ServiceCatalogSQL
from app.infrastructure.db.repositories.idempotency_repo_sql import IdempotencyRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.service_usage_repo_sql import ServiceUsageRepoSQL
from app.infrastructure.db.resource_lock import SQLResourceLock
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.demo_gateway import DemoPaymentGateway
from app.infrastructure.gateways.sslcommerz_gateway import SSLCommerzGateway
from app.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from app.infrastructure.in_memory.notifier import InMemoryNotifier
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from app.infrastructure.in_memory.resource_lock import InMemoryResourceLock
from app.infrastructure.in_memory.room_catalog import InMemoryRoomCatalog
from app.infrastructure.in_memory.service_catalog import InMemoryServiceCatalog
from app.infrastructure.in_memory.service_usage_repo import InMemoryServiceUsageRepo
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from app.infrastructure.notifier import LoggingNotifier
from app.infrastructure.seed_data import DEMO_ROOMS, DEMO_SERVICES


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


def get_actor(
    user_id: int | None = Header(default=None, convert_underscores=False, alias="X-User-Id"),
    role: str = Header(default="customer", convert_underscores=False, alias="X-User-Role"),
) -> Actor:
    # La autenticación vive en el gateway de entrada; aquí solo se lee la identidad propagada.
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    try:
        actor_role = ActorRole(role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role '{role}'",
        ) from None
    return Actor(user_id=user_id, role=actor_role)


def build_gateway(settings: Settings) -> PaymentGateway:
    mode = settings.payment_gateway_mode
    if mode in ("sandbox", "live"):
        return SSLCommerzGateway(
            store_id=settings.sslcommerz_store_id,
            store_password=settings.sslcommerz_store_password,
            sandbox=mode == "sandbox",
            timeout_seconds=settings.gateway_timeout_seconds,
        )
    return DemoPaymentGateway(
        checkout_url=f"{settings.gateway_callback_base}/demo-checkout",
        settles_immediately=mode == "demo",
    )


@lru_cache(maxsize=1)
def _shared_services() -> dict[str, Any]:
    settings = get_settings()
    return {
        "clock": SystemClock(),
        "id_generator": RealIdGenerator(),
        "gateway": build_gateway(settings),
    }


def build_in_memory_bundle(
    settings: Settings,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
    gateway: PaymentGateway | None = None,
    rooms: tuple[Room, ...] = DEMO_ROOMS,
    services: tuple[Service, ...] = DEMO_SERVICES,
) -> dict[str, Any]:
    return {
        "idempotency_repo": InMemoryIdempotencyRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "service_usage_repo": InMemoryServiceUsageRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "room_catalog": InMemoryRoomCatalog(rooms),
        "service_catalog": InMemoryServiceCatalog(services),
        "resource_lock": InMemoryResourceLock(),
        "tx_manager": NoopTransactionManager(),
        "notifier": InMemoryNotifier(),
        "clock": clock or SystemClock(),
        "id_generator": id_generator or RealIdGenerator(),
        "gateway": gateway or build_gateway(settings),
    }


@lru_cache(maxsize=1)
def _in_memory_bundle() -> dict[str, Any]:
    return build_in_memory_bundle(get_settings())


def build_sql_bundle(session: AsyncSession, shared: dict[str, Any]) -> dict[str, Any]:
    return {
        "idempotency_repo": IdempotencyRepoSQL(session),
        "reservation_repo": ReservationRepoSQL(session),
        "service_usage_repo": ServiceUsageRepoSQL(session),
        "payment_repo": PaymentRepoSQL(session),
        "room_catalog": RoomCatalogSQL(session),
        "service_catalog": ServiceCatalogSQL(session),
        "resource_lock": SQLResourceLock(session),
        "tx_manager": SQLAlchemyTransactionManager(session),
        "notifier": LoggingNotifier(),
        **shared,
    }


def build_use_cases(bundle: dict[str, Any], settings: Settings) -> dict[str, Any]:
    reservation_repo = bundle["reservation_repo"]
    room_catalog = bundle["room_catalog"]
    tx_manager = bundle["tx_manager"]
    resource_lock = bundle["resource_lock"]
    clock = bundle["clock"]

    availability = AvailabilityChecker(reservation_repo=reservation_repo, room_catalog=room_catalog)
    billing = BillingCalculator(
        room_catalog=room_catalog,
        service_usage_repo=bundle["service_usage_repo"],
        payment_repo=bundle["payment_repo"],
        id_generator=bundle["id_generator"],
        currency_code=settings.currency_code,
    )
    ledger = PaymentLedger(
        reservation_repo=reservation_repo,
        payment_repo=bundle["payment_repo"],
        billing=billing,
        gateway=bundle["gateway"],
        resource_lock=resource_lock,
        transaction_manager=tx_manager,
        clock=clock,
        id_generator=bundle["id_generator"],
        gateway_urls=GatewayUrls.under(settings.gateway_callback_base),
        gateway_timeout_seconds=settings.gateway_timeout_seconds,
    )

    return {
        "check_availability": CheckAvailabilityUseCase(
            availability=availability,
            transaction_manager=tx_manager,
        ),
        "create_booking": CreateBookingUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            availability=availability,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            notifier=bundle["notifier"],
            clock=clock,
        ),
        "update_booking": UpdateBookingUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            availability=availability,
            ledger=ledger,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "cancel_booking": CancelBookingUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            notifier=bundle["notifier"],
            clock=clock,
            allow_cancel_checked_in=settings.allow_cancel_checked_in,
        ),
        "approve_booking": ApproveBookingUseCase(
            reservation_repo=reservation_repo,
            availability=availability,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            notifier=bundle["notifier"],
            clock=clock,
        ),
        "check_in_booking": CheckInBookingUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            availability=availability,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            clock=clock,
            early_check_in_days=settings.early_check_in_days,
        ),
        "check_out_booking": CheckOutBookingUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "get_booking": GetBookingUseCase(reservation_repo=reservation_repo, transaction_manager=tx_manager),
        "list_bookings": ListBookingsUseCase(reservation_repo=reservation_repo, transaction_manager=tx_manager),
        "add_service_usage": AddServiceUsageUseCase(
            reservation_repo=reservation_repo,
            service_catalog=bundle["service_catalog"],
            service_usage_repo=bundle["service_usage_repo"],
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "remove_service_usage": RemoveServiceUsageUseCase(
            reservation_repo=reservation_repo,
            service_usage_repo=bundle["service_usage_repo"],
            ledger=ledger,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
        ),
        "list_service_usages": ListServiceUsagesUseCase(
            reservation_repo=reservation_repo,
            service_usage_repo=bundle["service_usage_repo"],
            transaction_manager=tx_manager,
        ),
        "generate_invoice": GenerateInvoiceUseCase(
            reservation_repo=reservation_repo,
            room_catalog=room_catalog,
            billing=billing,
            ledger=ledger,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "record_payment": RecordPaymentUseCase(
            reservation_repo=reservation_repo,
            payment_repo=bundle["payment_repo"],
            idempotency_repo=bundle["idempotency_repo"],
            ledger=ledger,
            transaction_manager=tx_manager,
        ),
        "payment_history": GetPaymentHistoryUseCase(
            reservation_repo=reservation_repo,
            ledger=ledger,
            transaction_manager=tx_manager,
        ),
        "gateway_callback": HandleGatewayCallbackUseCase(
            ledger=ledger,
            allow_demo_checkout=settings.demo_checkout_enabled,
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
) -> dict[str, Any]:
    if settings.use_in_memory:
        return build_use_cases(_in_memory_bundle(), settings)

    if not session:
        raise RuntimeError("DB session not available")

    return build_use_cases(build_sql_bundle(session, _shared_services()), settings)
