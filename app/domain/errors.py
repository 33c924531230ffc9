"""Excepciones de dominio para el sistema de reservaciones de habitaciones."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Categorías ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code=code,
        )
        self.field = field


class NotFoundError(DomainError):
    """La referencia solicitada no existe."""


class ConflictError(DomainError):
    """El estado actual impide la operación solicitada."""


class AuthorizationError(DomainError):
    """El actor no tiene permiso sobre la reservación o la transición."""

    def __init__(self, message: str = "Operación no permitida para este usuario"):
        super().__init__(message=message, code="FORBIDDEN")


class ExternalDependencyError(DomainError):
    """Falla de un colaborador externo (pasarela de pago)."""


# === Errores de validación ===


class InvalidDateRangeError(ValidationError):
    """Rango de fechas inválido."""

    def __init__(self, message: str):
        super().__init__(field="stay", message=message, code="INVALID_DATE_RANGE")


class InvalidMoneyError(ValidationError):
    """Monto monetario inválido."""

    def __init__(self, message: str):
        super().__init__(field="amount", message=message, code="INVALID_MONEY")


class CapacityExceededError(ValidationError):
    """La ocupación solicitada excede la capacidad de la habitación."""

    def __init__(self, room_id: int, capacity: int, guests: int):
        super().__init__(
            field="guests",
            message=f"La habitación {room_id} admite máximo {capacity} huéspedes (solicitados {guests})",
            code="CAPACITY_EXCEEDED",
        )
        self.room_id = room_id
        self.capacity = capacity
        self.guests = guests


class RoomOutOfServiceError(ValidationError):
    """La habitación está fuera de servicio."""

    def __init__(self, room_id: int):
        super().__init__(
            field="room_id",
            message=f"La habitación {room_id} está fuera de servicio",
            code="ROOM_OUT_OF_SERVICE",
        )
        self.room_id = room_id


class InactiveServiceError(ValidationError):
    """El servicio no está activo."""

    def __init__(self, service_id: int):
        super().__init__(
            field="service_id",
            message=f"El servicio {service_id} no está activo",
            code="SERVICE_INACTIVE",
        )
        self.service_id = service_id


class InvalidPaymentMethodError(ValidationError):
    """Método de pago no reconocido."""

    def __init__(self, method: str):
        super().__init__(
            field="method",
            message=f"Método de pago no reconocido: {method}",
            code="INVALID_PAYMENT_METHOD",
        )
        self.method = method


# === Errores de referencia ===


class RoomNotFoundError(NotFoundError):
    """La habitación no existe."""

    def __init__(self, room_id: int):
        super().__init__(
            message=f"Habitación no encontrada: {room_id}",
            code="ROOM_NOT_FOUND",
        )
        self.room_id = room_id


class ReservationNotFoundError(NotFoundError):
    """La reservación no existe."""

    def __init__(self, reservation_id: int):
        super().__init__(
            message=f"Reservación no encontrada: {reservation_id}",
            code="RESERVATION_NOT_FOUND",
        )
        self.reservation_id = reservation_id


class ServiceNotFoundError(NotFoundError):
    """El servicio no existe en el catálogo."""

    def __init__(self, service_id: int):
        super().__init__(
            message=f"Servicio no encontrado: {service_id}",
            code="SERVICE_NOT_FOUND",
        )
        self.service_id = service_id


class ServiceUsageNotFoundError(NotFoundError):
    """El consumo de servicio no existe o no pertenece a la reservación."""

    def __init__(self, usage_id: int, reservation_id: int):
        super().__init__(
            message=f"Consumo {usage_id} no encontrado en la reservación {reservation_id}",
            code="SERVICE_USAGE_NOT_FOUND",
        )
        self.usage_id = usage_id
        self.reservation_id = reservation_id


class PaymentNotFoundError(NotFoundError):
    """El pago no existe."""

    def __init__(self, payment_id: int | None = None, external_txn_id: str | None = None):
        identifier = f"ID {payment_id}" if payment_id else f"transacción {external_txn_id}"
        super().__init__(
            message=f"Pago no encontrado para {identifier}",
            code="PAYMENT_NOT_FOUND",
        )
        self.payment_id = payment_id
        self.external_txn_id = external_txn_id


# === Errores de conflicto ===


class RoomUnavailableError(ConflictError):
    """La habitación ya está reservada para un intervalo que se superpone."""

    def __init__(self, room_id: int, check_in: object, check_out: object):
        super().__init__(
            message=f"La habitación {room_id} no está disponible entre {check_in} y {check_out}",
            code="ROOM_UNAVAILABLE",
        )
        self.room_id = room_id


class InvalidReservationStatusError(ConflictError):
    """El estado de la reservación no permite la operación."""

    def __init__(self, current_status: str, expected_status: str | list[str], operation: str):
        expected = expected_status if isinstance(expected_status, str) else ", ".join(expected_status)
        super().__init__(
            message=f"No se puede {operation}: estado actual '{current_status}', esperado '{expected}'",
            code="INVALID_RESERVATION_STATUS",
        )
        self.current_status = current_status
        self.expected_status = expected_status
        self.operation = operation


class CheckInWindowError(ConflictError):
    """El check-in se intenta fuera de la ventana permitida."""

    def __init__(self, message: str):
        super().__init__(message=message, code="CHECK_IN_WINDOW")


class OptimisticLockError(ConflictError):
    """Conflicto de concurrencia al actualizar la reservación."""

    def __init__(self, reservation_id: int, expected_version: int, actual_version: int | None):
        super().__init__(
            message=f"Conflicto de concurrencia en reservación {reservation_id}: "
            f"versión esperada {expected_version}, versión actual {actual_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.reservation_id = reservation_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class PaymentExceedsBalanceError(ConflictError):
    """El monto del pago supera el saldo pendiente."""

    def __init__(self, amount: object, balance_due: object):
        super().__init__(
            message=f"El monto del pago ({amount}) excede el saldo pendiente ({balance_due})",
            code="PAYMENT_EXCEEDS_BALANCE",
        )
        self.amount = amount
        self.balance_due = balance_due


class TotalBelowPaymentsError(ConflictError):
    """El cambio dejaría el total por debajo de lo ya pagado o en curso."""

    def __init__(self, reservation_id: int, new_total: object, committed: object):
        super().__init__(
            message=f"El nuevo total de la reservación {reservation_id} ({new_total}) "
            f"quedaría por debajo de los pagos registrados ({committed})",
            code="TOTAL_BELOW_PAYMENTS",
        )
        self.reservation_id = reservation_id
        self.new_total = new_total
        self.committed = committed


class ReservationNotPayableError(ConflictError):
    """La reservación no admite pagos en su estado actual."""

    def __init__(self, reservation_id: int, status: str):
        super().__init__(
            message=f"La reservación {reservation_id} no admite pagos en estado '{status}'",
            code="RESERVATION_NOT_PAYABLE",
        )
        self.reservation_id = reservation_id
        self.status = status


class IdempotencyConflictError(ConflictError):
    """Conflicto de idempotencia: mismo key pero diferente request."""

    def __init__(self, idem_key: str, scope: str):
        super().__init__(
            message=f"Conflicto de idempotencia: key '{idem_key}' en scope '{scope}' "
            f"ya existe con diferente request hash",
            code="IDEMPOTENCY_CONFLICT",
        )
        self.idem_key = idem_key
        self.scope = scope


class DuplicateTransactionError(ConflictError):
    """Ya existe un pago con el mismo identificador de transacción."""

    def __init__(self, external_txn_id: str):
        super().__init__(
            message=f"Ya existe un pago con la transacción {external_txn_id}",
            code="DUPLICATE_TRANSACTION",
        )
        self.external_txn_id = external_txn_id


# === Errores de pasarela ===


class PaymentGatewayError(ExternalDependencyError):
    """La pasarela rechazó o no pudo crear la sesión de pago."""

    def __init__(self, message: str, provider: str = "gateway"):
        super().__init__(
            message=f"Error en la pasarela {provider}: {message}",
            code="PAYMENT_GATEWAY_ERROR",
        )
        self.provider = provider


class GatewayTimeoutError(ExternalDependencyError):
    """Timeout en la comunicación con la pasarela."""

    def __init__(self, timeout_seconds: float, provider: str = "gateway"):
        super().__init__(
            message=f"Timeout de {timeout_seconds}s en comunicación con la pasarela {provider}",
            code="GATEWAY_TIMEOUT",
        )
        self.provider = provider
        self.timeout_seconds = timeout_seconds
