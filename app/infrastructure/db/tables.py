from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    UniqueConstraint,
)

metadata = MetaData()

rooms = Table(
    "rooms",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("code", String(20), nullable=False, unique=True),
    Column("room_type", String(32)),
    Column("rate_per_night", Numeric(12, 2), nullable=False),
    Column("capacity", Integer, nullable=False, default=1),
    Column("status", String(32), nullable=False, default="AVAILABLE"),
)

services = Table(
    "services",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("room_id", Integer, nullable=False),
    Column("holder_id", Integer, nullable=False),
    Column("created_by", Integer, nullable=False),
    Column("check_in", Date, nullable=False),
    Column("check_out", Date, nullable=False),
    Column("guests", Integer, nullable=False, default=1),
    Column("nights", Integer, nullable=False),
    Column("room_charge", Numeric(12, 2), nullable=False),
    Column("status", String(32), nullable=False),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Index("ix_reservations_room_dates", "room_id", "check_in", "check_out"),
    Index("ix_reservations_holder_status", "holder_id", "status"),
    Index("ix_reservations_room_status", "room_id", "status"),
)

service_usages = Table(
    "service_usages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, nullable=False, index=True),
    Column("service_id", Integer, nullable=False),
    Column("service_name", String(100), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("created_at", DateTime(timezone=True)),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, nullable=False, index=True),
    Column("invoice_number", String(32), index=True),
    Column("method", String(16), nullable=False),
    Column("status", String(16), nullable=False, index=True),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("external_txn_id", String(64), unique=True),
    Column("gateway_session_key", String(128)),
    Column("redirect_url", String(500)),
    Column("failure_reason", String(255)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Column("paid_at", DateTime(timezone=True)),
)

idempotency_keys = Table(
    "idempotency_keys",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("scope", String(32), nullable=False),
    Column("idem_key", String(128), nullable=False),
    Column("request_hash", String(64), nullable=False),
    Column("reservation_id", Integer, nullable=False),
    Column("payment_id", Integer, nullable=False),
    UniqueConstraint("scope", "idem_key", name="uq_idempotency_scope_key"),
)
