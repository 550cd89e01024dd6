# audit_registry/infrastructure/database/models.py

from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, LargeBinary, Numeric, String
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator

from audit_registry.infrastructure.database.session import Base

CONFIG_ROW_ID = 1

# Wide enough for a 128-bit unsigned value (39 decimal digits).
WIDE_INTEGER_DIGITS = 39


class WideInteger(TypeDecorator):
    """
    Integer column for amounts and counters beyond 64 bits.
    NUMERIC(39, 0) where the database has it; SQLite has no exact wide numeric, so text there.
    Always reads back as a Python int.
    """

    impl = Numeric
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(precision=WIDE_INTEGER_DIGITS, scale=0)

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(WIDE_INTEGER_DIGITS + 1))
        return dialect.type_descriptor(Numeric(WIDE_INTEGER_DIGITS, 0))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            return str(int(value))
        return Decimal(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class AuditRow(TimestampMixin, Base):
    """ORM model for admitted audits. data_hash is the unique secondary key."""

    __tablename__ = "audits"

    audit_id = Column(BigInteger, primary_key=True, autoincrement=False)
    submitter = Column(String, nullable=False, index=True)
    data_hash = Column(LargeBinary(32), nullable=False, unique=True, index=True)
    tonnage = Column(WideInteger, nullable=False)
    waste_type = Column(String(50), nullable=False)
    reduction_metric = Column(Integer, nullable=False)
    timestamp = Column(WideInteger, nullable=False)
    period = Column(WideInteger, nullable=False)
    category = Column(String, nullable=False)
    location = Column(String(100), nullable=False)
    unit = Column(String, nullable=False)
    source = Column(String(100), nullable=False)
    verification_level = Column(Integer, nullable=False)
    compliance_score = Column(Integer, nullable=False)
    status = Column(Boolean, nullable=False, default=True)


class AuditUpdateRow(TimestampMixin, Base):
    """Last update per audit. One row per audit id, overwritten in place."""

    __tablename__ = "audit_updates"

    audit_id = Column(BigInteger, ForeignKey("audits.audit_id"), primary_key=True)
    tonnage = Column(WideInteger, nullable=False)
    reduction_metric = Column(Integer, nullable=False)
    timestamp = Column(WideInteger, nullable=False)
    updater = Column(String, nullable=False)


class RegistryConfigRow(TimestampMixin, Base):
    """Single-row registry configuration and allocator."""

    __tablename__ = "registry_config"

    id = Column(Integer, primary_key=True, default=CONFIG_ROW_ID)
    registry_principal = Column(String, nullable=True)
    submission_fee = Column(WideInteger, nullable=False)
    max_audits = Column(WideInteger, nullable=False)
    next_audit_id = Column(WideInteger, nullable=False, default=0)


class FeeTransferRow(TimestampMixin, Base):
    """Fee receipt, written in the same transaction as its audit."""

    __tablename__ = "fee_transfers"

    audit_id = Column(BigInteger, ForeignKey("audits.audit_id"), primary_key=True)
    amount = Column(WideInteger, nullable=False)
    sender = Column(String, nullable=False)
    recipient = Column(String, nullable=False)
    timestamp = Column(WideInteger, nullable=False)
