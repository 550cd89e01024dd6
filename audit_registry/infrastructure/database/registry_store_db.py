"""DB-backed registry store. Persists audits, update history, config and fee receipts via SQLAlchemy."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from audit_registry.application.exceptions import PersistenceError
from audit_registry.domain.exceptions import InvariantViolationError
from audit_registry.domain.models.audit import (
    AuditCategory,
    AuditRecord,
    AuditUpdateRecord,
    MeasurementUnit,
)
from audit_registry.domain.models.registry import RegistryConfig, TransferReceipt
from audit_registry.infrastructure.database.models import (
    CONFIG_ROW_ID,
    AuditRow,
    AuditUpdateRow,
    FeeTransferRow,
    RegistryConfigRow,
)
from audit_registry.infrastructure.database.session import Base


def _to_record(orm: AuditRow) -> AuditRecord:
    return AuditRecord(
        audit_id=orm.audit_id,
        submitter=orm.submitter,
        data_hash=bytes(orm.data_hash),
        tonnage=orm.tonnage,
        waste_type=orm.waste_type,
        reduction_metric=orm.reduction_metric,
        timestamp=orm.timestamp,
        period=orm.period,
        category=AuditCategory(orm.category),
        location=orm.location,
        unit=MeasurementUnit(orm.unit),
        source=orm.source,
        verification_level=orm.verification_level,
        compliance_score=orm.compliance_score,
        status=orm.status,
    )


def _to_update(orm: AuditUpdateRow) -> AuditUpdateRecord:
    return AuditUpdateRecord(
        audit_id=orm.audit_id,
        tonnage=orm.tonnage,
        reduction_metric=orm.reduction_metric,
        timestamp=orm.timestamp,
        updater=orm.updater,
    )


def _to_config(orm: RegistryConfigRow) -> RegistryConfig:
    return RegistryConfig(
        registry_principal=orm.registry_principal,
        submission_fee=orm.submission_fee,
        max_audits=orm.max_audits,
    )


def _to_receipt(orm: FeeTransferRow) -> TransferReceipt:
    return TransferReceipt(
        audit_id=orm.audit_id,
        amount=orm.amount,
        sender=orm.sender,
        recipient=orm.recipient,
        timestamp=orm.timestamp,
    )


class DbRegistryTransaction:
    """One database transaction. The config row is locked FOR UPDATE on first read."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._config_row: Optional[RegistryConfigRow] = None

    async def _config(self) -> RegistryConfigRow:
        if self._config_row is None:
            orm = await self._session.get(RegistryConfigRow, CONFIG_ROW_ID, with_for_update=True)
            if orm is None:
                raise PersistenceError("registry store is not initialized")
            self._config_row = orm
        return self._config_row

    async def get_config(self) -> RegistryConfig:
        return _to_config(await self._config())

    async def next_audit_id(self) -> int:
        return (await self._config()).next_audit_id

    async def hash_exists(self, data_hash: bytes) -> bool:
        stmt = select(AuditRow.audit_id).where(AuditRow.data_hash == data_hash)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        orm = await self._session.get(AuditRow, audit_id)
        return _to_record(orm) if orm is not None else None

    async def insert_audit(self, record: AuditRecord, receipt: TransferReceipt) -> None:
        config = await self._config()
        if record.audit_id != config.next_audit_id:
            raise InvariantViolationError(
                f"audit id {record.audit_id} does not match allocator {config.next_audit_id}"
            )
        if config.next_audit_id >= config.max_audits:
            raise InvariantViolationError("allocator would exceed max_audits")
        self._session.add(
            AuditRow(
                audit_id=record.audit_id,
                submitter=record.submitter,
                data_hash=record.data_hash,
                tonnage=record.tonnage,
                waste_type=record.waste_type,
                reduction_metric=record.reduction_metric,
                timestamp=record.timestamp,
                period=record.period,
                category=record.category.value,
                location=record.location,
                unit=record.unit.value,
                source=record.source,
                verification_level=record.verification_level,
                compliance_score=record.compliance_score,
                status=record.status,
            )
        )
        # Audit row must exist before the receipt that references it.
        await self._session.flush()
        self._session.add(
            FeeTransferRow(
                audit_id=receipt.audit_id,
                amount=receipt.amount,
                sender=receipt.sender,
                recipient=receipt.recipient,
                timestamp=receipt.timestamp,
            )
        )
        config.next_audit_id = config.next_audit_id + 1
        await self._session.flush()

    async def replace_audit(self, record: AuditRecord, update: AuditUpdateRecord) -> None:
        orm = await self._session.get(AuditRow, record.audit_id)
        if orm is None:
            raise InvariantViolationError(f"audit {record.audit_id} does not exist")
        if orm.submitter != record.submitter or bytes(orm.data_hash) != record.data_hash:
            raise InvariantViolationError(f"immutable fields of audit {record.audit_id} changed")
        orm.tonnage = record.tonnage
        orm.reduction_metric = record.reduction_metric
        orm.timestamp = record.timestamp

        existing = await self._session.get(AuditUpdateRow, update.audit_id)
        if existing is None:
            self._session.add(
                AuditUpdateRow(
                    audit_id=update.audit_id,
                    tonnage=update.tonnage,
                    reduction_metric=update.reduction_metric,
                    timestamp=update.timestamp,
                    updater=update.updater,
                )
            )
        else:
            existing.tonnage = update.tonnage
            existing.reduction_metric = update.reduction_metric
            existing.timestamp = update.timestamp
            existing.updater = update.updater
        await self._session.flush()

    async def save_config(self, config: RegistryConfig) -> None:
        orm = await self._config()
        if orm.registry_principal is not None and config.registry_principal != orm.registry_principal:
            raise InvariantViolationError("registry principal is already latched")
        orm.registry_principal = config.registry_principal
        orm.submission_fee = config.submission_fee
        orm.max_audits = config.max_audits
        await self._session.flush()


class DbRegistryStore:
    """
    Persists the registry to a relational database. Implements RegistryStore protocol.
    Every write operation is one database transaction, including the fee receipt.
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._engine = engine
        self._session_factory = session_factory

    async def initialize(self, default_config: RegistryConfig) -> RegistryConfig:
        """Create tables and seed the config row if absent. Existing config wins over defaults."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            async with self._session_factory() as session:
                async with session.begin():
                    orm = await session.get(RegistryConfigRow, CONFIG_ROW_ID)
                    if orm is None:
                        orm = RegistryConfigRow(
                            id=CONFIG_ROW_ID,
                            registry_principal=default_config.registry_principal,
                            submission_fee=default_config.submission_fee,
                            max_audits=default_config.max_audits,
                            next_audit_id=0,
                        )
                        session.add(orm)
                    return _to_config(orm)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Registry store initialization failed: {e}") from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DbRegistryTransaction]:
        """Commit on clean exit; roll back on any exception raised inside the block."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield DbRegistryTransaction(session)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Registry transaction failed: {e}") from e

    @asynccontextmanager
    async def _read_session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(f"Registry read failed: {e}") from e

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        async with self._read_session() as session:
            orm = await session.get(AuditRow, audit_id)
            return _to_record(orm) if orm is not None else None

    async def get_audit_update(self, audit_id: int) -> Optional[AuditUpdateRecord]:
        async with self._read_session() as session:
            orm = await session.get(AuditUpdateRow, audit_id)
            return _to_update(orm) if orm is not None else None

    async def audit_count(self) -> int:
        async with self._read_session() as session:
            orm = await session.get(RegistryConfigRow, CONFIG_ROW_ID)
            return orm.next_audit_id if orm is not None else 0

    async def hash_exists(self, data_hash: bytes) -> bool:
        async with self._read_session() as session:
            stmt = select(AuditRow.audit_id).where(AuditRow.data_hash == data_hash)
            result = await session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def get_config(self) -> RegistryConfig:
        async with self._read_session() as session:
            orm = await session.get(RegistryConfigRow, CONFIG_ROW_ID)
            if orm is None:
                raise PersistenceError("registry store is not initialized")
            return _to_config(orm)

    async def list_transfers(self) -> List[TransferReceipt]:
        async with self._read_session() as session:
            stmt = select(FeeTransferRow).order_by(FeeTransferRow.audit_id)
            result = await session.execute(stmt)
            return [_to_receipt(orm) for orm in result.scalars().all()]

    async def dispose(self) -> None:
        await self._engine.dispose()
