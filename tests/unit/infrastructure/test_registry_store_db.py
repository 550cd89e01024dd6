"""DbRegistryStore against SQLite in-memory: transactions, rollback, persistence across stores."""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from audit_registry.application.exceptions import PersistenceError
from audit_registry.application.registry_service import RegistryService
from audit_registry.domain.exceptions import InvariantViolationError
from audit_registry.domain.models.audit import (
    AuditCategory,
    AuditRecord,
    AuditSubmission,
    AuditUpdateRecord,
    MeasurementUnit,
)
from audit_registry.domain.models.registry import RegistryConfig, TransferReceipt
from audit_registry.infrastructure.clock import ManualClock
from audit_registry.infrastructure.database.registry_store_db import DbRegistryStore
from audit_registry.infrastructure.database.session import create_engine, create_session_factory
from audit_registry.infrastructure.memory.ledger import InMemoryLedger
from audit_registry.infrastructure.memory.registry_oracle_static import StaticRegistryOracle

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _record(audit_id: int, fill: int, tonnage: int = 100) -> AuditRecord:
    return AuditRecord(
        audit_id=audit_id,
        submitter="ST1",
        data_hash=bytes([fill]) * 32,
        tonnage=tonnage,
        waste_type="Metal",
        reduction_metric=30,
        timestamp=5,
        period=2,
        category=AuditCategory.HAZARDOUS,
        location="CityB",
        unit=MeasurementUnit.LB,
        source="PlantY",
        verification_level=4,
        compliance_score=90,
    )


def _receipt(audit_id: int, amount: int = 500) -> TransferReceipt:
    return TransferReceipt(audit_id=audit_id, amount=amount, sender="ST1", recipient="ST2", timestamp=5)


@pytest.fixture
async def engine():
    engine = create_engine(TEST_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest.fixture
async def store(engine):
    store = DbRegistryStore(engine=engine, session_factory=create_session_factory(engine))
    await store.initialize(RegistryConfig(registry_principal="ST2"))
    return store


async def test_insert_and_read_back(store):
    async with store.transaction() as tx:
        assert await tx.next_audit_id() == 0
        await tx.insert_audit(_record(0, 1), _receipt(0))

    record = await store.get_audit(0)
    assert record == _record(0, 1)
    assert await store.audit_count() == 1
    assert await store.hash_exists(bytes([1]) * 32)
    assert not await store.hash_exists(bytes([2]) * 32)
    assert await store.list_transfers() == [_receipt(0)]


async def test_rollback_on_exception(store):
    with pytest.raises(RuntimeError):
        async with store.transaction() as tx:
            await tx.insert_audit(_record(0, 1), _receipt(0))
            raise RuntimeError("transfer failed")
    assert await store.audit_count() == 0
    assert await store.get_audit(0) is None
    assert await store.list_transfers() == []


async def test_replace_overwrites_update_row(store):
    async with store.transaction() as tx:
        await tx.insert_audit(_record(0, 1), _receipt(0))
    for tonnage, ts in ((150, 6), (175, 7)):
        async with store.transaction() as tx:
            current = await tx.get_audit(0)
            updated = replace(current, tonnage=tonnage, timestamp=ts)
            await tx.replace_audit(
                updated,
                AuditUpdateRecord(audit_id=0, tonnage=tonnage, reduction_metric=30, timestamp=ts, updater="ST1"),
            )
    record = await store.get_audit(0)
    assert record.tonnage == 175
    assert record.timestamp == 7
    update = await store.get_audit_update(0)
    assert (update.tonnage, update.timestamp, update.updater) == (175, 7, "ST1")


async def test_config_persists_across_store_instances(engine, store):
    async with store.transaction() as tx:
        config = await tx.get_config()
        await tx.save_config(config.with_fee(1000))
        await tx.insert_audit(_record(0, 1), _receipt(0, amount=1000))

    reopened = DbRegistryStore(engine=engine, session_factory=create_session_factory(engine))
    config = await reopened.initialize(RegistryConfig(submission_fee=1))
    assert config.registry_principal == "ST2"
    assert config.submission_fee == 1000
    assert await reopened.audit_count() == 1


async def test_principal_latch_guard(store):
    async with store.transaction() as tx:
        with pytest.raises(InvariantViolationError):
            await tx.save_config(RegistryConfig(registry_principal="ST3"))


async def test_duplicate_hash_is_persistence_error(store):
    async with store.transaction() as tx:
        await tx.insert_audit(_record(0, 1), _receipt(0))
    with pytest.raises(PersistenceError):
        async with store.transaction() as tx:
            await tx.insert_audit(_record(1, 1), _receipt(1))
    assert await store.audit_count() == 1


async def test_uninitialized_store_reports_persistence_error(engine):
    store = DbRegistryStore(engine=engine, session_factory=create_session_factory(engine))
    with pytest.raises(PersistenceError):
        await store.get_config()


async def test_amounts_beyond_64_bits_round_trip(store):
    big = 2**64
    async with store.transaction() as tx:
        config = await tx.get_config()
        await tx.save_config(config.with_fee(10**20))
        await tx.insert_audit(_record(0, 1, tonnage=big), _receipt(0, amount=10**20))

    assert (await store.get_audit(0)).tonnage == big
    assert (await store.get_config()).submission_fee == 10**20
    assert [r.amount for r in await store.list_transfers()] == [10**20]


async def test_service_admits_wide_values_on_database(store):
    ledger = InMemoryLedger()
    service = RegistryService(
        store=store,
        oracle=StaticRegistryOracle({"ST1"}),
        value_transfer=ledger,
        clock=ManualClock(),
        logger=MagicMock(),
    )
    assert (await service.set_submission_fee("ST1", 10**20)).is_ok

    submission = AuditSubmission(
        data_hash=bytes([9]) * 32,
        tonnage=2**64,
        waste_type="Plastic",
        reduction_metric=20,
        period=2**70,
        category="recyclable",
        location="CityA",
        unit="ton",
        source="FactoryX",
        verification_level=3,
        compliance_score=85,
    )
    result = await service.submit_audit("ST1", submission)

    assert result.is_ok
    record = await service.get_audit(result.value)
    assert (record.tonnage, record.period) == (2**64, 2**70)
    assert [t.amount for t in ledger.transfers] == [10**20]
