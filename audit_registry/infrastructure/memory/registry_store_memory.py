"""In-memory registry store. Arena of audits keyed by id plus a hash index, maintained together."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from audit_registry.domain.exceptions import InvariantViolationError
from audit_registry.domain.models.audit import AuditRecord, AuditUpdateRecord
from audit_registry.domain.models.registry import RegistryConfig, TransferReceipt


class _MemoryTransaction:
    """
    Staged writes over an InMemoryRegistryStore. Reads see committed state overlaid
    with this transaction's own writes. Nothing touches the store until _apply().
    """

    def __init__(self, store: "InMemoryRegistryStore") -> None:
        self._store = store
        self._config = store._config
        self._next_audit_id = store._next_audit_id
        self._audits: Dict[int, AuditRecord] = {}
        self._hash_index: Dict[bytes, int] = {}
        self._updates: Dict[int, AuditUpdateRecord] = {}
        self._receipts: List[TransferReceipt] = []

    async def get_config(self) -> RegistryConfig:
        return self._config

    async def next_audit_id(self) -> int:
        return self._next_audit_id

    async def hash_exists(self, data_hash: bytes) -> bool:
        return data_hash in self._hash_index or data_hash in self._store._hash_index

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        if audit_id in self._audits:
            return self._audits[audit_id]
        return self._store._audits.get(audit_id)

    async def insert_audit(self, record: AuditRecord, receipt: TransferReceipt) -> None:
        if record.audit_id != self._next_audit_id:
            raise InvariantViolationError(
                f"audit id {record.audit_id} does not match allocator {self._next_audit_id}"
            )
        if self._next_audit_id >= self._config.max_audits:
            raise InvariantViolationError("allocator would exceed max_audits")
        if await self.hash_exists(record.data_hash):
            raise InvariantViolationError(f"hash {record.data_hash.hex()} already indexed")
        if receipt.audit_id != record.audit_id:
            raise InvariantViolationError("receipt does not belong to the inserted audit")
        self._audits[record.audit_id] = record
        self._hash_index[record.data_hash] = record.audit_id
        self._receipts.append(receipt)
        self._next_audit_id += 1

    async def replace_audit(self, record: AuditRecord, update: AuditUpdateRecord) -> None:
        existing = await self.get_audit(record.audit_id)
        if existing is None:
            raise InvariantViolationError(f"audit {record.audit_id} does not exist")
        if existing.submitter != record.submitter or existing.data_hash != record.data_hash:
            raise InvariantViolationError(f"immutable fields of audit {record.audit_id} changed")
        self._audits[record.audit_id] = record
        self._updates[record.audit_id] = update

    async def save_config(self, config: RegistryConfig) -> None:
        current = self._config.registry_principal
        if current is not None and config.registry_principal != current:
            raise InvariantViolationError("registry principal is already latched")
        self._config = config

    def _apply(self) -> None:
        # No awaits: the whole commit is observed atomically by other tasks.
        store = self._store
        store._audits.update(self._audits)
        store._hash_index.update(self._hash_index)
        store._updates.update(self._updates)
        store._receipts.extend(self._receipts)
        store._next_audit_id = self._next_audit_id
        store._config = self._config


class InMemoryRegistryStore:
    """
    Process-local RegistryStore. Records are frozen dataclasses, so every read is a
    snapshot that callers cannot use to mutate stored state.
    """

    def __init__(self, config: Optional[RegistryConfig] = None) -> None:
        self._config = config or RegistryConfig()
        self._seeded = config is not None
        self._audits: Dict[int, AuditRecord] = {}
        self._hash_index: Dict[bytes, int] = {}
        self._updates: Dict[int, AuditUpdateRecord] = {}
        self._receipts: List[TransferReceipt] = []
        self._next_audit_id = 0

    async def initialize(self, default_config: RegistryConfig) -> RegistryConfig:
        if not self._seeded:
            self._config = default_config
            self._seeded = True
        return self._config

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_MemoryTransaction]:
        """Commit staged writes on clean exit; an exception discards them."""
        tx = _MemoryTransaction(self)
        yield tx
        tx._apply()

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        return self._audits.get(audit_id)

    async def get_audit_update(self, audit_id: int) -> Optional[AuditUpdateRecord]:
        return self._updates.get(audit_id)

    async def audit_count(self) -> int:
        return self._next_audit_id

    async def hash_exists(self, data_hash: bytes) -> bool:
        return data_hash in self._hash_index

    async def get_config(self) -> RegistryConfig:
        return self._config

    async def list_transfers(self) -> List[TransferReceipt]:
        return list(self._receipts)
