"""Registry store protocol. Application layer depends on this; infrastructure implements it."""

from typing import AsyncContextManager, List, Optional, Protocol

from audit_registry.domain.models.audit import AuditRecord, AuditUpdateRecord
from audit_registry.domain.models.registry import RegistryConfig, TransferReceipt


class RegistryTransaction(Protocol):
    """
    Unit of work over the registry. Writes are staged and become visible together
    when the transaction commits; an exception inside the block discards them.
    """

    async def get_config(self) -> RegistryConfig:
        ...

    async def next_audit_id(self) -> int:
        """Allocator value: the id the next admitted audit receives, and the current count."""
        ...

    async def hash_exists(self, data_hash: bytes) -> bool:
        ...

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        ...

    async def insert_audit(self, record: AuditRecord, receipt: TransferReceipt) -> None:
        """Stage a new audit with its fee receipt. record.audit_id must equal next_audit_id()."""
        ...

    async def replace_audit(self, record: AuditRecord, update: AuditUpdateRecord) -> None:
        """Stage an amended audit and overwrite its single update record."""
        ...

    async def save_config(self, config: RegistryConfig) -> None:
        ...


class RegistryStore(Protocol):
    """Durable owner of audits, the hash index, the allocator, configuration and receipts."""

    async def initialize(self, default_config: RegistryConfig) -> RegistryConfig:
        """Create storage if needed and seed configuration once. Returns the effective config."""
        ...

    def transaction(self) -> AsyncContextManager[RegistryTransaction]:
        ...

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        ...

    async def get_audit_update(self, audit_id: int) -> Optional[AuditUpdateRecord]:
        ...

    async def audit_count(self) -> int:
        ...

    async def hash_exists(self, data_hash: bytes) -> bool:
        ...

    async def get_config(self) -> RegistryConfig:
        ...

    async def list_transfers(self) -> List[TransferReceipt]:
        """Fee receipts ordered by audit id."""
        ...
