# Application layer: registry service and the store/collaborator protocols it orchestrates.

from audit_registry.application.exceptions import (
    ApplicationError,
    PersistenceError,
    TransferError,
)
from audit_registry.application.interfaces import (
    AuditEventPublisher,
    LogicalClock,
    RegistryOracle,
    ValueTransfer,
)
from audit_registry.application.registry_service import RegistryService
from audit_registry.application.registry_store import RegistryStore, RegistryTransaction

__all__ = [
    "ApplicationError",
    "AuditEventPublisher",
    "LogicalClock",
    "PersistenceError",
    "RegistryOracle",
    "RegistryService",
    "RegistryStore",
    "RegistryTransaction",
    "TransferError",
    "ValueTransfer",
]
