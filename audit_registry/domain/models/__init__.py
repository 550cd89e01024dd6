"""Domain models. Pure business entities."""

from audit_registry.domain.models.audit import (
    AuditCategory,
    AuditRecord,
    AuditSubmission,
    AuditUpdateRecord,
    MeasurementUnit,
)
from audit_registry.domain.models.registry import (
    BURN_PRINCIPAL,
    DEFAULT_MAX_AUDITS,
    DEFAULT_SUBMISSION_FEE,
    RegistryConfig,
    TransferReceipt,
)

__all__ = [
    "AuditCategory",
    "AuditRecord",
    "AuditSubmission",
    "AuditUpdateRecord",
    "BURN_PRINCIPAL",
    "DEFAULT_MAX_AUDITS",
    "DEFAULT_SUBMISSION_FEE",
    "MeasurementUnit",
    "RegistryConfig",
    "TransferReceipt",
]
