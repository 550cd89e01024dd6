"""Domain layer: models, schemas, validators, errors, results. Pure business logic only."""

from audit_registry.domain.errors import ErrorKind, RegistryError
from audit_registry.domain.exceptions import DomainError, InvariantViolationError
from audit_registry.domain.models import (
    AuditCategory,
    AuditRecord,
    AuditSubmission,
    AuditUpdateRecord,
    MeasurementUnit,
    RegistryConfig,
    TransferReceipt,
)
from audit_registry.domain.result import Err, Ok, Result

__all__ = [
    "AuditCategory",
    "AuditRecord",
    "AuditSubmission",
    "AuditUpdateRecord",
    "DomainError",
    "Err",
    "ErrorKind",
    "InvariantViolationError",
    "MeasurementUnit",
    "Ok",
    "RegistryConfig",
    "RegistryError",
    "Result",
    "TransferReceipt",
]
