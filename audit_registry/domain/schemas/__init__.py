"""Domain schemas. Request/response and serialization."""

from audit_registry.domain.schemas.audit import (
    AuditCountResponse,
    AuditExistenceResponse,
    AuditResponse,
    AuditSubmitRequest,
    AuditUpdateRequest,
    AuditUpdateResponse,
    ErrorResponse,
    RegistryConfigResponse,
    RegistryPrincipalRequest,
    SubmissionFeeRequest,
    SubmitAuditResponse,
    TransferResponse,
    decode_hash,
)

__all__ = [
    "AuditCountResponse",
    "AuditExistenceResponse",
    "AuditResponse",
    "AuditSubmitRequest",
    "AuditUpdateRequest",
    "AuditUpdateResponse",
    "ErrorResponse",
    "RegistryConfigResponse",
    "RegistryPrincipalRequest",
    "SubmissionFeeRequest",
    "SubmitAuditResponse",
    "TransferResponse",
    "decode_hash",
]
