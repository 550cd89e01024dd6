"""Pydantic schemas for the registry API. Shape and types only: range rules live in the
domain validators so every rejection carries its registry error code."""

from typing import Optional

from pydantic import BaseModel, Field

from audit_registry.domain.models.audit import AuditRecord, AuditSubmission, AuditUpdateRecord
from audit_registry.domain.models.registry import RegistryConfig, TransferReceipt


def decode_hash(value: str) -> bytes:
    """Hex to bytes. Undecodable input becomes an empty hash, which fails the length rule."""
    try:
        return bytes.fromhex(value.removeprefix("0x"))
    except ValueError:
        return b""


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class AuditSubmitRequest(BaseModel):
    """Request schema for submitting an audit. Submitter comes from the caller header."""

    data_hash: str = Field(..., description="Hex-encoded 32-byte content hash")
    tonnage: int
    waste_type: str
    reduction_metric: int
    period: int
    category: str
    location: str
    unit: str
    source: str
    verification_level: int
    compliance_score: int

    def to_submission(self) -> AuditSubmission:
        return AuditSubmission(
            data_hash=decode_hash(self.data_hash),
            tonnage=self.tonnage,
            waste_type=self.waste_type,
            reduction_metric=self.reduction_metric,
            period=self.period,
            category=self.category,
            location=self.location,
            unit=self.unit,
            source=self.source,
            verification_level=self.verification_level,
            compliance_score=self.compliance_score,
        )


class AuditUpdateRequest(BaseModel):
    """Request schema for amending an audit. Only these two fields are mutable."""

    tonnage: int
    reduction_metric: int


class RegistryPrincipalRequest(BaseModel):
    principal: str


class SubmissionFeeRequest(BaseModel):
    fee: int


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class SubmitAuditResponse(BaseModel):
    audit_id: int


class AuditResponse(BaseModel):
    """Read model for an audit snapshot. Hash rendered as hex."""

    audit_id: int
    submitter: str
    data_hash: str
    tonnage: int
    waste_type: str
    reduction_metric: int
    timestamp: int
    period: int
    category: str
    location: str
    unit: str
    source: str
    verification_level: int
    compliance_score: int
    status: bool

    @classmethod
    def from_record(cls, record: AuditRecord) -> "AuditResponse":
        return cls(**record.to_dict())


class AuditUpdateResponse(BaseModel):
    audit_id: int
    tonnage: int
    reduction_metric: int
    timestamp: int
    updater: str

    @classmethod
    def from_record(cls, record: AuditUpdateRecord) -> "AuditUpdateResponse":
        return cls(
            audit_id=record.audit_id,
            tonnage=record.tonnage,
            reduction_metric=record.reduction_metric,
            timestamp=record.timestamp,
            updater=record.updater,
        )


class AuditCountResponse(BaseModel):
    count: int


class AuditExistenceResponse(BaseModel):
    data_hash: str
    exists: bool


class RegistryConfigResponse(BaseModel):
    registry_principal: Optional[str] = None
    submission_fee: int
    max_audits: int

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RegistryConfigResponse":
        return cls(
            registry_principal=config.registry_principal,
            submission_fee=config.submission_fee,
            max_audits=config.max_audits,
        )


class TransferResponse(BaseModel):
    audit_id: int
    amount: int
    sender: str
    recipient: str
    timestamp: int

    @classmethod
    def from_receipt(cls, receipt: TransferReceipt) -> "TransferResponse":
        return cls(
            audit_id=receipt.audit_id,
            amount=receipt.amount,
            sender=receipt.sender,
            recipient=receipt.recipient,
            timestamp=receipt.timestamp,
        )


class ErrorResponse(BaseModel):
    """Error body. `error` and `code` identify the exact rejection reason."""

    detail: str
    error: Optional[str] = None
    code: Optional[int] = None
    field: Optional[str] = None
