"""Domain model for audit records. Pure business semantics, no ORM or infrastructure."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class AuditCategory(str, Enum):
    """Waste category. Fixed enumeration."""

    ORGANIC = "organic"
    RECYCLABLE = "recyclable"
    HAZARDOUS = "hazardous"


class MeasurementUnit(str, Enum):
    """Unit the tonnage is reported in. Fixed enumeration."""

    KG = "kg"
    TON = "ton"
    LB = "lb"


@dataclass(frozen=True)
class AuditSubmission:
    """
    Raw submission as received from a caller. Not yet validated: fields may be
    out of range or outside the enumerations. Submitter comes from the caller
    identity, never from the payload.
    """

    data_hash: bytes
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


@dataclass(frozen=True)
class AuditRecord:
    """
    Admitted audit. Immutable snapshot: the store hands out copies, and updates
    replace the stored value rather than mutating it.
    Only tonnage, reduction_metric and timestamp ever change after creation.
    """

    audit_id: int
    submitter: str
    data_hash: bytes
    tonnage: int
    waste_type: str
    reduction_metric: int
    timestamp: int
    period: int
    category: AuditCategory
    location: str
    unit: MeasurementUnit
    source: str
    verification_level: int
    compliance_score: int
    status: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging and event payloads."""
        return {
            "audit_id": self.audit_id,
            "submitter": self.submitter,
            "data_hash": self.data_hash.hex(),
            "tonnage": self.tonnage,
            "waste_type": self.waste_type,
            "reduction_metric": self.reduction_metric,
            "timestamp": self.timestamp,
            "period": self.period,
            "category": self.category.value,
            "location": self.location,
            "unit": self.unit.value,
            "source": self.source,
            "verification_level": self.verification_level,
            "compliance_score": self.compliance_score,
            "status": self.status,
        }


@dataclass(frozen=True)
class AuditUpdateRecord:
    """Last update applied to an audit. At most one per audit id; overwritten on each update."""

    audit_id: int
    tonnage: int
    reduction_metric: int
    timestamp: int
    updater: str
