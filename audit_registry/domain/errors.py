"""Registry error taxonomy. Errors are pure data returned in results, never raised."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Rejection reasons. Each kind maps to the numeric code clients rely on."""

    NOT_AUTHORIZED = "not_authorized"
    INVALID_HASH = "invalid_hash"
    INVALID_TONNAGE = "invalid_tonnage"
    INVALID_WASTE_TYPE = "invalid_waste_type"
    INVALID_REDUCTION_METRIC = "invalid_reduction_metric"
    AUDIT_ALREADY_EXISTS = "audit_already_exists"
    NOT_FOUND = "not_found"
    REGISTRY_NOT_VERIFIED = "registry_not_verified"
    INVALID_PERIOD = "invalid_period"
    INVALID_CATEGORY = "invalid_category"
    INVALID_UPDATE_PARAM = "invalid_update_param"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_LOCATION = "invalid_location"
    INVALID_UNIT = "invalid_unit"
    INVALID_SOURCE = "invalid_source"
    INVALID_VERIFICATION_LEVEL = "invalid_verification_level"
    INVALID_COMPLIANCE_SCORE = "invalid_compliance_score"
    CONFIG_ALREADY_SET = "config_already_set"
    INVALID_CONFIG_VALUE = "invalid_config_value"
    TRANSFER_FAILED = "transfer_failed"

    @property
    def code(self) -> int:
        return _ERROR_CODES[self]

    @property
    def is_validation(self) -> bool:
        """True for per-field submission validation kinds."""
        return self in VALIDATION_KINDS


_ERROR_CODES: Dict[ErrorKind, int] = {
    ErrorKind.NOT_AUTHORIZED: 100,
    ErrorKind.INVALID_HASH: 102,
    ErrorKind.INVALID_TONNAGE: 103,
    ErrorKind.INVALID_WASTE_TYPE: 104,
    ErrorKind.INVALID_REDUCTION_METRIC: 105,
    ErrorKind.AUDIT_ALREADY_EXISTS: 106,
    ErrorKind.NOT_FOUND: 107,
    ErrorKind.REGISTRY_NOT_VERIFIED: 109,
    ErrorKind.INVALID_PERIOD: 110,
    ErrorKind.INVALID_CATEGORY: 111,
    ErrorKind.INVALID_UPDATE_PARAM: 113,
    ErrorKind.CAPACITY_EXCEEDED: 114,
    ErrorKind.INVALID_LOCATION: 116,
    ErrorKind.INVALID_UNIT: 117,
    ErrorKind.INVALID_SOURCE: 118,
    ErrorKind.INVALID_VERIFICATION_LEVEL: 119,
    ErrorKind.INVALID_COMPLIANCE_SCORE: 120,
    ErrorKind.CONFIG_ALREADY_SET: 121,
    ErrorKind.INVALID_CONFIG_VALUE: 122,
    ErrorKind.TRANSFER_FAILED: 123,
}

VALIDATION_KINDS = frozenset(
    {
        ErrorKind.INVALID_HASH,
        ErrorKind.INVALID_TONNAGE,
        ErrorKind.INVALID_WASTE_TYPE,
        ErrorKind.INVALID_REDUCTION_METRIC,
        ErrorKind.INVALID_PERIOD,
        ErrorKind.INVALID_CATEGORY,
        ErrorKind.INVALID_LOCATION,
        ErrorKind.INVALID_UNIT,
        ErrorKind.INVALID_SOURCE,
        ErrorKind.INVALID_VERIFICATION_LEVEL,
        ErrorKind.INVALID_COMPLIANCE_SCORE,
    }
)


@dataclass(frozen=True)
class RegistryError:
    """Exact rejection reason for one operation. Immutable."""

    kind: ErrorKind
    message: str
    field: Optional[str] = None

    @property
    def code(self) -> int:
        return self.kind.code

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for API responses and JSON logging."""
        return {
            "error": self.kind.value,
            "code": self.code,
            "field": self.field,
            "detail": self.message,
        }
