"""Admission and update rules for audits. Pure functions, no infrastructure or store access.

Each check returns the RegistryError for the first rule it finds broken, or None.
"""

from typing import Callable, List, Optional, Tuple

from audit_registry.domain.errors import ErrorKind, RegistryError
from audit_registry.domain.models.audit import AuditCategory, AuditSubmission, MeasurementUnit

HASH_LENGTH = 32
MAX_WASTE_TYPE_LENGTH = 50
MAX_TEXT_LENGTH = 100
MAX_REDUCTION_METRIC = 100
MAX_VERIFICATION_LEVEL = 5
MAX_COMPLIANCE_SCORE = 100
# Amounts are unsigned 128-bit on the ledger side.
MAX_UINT = 2**128 - 1

_CATEGORIES = frozenset(c.value for c in AuditCategory)
_UNITS = frozenset(u.value for u in MeasurementUnit)


def _error(kind: ErrorKind, field: str, message: str) -> RegistryError:
    return RegistryError(kind=kind, field=field, message=message)


def _bounded_text(value: object, limit: int) -> bool:
    return isinstance(value, str) and 0 < len(value) <= limit


def check_capacity(next_audit_id: int, max_audits: int) -> Optional[RegistryError]:
    """Allocator must stay below the capacity ceiling."""
    if next_audit_id >= max_audits:
        return RegistryError(
            kind=ErrorKind.CAPACITY_EXCEEDED,
            message=f"registry is full: {next_audit_id} of {max_audits} audits admitted",
        )
    return None


def check_hash(data_hash: object) -> Optional[RegistryError]:
    if not isinstance(data_hash, (bytes, bytearray)) or len(data_hash) != HASH_LENGTH:
        return _error(ErrorKind.INVALID_HASH, "data_hash", f"data_hash must be exactly {HASH_LENGTH} bytes")
    return None


def check_tonnage(tonnage: int) -> Optional[RegistryError]:
    if not (0 < tonnage <= MAX_UINT):
        return _error(ErrorKind.INVALID_TONNAGE, "tonnage", f"tonnage must be positive and fit 128 bits, got {tonnage}")
    return None


def check_waste_type(waste_type: str) -> Optional[RegistryError]:
    if not _bounded_text(waste_type, MAX_WASTE_TYPE_LENGTH):
        return _error(
            ErrorKind.INVALID_WASTE_TYPE,
            "waste_type",
            f"waste_type must be 1-{MAX_WASTE_TYPE_LENGTH} characters",
        )
    return None


def check_reduction_metric(reduction_metric: int) -> Optional[RegistryError]:
    if not (0 <= reduction_metric <= MAX_REDUCTION_METRIC):
        return _error(
            ErrorKind.INVALID_REDUCTION_METRIC,
            "reduction_metric",
            f"reduction_metric must be between 0 and {MAX_REDUCTION_METRIC}, got {reduction_metric}",
        )
    return None


def check_period(period: int) -> Optional[RegistryError]:
    if not (0 < period <= MAX_UINT):
        return _error(ErrorKind.INVALID_PERIOD, "period", f"period must be positive and fit 128 bits, got {period}")
    return None


def check_category(category: str) -> Optional[RegistryError]:
    if category not in _CATEGORIES:
        return _error(
            ErrorKind.INVALID_CATEGORY,
            "category",
            f"category must be one of {sorted(_CATEGORIES)}, got {category!r}",
        )
    return None


def check_location(location: str) -> Optional[RegistryError]:
    if not _bounded_text(location, MAX_TEXT_LENGTH):
        return _error(ErrorKind.INVALID_LOCATION, "location", f"location must be 1-{MAX_TEXT_LENGTH} characters")
    return None


def check_unit(unit: str) -> Optional[RegistryError]:
    if unit not in _UNITS:
        return _error(ErrorKind.INVALID_UNIT, "unit", f"unit must be one of {sorted(_UNITS)}, got {unit!r}")
    return None


def check_source(source: str) -> Optional[RegistryError]:
    if not _bounded_text(source, MAX_TEXT_LENGTH):
        return _error(ErrorKind.INVALID_SOURCE, "source", f"source must be 1-{MAX_TEXT_LENGTH} characters")
    return None


def check_verification_level(verification_level: int) -> Optional[RegistryError]:
    if not (0 <= verification_level <= MAX_VERIFICATION_LEVEL):
        return _error(
            ErrorKind.INVALID_VERIFICATION_LEVEL,
            "verification_level",
            f"verification_level must be between 0 and {MAX_VERIFICATION_LEVEL}, got {verification_level}",
        )
    return None


def check_compliance_score(compliance_score: int) -> Optional[RegistryError]:
    if not (0 <= compliance_score <= MAX_COMPLIANCE_SCORE):
        return _error(
            ErrorKind.INVALID_COMPLIANCE_SCORE,
            "compliance_score",
            f"compliance_score must be between 0 and {MAX_COMPLIANCE_SCORE}, got {compliance_score}",
        )
    return None


def _field_checks(submission: AuditSubmission) -> List[Tuple[Callable, object]]:
    """Field rules in reporting order. Order is part of the contract."""
    return [
        (check_hash, submission.data_hash),
        (check_tonnage, submission.tonnage),
        (check_waste_type, submission.waste_type),
        (check_reduction_metric, submission.reduction_metric),
        (check_period, submission.period),
        (check_category, submission.category),
        (check_location, submission.location),
        (check_unit, submission.unit),
        (check_source, submission.source),
        (check_verification_level, submission.verification_level),
        (check_compliance_score, submission.compliance_score),
    ]


def validate_submission_fields(submission: AuditSubmission) -> Optional[RegistryError]:
    """Run the syntactic field rules; first failure wins."""
    for check, value in _field_checks(submission):
        error = check(value)
        if error is not None:
            return error
    return None


def validate_update_params(tonnage: int, reduction_metric: int) -> Optional[RegistryError]:
    """Update bounds. Both violations report the same kind, naming the offending field."""
    if not (0 < tonnage <= MAX_UINT):
        return _error(
            ErrorKind.INVALID_UPDATE_PARAM, "tonnage", f"tonnage must be positive and fit 128 bits, got {tonnage}"
        )
    if not (0 <= reduction_metric <= MAX_REDUCTION_METRIC):
        return _error(
            ErrorKind.INVALID_UPDATE_PARAM,
            "reduction_metric",
            f"reduction_metric must be between 0 and {MAX_REDUCTION_METRIC}, got {reduction_metric}",
        )
    return None


def validate_registry_principal(
    principal: str,
    current: Optional[str],
    burn_principal: str,
) -> Optional[RegistryError]:
    """Principal may be set once and never to the burn address. Burn check runs first."""
    if not principal or not principal.strip() or principal == burn_principal:
        return _error(
            ErrorKind.INVALID_CONFIG_VALUE,
            "registry_principal",
            f"registry principal {principal!r} is not a valid recipient",
        )
    if current is not None:
        return _error(
            ErrorKind.CONFIG_ALREADY_SET,
            "registry_principal",
            "registry principal is already set",
        )
    return None
