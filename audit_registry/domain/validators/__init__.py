"""Domain validators. Pure validation functions."""

from audit_registry.domain.validators.audit_validator import (
    HASH_LENGTH,
    check_capacity,
    validate_registry_principal,
    validate_submission_fields,
    validate_update_params,
)

__all__ = [
    "HASH_LENGTH",
    "check_capacity",
    "validate_registry_principal",
    "validate_submission_fields",
    "validate_update_params",
]
