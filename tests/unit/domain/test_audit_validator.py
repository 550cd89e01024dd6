"""Admission rule ordering and per-field rejections. Pure functions, no store."""

from dataclasses import replace

import pytest

from audit_registry.domain.errors import ErrorKind
from audit_registry.domain.models.audit import AuditSubmission
from audit_registry.domain.validators.audit_validator import (
    MAX_UINT,
    check_capacity,
    validate_registry_principal,
    validate_submission_fields,
    validate_update_params,
)

BURN = "SP000000000000000000002Q6VF78"


def _submission(**overrides) -> AuditSubmission:
    base = AuditSubmission(
        data_hash=bytes([1]) * 32,
        tonnage=100,
        waste_type="Plastic",
        reduction_metric=20,
        period=1,
        category="recyclable",
        location="CityA",
        unit="ton",
        source="FactoryX",
        verification_level=3,
        compliance_score=85,
    )
    return replace(base, **overrides)


def test_valid_submission_passes():
    assert validate_submission_fields(_submission()) is None


@pytest.mark.parametrize(
    "overrides, kind",
    [
        ({"data_hash": bytes(31)}, ErrorKind.INVALID_HASH),
        ({"data_hash": bytes(33)}, ErrorKind.INVALID_HASH),
        ({"tonnage": 0}, ErrorKind.INVALID_TONNAGE),
        ({"tonnage": 2**128}, ErrorKind.INVALID_TONNAGE),
        ({"waste_type": ""}, ErrorKind.INVALID_WASTE_TYPE),
        ({"waste_type": "x" * 51}, ErrorKind.INVALID_WASTE_TYPE),
        ({"reduction_metric": 101}, ErrorKind.INVALID_REDUCTION_METRIC),
        ({"reduction_metric": -1}, ErrorKind.INVALID_REDUCTION_METRIC),
        ({"period": 0}, ErrorKind.INVALID_PERIOD),
        ({"period": 2**128}, ErrorKind.INVALID_PERIOD),
        ({"category": "invalid"}, ErrorKind.INVALID_CATEGORY),
        ({"location": "y" * 101}, ErrorKind.INVALID_LOCATION),
        ({"unit": "oz"}, ErrorKind.INVALID_UNIT),
        ({"source": ""}, ErrorKind.INVALID_SOURCE),
        ({"verification_level": 6}, ErrorKind.INVALID_VERIFICATION_LEVEL),
        ({"compliance_score": 101}, ErrorKind.INVALID_COMPLIANCE_SCORE),
    ],
)
def test_each_field_rule_reports_its_kind(overrides, kind):
    error = validate_submission_fields(_submission(**overrides))
    assert error is not None
    assert error.kind == kind
    assert error.kind.is_validation


def test_boundaries_are_inclusive():
    s = _submission(
        waste_type="w" * 50,
        location="l" * 100,
        source="s" * 100,
        reduction_metric=100,
        verification_level=5,
        compliance_score=100,
    )
    assert validate_submission_fields(s) is None
    assert validate_submission_fields(_submission(tonnage=MAX_UINT, period=MAX_UINT)) is None


def test_first_failing_rule_wins():
    """Hash is checked before tonnage, tonnage before category."""
    error = validate_submission_fields(_submission(data_hash=b"", tonnage=0, category="nope"))
    assert error.kind == ErrorKind.INVALID_HASH
    error = validate_submission_fields(_submission(tonnage=0, category="nope"))
    assert error.kind == ErrorKind.INVALID_TONNAGE
    error = validate_submission_fields(_submission(unit="oz", compliance_score=500))
    assert error.kind == ErrorKind.INVALID_UNIT


def test_error_carries_field_and_code():
    error = validate_submission_fields(_submission(category="invalid"))
    assert error.field == "category"
    assert error.code == 111


def test_capacity():
    assert check_capacity(9, 10) is None
    error = check_capacity(10, 10)
    assert error.kind == ErrorKind.CAPACITY_EXCEEDED
    assert error.code == 114


def test_update_params():
    assert validate_update_params(150, 25) is None
    assert validate_update_params(0, 25).kind == ErrorKind.INVALID_UPDATE_PARAM
    assert validate_update_params(MAX_UINT + 1, 25).kind == ErrorKind.INVALID_UPDATE_PARAM
    assert validate_update_params(MAX_UINT, 25) is None
    error = validate_update_params(10, 101)
    assert error.kind == ErrorKind.INVALID_UPDATE_PARAM
    assert error.field == "reduction_metric"


def test_registry_principal_rules():
    assert validate_registry_principal("ST2TEST", None, BURN) is None
    assert validate_registry_principal(BURN, None, BURN).kind == ErrorKind.INVALID_CONFIG_VALUE
    assert validate_registry_principal("", None, BURN).kind == ErrorKind.INVALID_CONFIG_VALUE
    assert validate_registry_principal("ST3", "ST2TEST", BURN).kind == ErrorKind.CONFIG_ALREADY_SET
    # Burn check runs before the latch check
    assert validate_registry_principal(BURN, "ST2TEST", BURN).kind == ErrorKind.INVALID_CONFIG_VALUE
