"""Tests for API middleware: correlation ID, caller required on writes, response headers."""

import logging

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_correlation_id_generated(client: AsyncClient):
    """When X-Correlation-ID is not sent, response has a generated correlation ID."""
    r = await client.get("/health")
    assert r.status_code == 200
    assert "X-Correlation-ID" in r.headers
    assert len(r.headers["X-Correlation-ID"]) > 0


@pytest.mark.asyncio
async def test_correlation_id_preserved_when_passed(client: AsyncClient):
    """When X-Correlation-ID is sent, the same value is returned in response."""
    correlation_id = "my-correlation-123"
    r = await client.get("/health", headers={"X-Correlation-ID": correlation_id})
    assert r.status_code == 200
    assert r.headers.get("X-Correlation-ID") == correlation_id
    assert r.json().get("correlation_id") == correlation_id


@pytest.mark.asyncio
async def test_caller_required_on_writes(client: AsyncClient, audit_body):
    """Mutating requests without X-Caller-ID are rejected with 400."""
    r = await client.post("/audits", json=audit_body)
    assert r.status_code == 400
    assert "X-Caller-ID" in r.json()["detail"]


@pytest.mark.asyncio
async def test_caller_optional_on_reads(client: AsyncClient):
    r = await client.get("/audits/count")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_health_reports_caller(client: AsyncClient, submitter_headers):
    r = await client.get("/health", headers=submitter_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["caller"] == "ST1TEST"


@pytest.mark.asyncio
async def test_request_audit_is_logged_with_structured_fields(client: AsyncClient, submitter_headers, caplog):
    caplog.set_level(logging.INFO, logger="audit_registry.api.middleware")
    r = await client.get("/audits/count", headers={**submitter_headers, "X-Correlation-ID": "corr-1"})
    assert r.status_code == 200

    records = [rec for rec in caplog.records if rec.getMessage() == "request_audit"]
    assert len(records) == 1
    record = records[0]
    assert record.path == "/audits/count"
    assert record.method == "GET"
    assert record.status_code == 200
    assert record.caller == "ST1TEST"
    assert record.correlation_id == "corr-1"
