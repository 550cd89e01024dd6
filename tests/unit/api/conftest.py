"""Fixtures for API unit tests: in-memory registry service, AsyncClient with overrides."""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from audit_registry.application.registry_service import RegistryService
from audit_registry.infrastructure.clock import ManualClock
from audit_registry.infrastructure.memory.ledger import InMemoryLedger
from audit_registry.infrastructure.memory.registry_oracle_static import StaticRegistryOracle
from audit_registry.infrastructure.memory.registry_store_memory import InMemoryRegistryStore
from audit_registry.main import app

SUBMITTER = "ST1TEST"
REGISTRY = "ST2TEST"


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def oracle():
    return StaticRegistryOracle({SUBMITTER})


@pytest.fixture
def registry_service(ledger, oracle):
    """Fresh in-memory registry per test so ids start at 0."""
    return RegistryService(
        store=InMemoryRegistryStore(),
        oracle=oracle,
        value_transfer=ledger,
        clock=ManualClock(),
        logger=logging.getLogger("tests.registry"),
    )


@pytest.fixture
def app_with_overrides(registry_service):
    """App with the registry service overridden for testing."""
    from audit_registry.api import dependencies

    app.dependency_overrides[dependencies.get_registry_service] = lambda: registry_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def submitter_headers():
    return {"X-Caller-ID": SUBMITTER}


@pytest.fixture
def audit_body():
    return {
        "data_hash": "01" * 32,
        "tonnage": 100,
        "waste_type": "Plastic",
        "reduction_metric": 20,
        "period": 1,
        "category": "recyclable",
        "location": "CityA",
        "unit": "ton",
        "source": "FactoryX",
        "verification_level": 3,
        "compliance_score": 85,
    }
