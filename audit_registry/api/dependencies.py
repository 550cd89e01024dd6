"""FastAPI dependency injection: registry service wiring from settings, caller, correlation_id."""

import asyncio
import logging
from typing import Optional

from fastapi import Request

from audit_registry.application.interfaces import AuditEventPublisher, LogicalClock, RegistryOracle
from audit_registry.application.registry_service import RegistryService
from audit_registry.application.registry_store import RegistryStore
from audit_registry.config.settings import RegistrySettings, get_settings
from audit_registry.infrastructure.cache.redis_client import RedisClient
from audit_registry.infrastructure.cache.registry_oracle_redis import RedisRegistryOracle
from audit_registry.infrastructure.clock import ManualClock, WallClock
from audit_registry.infrastructure.database.registry_store_db import DbRegistryStore
from audit_registry.infrastructure.database.session import create_engine, create_session_factory
from audit_registry.infrastructure.memory.ledger import InMemoryLedger
from audit_registry.infrastructure.memory.registry_oracle_static import StaticRegistryOracle
from audit_registry.infrastructure.memory.registry_store_memory import InMemoryRegistryStore
from audit_registry.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher

_service: RegistryService | None = None
_service_lock = asyncio.Lock()


def build_store(settings: RegistrySettings) -> RegistryStore:
    if settings.store_backend == "database":
        if not settings.database_url:
            raise ValueError("database_url is required when store_backend=database")
        engine = create_engine(settings.database_url)
        return DbRegistryStore(engine=engine, session_factory=create_session_factory(engine))
    return InMemoryRegistryStore()


def build_oracle(settings: RegistrySettings) -> RegistryOracle:
    if settings.oracle_backend == "redis":
        if not settings.redis_url:
            raise ValueError("redis_url is required when oracle_backend=redis")
        return RedisRegistryOracle(
            redis_client=RedisClient(settings.redis_url),
            key=settings.verified_registries_key,
        )
    return StaticRegistryOracle(settings.verified_registries)


def build_clock(settings: RegistrySettings) -> LogicalClock:
    if settings.clock == "manual":
        return ManualClock()
    return WallClock()


def build_publisher(settings: RegistrySettings) -> Optional[AuditEventPublisher]:
    if not settings.publish_events:
        return None
    if not settings.rabbitmq_url:
        raise ValueError("rabbitmq_url is required when publish_events is enabled")
    return RabbitMQPublisher(settings.rabbitmq_url)


async def create_registry_service(settings: RegistrySettings) -> RegistryService:
    """
    Build the service and seed store configuration from settings.
    A configured registry principal is latched through the service, so the burn-address
    rule applies; a store that already holds a principal keeps it.
    """
    store = build_store(settings)
    config = await store.initialize(settings.default_registry_config())
    service = RegistryService(
        store=store,
        oracle=build_oracle(settings),
        value_transfer=InMemoryLedger(default_balance=settings.ledger_default_balance),
        clock=build_clock(settings),
        logger=logging.getLogger("audit_registry.registry"),
        publisher=build_publisher(settings),
        burn_principal=settings.burn_principal,
    )
    if settings.registry_principal and not config.is_ready:
        result = await service.set_registry_principal(settings.app_name, settings.registry_principal)
        if not result.is_ok:
            raise ValueError(f"Invalid registry_principal setting: {result.error.message}")
    return service


async def get_registry_service() -> RegistryService:
    """Return singleton RegistryService. One instance owns the write lock for the process."""
    global _service
    if _service is None:
        async with _service_lock:
            if _service is None:
                _service = await create_registry_service(get_settings())
    return _service


def get_caller(request: Request) -> str:
    """Extract caller identity from request.state (set by middleware)."""
    return getattr(request.state, "caller", None) or ""


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
