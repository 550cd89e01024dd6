# audit_registry/main.py

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from audit_registry.api.middleware import (
    AuditTriggerMiddleware,
    CallerContextMiddleware,
    CorrelationIdMiddleware,
)
from audit_registry.api.routers import audits, health, registry
from audit_registry.application.exceptions import ApplicationError, PersistenceError
from audit_registry.config.logging import configure_logging
from audit_registry.config.settings import get_settings
from audit_registry.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> CallerContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(CallerContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request, exc: PersistenceError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    logger.error("invariant_violation", extra={"error": exc.message})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /audits, /registry
app.include_router(health.router)
app.include_router(audits.router, prefix="/audits")
app.include_router(registry.router, prefix="/registry")
