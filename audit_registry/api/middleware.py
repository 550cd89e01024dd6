"""API middleware: correlation ID, caller context, request audit."""

import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from audit_registry.core.context import caller_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Caller-ID"
CORRELATION_HEADER = "X-Correlation-ID"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class CallerContextMiddleware(BaseHTTPMiddleware):
    """Extract X-Caller-ID; required on mutating requests (400 if missing); attach to request.state and context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        caller = (request.headers.get(CALLER_HEADER) or "").strip()
        if not caller and request.method in MUTATING_METHODS:
            return JSONResponse(
                status_code=400,
                content={"detail": f"{CALLER_HEADER} header is required"},
            )
        request.state.caller = caller or None
        caller_ctx.set(request.state.caller)
        return await call_next(request)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """After response: log structured request audit (correlation_id, caller, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        audit_event = {
            "correlation_id": getattr(request.state, "correlation_id", None),
            "caller": getattr(request.state, "caller", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info("request_audit", extra=audit_event)
        return response
