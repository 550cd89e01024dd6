# audit_registry/api/routers/health.py

from fastapi import APIRouter, Request

from audit_registry.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check with caller and correlation ID from request state."""
    settings = get_settings()
    return {
        "status": "ok",
        "caller": getattr(request.state, "caller", None),
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "version": settings.version,
        "store_backend": settings.store_backend,
    }
