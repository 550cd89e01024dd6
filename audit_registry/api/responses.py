"""Map registry results to HTTP responses. The error body carries kind, code and field."""

from typing import Dict

from fastapi.responses import JSONResponse

from audit_registry.domain.errors import ErrorKind, RegistryError

_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.AUDIT_ALREADY_EXISTS: 409,
    ErrorKind.CAPACITY_EXCEEDED: 409,
    ErrorKind.REGISTRY_NOT_VERIFIED: 409,
    ErrorKind.CONFIG_ALREADY_SET: 409,
    ErrorKind.INVALID_UPDATE_PARAM: 422,
    ErrorKind.INVALID_CONFIG_VALUE: 422,
    ErrorKind.TRANSFER_FAILED: 402,
}


def status_for(kind: ErrorKind) -> int:
    if kind.is_validation:
        return 422
    return _STATUS_BY_KIND.get(kind, 400)


def error_response(error: RegistryError) -> JSONResponse:
    return JSONResponse(status_code=status_for(error.kind), content=error.to_dict())
