"""Audits API router: submit, update, and read audits."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from audit_registry.api.dependencies import get_caller, get_registry_service
from audit_registry.api.responses import error_response
from audit_registry.application.registry_service import RegistryService
from audit_registry.domain.schemas.audit import (
    AuditCountResponse,
    AuditExistenceResponse,
    AuditResponse,
    AuditSubmitRequest,
    AuditUpdateRequest,
    AuditUpdateResponse,
    ErrorResponse,
    SubmitAuditResponse,
    decode_hash,
)

router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=SubmitAuditResponse,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def submit_audit(
    body: AuditSubmitRequest,
    caller: Annotated[str, Depends(get_caller)],
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Submit an audit as the calling registry. Fee is charged on success."""
    result = await service.submit_audit(caller, body.to_submission())
    if not result.is_ok:
        return error_response(result.error)
    return SubmitAuditResponse(audit_id=result.value)


@router.get("/count", response_model=AuditCountResponse)
async def get_audit_count(
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    return AuditCountResponse(count=await service.get_audit_count())


@router.get("/exists/{data_hash}", response_model=AuditExistenceResponse)
async def check_audit_existence(
    data_hash: str,
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """True iff an audit with this hex hash is registered. Malformed hashes report false."""
    exists = await service.check_audit_existence(decode_hash(data_hash))
    return AuditExistenceResponse(data_hash=data_hash, exists=exists)


@router.get("/{audit_id}", response_model=AuditResponse, responses=_NOT_FOUND)
async def get_audit(
    audit_id: int,
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    record = await service.get_audit(audit_id)
    if record is None:
        return JSONResponse(status_code=404, content={"detail": "Audit not found"})
    return AuditResponse.from_record(record)


@router.get("/{audit_id}/update", response_model=AuditUpdateResponse, responses=_NOT_FOUND)
async def get_audit_update(
    audit_id: int,
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Last update applied to the audit, if any."""
    update = await service.get_audit_update(audit_id)
    if update is None:
        return JSONResponse(status_code=404, content={"detail": "Audit update not found"})
    return AuditUpdateResponse.from_record(update)


@router.patch(
    "/{audit_id}",
    response_model=AuditResponse,
    responses={**_NOT_FOUND, 403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_audit(
    audit_id: int,
    body: AuditUpdateRequest,
    caller: Annotated[str, Depends(get_caller)],
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Amend tonnage and reduction metric. Only the original submitter may update."""
    result = await service.update_audit(caller, audit_id, body.tonnage, body.reduction_metric)
    if not result.is_ok:
        return error_response(result.error)
    record = await service.get_audit(audit_id)
    return AuditResponse.from_record(record)
