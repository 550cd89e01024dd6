"""Registry configuration router: principal latch, submission fee, config and fee receipts."""

from typing import Annotated, List

from fastapi import APIRouter, Depends

from audit_registry.api.dependencies import get_caller, get_registry_service
from audit_registry.api.responses import error_response
from audit_registry.application.registry_service import RegistryService
from audit_registry.domain.schemas.audit import (
    ErrorResponse,
    RegistryConfigResponse,
    RegistryPrincipalRequest,
    SubmissionFeeRequest,
    TransferResponse,
)

router = APIRouter()


@router.get("/config", response_model=RegistryConfigResponse)
async def get_registry_config(
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    return RegistryConfigResponse.from_config(await service.get_registry_config())


@router.put(
    "/principal",
    response_model=RegistryConfigResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def set_registry_principal(
    body: RegistryPrincipalRequest,
    caller: Annotated[str, Depends(get_caller)],
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Set the fee recipient. Allowed exactly once."""
    result = await service.set_registry_principal(caller, body.principal)
    if not result.is_ok:
        return error_response(result.error)
    return RegistryConfigResponse.from_config(await service.get_registry_config())


@router.put("/fee", response_model=RegistryConfigResponse, responses={409: {"model": ErrorResponse}})
async def set_submission_fee(
    body: SubmissionFeeRequest,
    caller: Annotated[str, Depends(get_caller)],
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Overwrite the submission fee. Requires the registry principal to be set."""
    result = await service.set_submission_fee(caller, body.fee)
    if not result.is_ok:
        return error_response(result.error)
    return RegistryConfigResponse.from_config(await service.get_registry_config())


@router.get("/transfers", response_model=List[TransferResponse])
async def list_fee_transfers(
    service: Annotated[RegistryService, Depends(get_registry_service)],
):
    """Fee receipts, one per admitted audit, ordered by audit id."""
    return [TransferResponse.from_receipt(r) for r in await service.list_fee_transfers()]
