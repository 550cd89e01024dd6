"""Registry application service. Owns the transaction boundary for admission, updates and config writes."""

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional

from audit_registry.application.exceptions import TransferError
from audit_registry.application.interfaces import (
    AuditEventPublisher,
    LogicalClock,
    RegistryOracle,
    ValueTransfer,
)
from audit_registry.application.registry_store import RegistryStore
from audit_registry.domain.errors import ErrorKind, RegistryError
from audit_registry.domain.models.audit import (
    AuditCategory,
    AuditRecord,
    AuditSubmission,
    AuditUpdateRecord,
    MeasurementUnit,
)
from audit_registry.domain.models.registry import BURN_PRINCIPAL, RegistryConfig, TransferReceipt
from audit_registry.domain.result import Err, Ok, Result
from audit_registry.domain.validators.audit_validator import (
    HASH_LENGTH,
    check_capacity,
    validate_registry_principal,
    validate_submission_fields,
    validate_update_params,
)

ROUTING_AUDIT_SUBMITTED = "audit.submitted"
ROUTING_AUDIT_UPDATED = "audit.updated"


class RegistryService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI, no direct infrastructure.
    Writes are serialized by one lock; each write runs in one store transaction.
    The fee is reserved inside that transaction, after the record is staged, and settled
    after commit. A failed reservation discards the record and no id is consumed.
    Events are published after commit, still under the write lock, so they leave in
    commit order. Publishing is best-effort.
    """

    def __init__(
        self,
        store: RegistryStore,
        oracle: RegistryOracle,
        value_transfer: ValueTransfer,
        clock: LogicalClock,
        logger: logging.Logger,
        publisher: Optional[AuditEventPublisher] = None,
        burn_principal: str = BURN_PRINCIPAL,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._transfer = value_transfer
        self._clock = clock
        self._logger = logger
        self._publisher = publisher
        self._burn_principal = burn_principal
        self._write_lock = asyncio.Lock()

    def _reject(self, event: str, caller: str, error: RegistryError, **extra) -> Err:
        self._logger.info(
            event,
            extra={"caller": caller, **error.to_dict(), **extra},
        )
        return Err(error)

    async def _is_verified(self, caller: str) -> bool:
        """Oracle boundary: any failure counts as not verified."""
        try:
            return bool(await self._oracle.is_verified(caller))
        except Exception as e:
            self._logger.warning(
                "oracle_lookup_failed",
                extra={"caller": caller, "error": str(e)},
            )
            return False

    async def _publish(self, routing_key: str, payload: dict) -> None:
        if self._publisher is None:
            return
        try:
            await self._publisher.publish_audit_event(routing_key, payload)
        except Exception as e:
            self._logger.error(
                "audit_event_publish_failed",
                extra={
                    "routing_key": routing_key,
                    "audit_id": payload.get("audit_id"),
                    "error": str(e),
                },
            )
            # Do not re-raise: the write is already committed.

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    async def submit_audit(self, caller: str, submission: AuditSubmission) -> Result[int]:
        """
        Admit a submission. Checks run in a fixed order and the first failure wins:
        capacity, field rules, caller authorization, hash uniqueness, registry readiness.
        On success the fee moves from caller to registry principal and the new id is returned.

        The fee is reserved inside the store transaction and settled only after commit;
        a commit failure releases the reservation, so no value moves without a record.
        """
        async with self._write_lock:
            reservation: Optional[str] = None
            try:
                async with self._store.transaction() as tx:
                    config = await tx.get_config()
                    audit_id = await tx.next_audit_id()

                    error = check_capacity(audit_id, config.max_audits) or validate_submission_fields(
                        submission
                    )
                    if error is not None:
                        return self._reject("audit_rejected", caller, error)

                    if not await self._is_verified(caller):
                        return self._reject(
                            "audit_rejected",
                            caller,
                            RegistryError(
                                kind=ErrorKind.NOT_AUTHORIZED,
                                message=f"caller {caller!r} is not a verified registry",
                            ),
                        )

                    if await tx.hash_exists(bytes(submission.data_hash)):
                        return self._reject(
                            "audit_rejected",
                            caller,
                            RegistryError(
                                kind=ErrorKind.AUDIT_ALREADY_EXISTS,
                                field="data_hash",
                                message=f"audit with hash {submission.data_hash.hex()} already exists",
                            ),
                        )

                    if not config.is_ready:
                        return self._reject(
                            "audit_rejected",
                            caller,
                            RegistryError(
                                kind=ErrorKind.REGISTRY_NOT_VERIFIED,
                                message="registry principal is not set",
                            ),
                        )

                    timestamp = self._clock.now()
                    record = AuditRecord(
                        audit_id=audit_id,
                        submitter=caller,
                        data_hash=bytes(submission.data_hash),
                        tonnage=submission.tonnage,
                        waste_type=submission.waste_type,
                        reduction_metric=submission.reduction_metric,
                        timestamp=timestamp,
                        period=submission.period,
                        category=AuditCategory(submission.category),
                        location=submission.location,
                        unit=MeasurementUnit(submission.unit),
                        source=submission.source,
                        verification_level=submission.verification_level,
                        compliance_score=submission.compliance_score,
                        status=True,
                    )
                    receipt = TransferReceipt(
                        audit_id=audit_id,
                        amount=config.submission_fee,
                        sender=caller,
                        recipient=config.registry_principal,
                        timestamp=timestamp,
                    )
                    await tx.insert_audit(record, receipt)
                    reservation = await self._transfer.reserve(
                        config.submission_fee,
                        caller,
                        config.registry_principal,
                    )
            except TransferError as e:
                self._logger.error(
                    "fee_transfer_failed",
                    extra={"caller": caller, "error": e.message},
                )
                return Err(
                    RegistryError(
                        kind=ErrorKind.TRANSFER_FAILED,
                        message=f"submission fee transfer failed: {e.message}",
                    )
                )
            except Exception as e:
                # Commit failed after the fee was held: hand it back before propagating.
                if reservation is not None:
                    await self._transfer.release(reservation)
                    self._logger.error(
                        "fee_reservation_released",
                        extra={"caller": caller, "audit_id": audit_id, "error": str(e)},
                    )
                raise
            await self._transfer.settle(reservation)

            self._logger.info(
                "audit_submitted",
                extra={
                    "caller": caller,
                    "audit_id": audit_id,
                    "data_hash": record.data_hash.hex(),
                    "fee": receipt.amount,
                    "recipient": receipt.recipient,
                },
            )
            await self._publish(ROUTING_AUDIT_SUBMITTED, record.to_dict())
        return Ok(audit_id)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_audit(
        self,
        caller: str,
        audit_id: int,
        tonnage: int,
        reduction_metric: int,
    ) -> Result[None]:
        """Amend tonnage and reduction metric of the caller's own audit. Other fields stay untouched."""
        async with self._write_lock:
            async with self._store.transaction() as tx:
                existing = await tx.get_audit(audit_id)
                if existing is None:
                    return self._reject(
                        "audit_update_rejected",
                        caller,
                        RegistryError(kind=ErrorKind.NOT_FOUND, message=f"audit {audit_id} not found"),
                        audit_id=audit_id,
                    )
                if existing.submitter != caller:
                    return self._reject(
                        "audit_update_rejected",
                        caller,
                        RegistryError(
                            kind=ErrorKind.NOT_AUTHORIZED,
                            message=f"only the submitter may update audit {audit_id}",
                        ),
                        audit_id=audit_id,
                    )
                error = validate_update_params(tonnage, reduction_metric)
                if error is not None:
                    return self._reject("audit_update_rejected", caller, error, audit_id=audit_id)

                timestamp = self._clock.now()
                updated = replace(
                    existing,
                    tonnage=tonnage,
                    reduction_metric=reduction_metric,
                    timestamp=timestamp,
                )
                update = AuditUpdateRecord(
                    audit_id=audit_id,
                    tonnage=tonnage,
                    reduction_metric=reduction_metric,
                    timestamp=timestamp,
                    updater=caller,
                )
                await tx.replace_audit(updated, update)

            self._logger.info(
                "audit_updated",
                extra={
                    "caller": caller,
                    "audit_id": audit_id,
                    "tonnage": tonnage,
                    "reduction_metric": reduction_metric,
                },
            )
            await self._publish(ROUTING_AUDIT_UPDATED, updated.to_dict())
        return Ok(None)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def set_registry_principal(self, caller: str, principal: str) -> Result[None]:
        """Latch the fee recipient. Rejects the burn address and any second attempt."""
        async with self._write_lock:
            async with self._store.transaction() as tx:
                config = await tx.get_config()
                error = validate_registry_principal(
                    principal,
                    config.registry_principal,
                    self._burn_principal,
                )
                if error is not None:
                    return self._reject("registry_principal_rejected", caller, error)
                await tx.save_config(config.with_principal(principal))

        self._logger.info(
            "registry_principal_set",
            extra={"caller": caller, "registry_principal": principal},
        )
        return Ok(None)

    async def set_submission_fee(self, caller: str, fee: int) -> Result[None]:
        """Overwrite the fee. Allowed only after the principal is set; the amount is not bounded."""
        async with self._write_lock:
            async with self._store.transaction() as tx:
                config = await tx.get_config()
                if not config.is_ready:
                    return self._reject(
                        "submission_fee_rejected",
                        caller,
                        RegistryError(
                            kind=ErrorKind.REGISTRY_NOT_VERIFIED,
                            message="registry principal must be set before the fee",
                        ),
                    )
                await tx.save_config(config.with_fee(fee))

        self._logger.info(
            "submission_fee_set",
            extra={"caller": caller, "fee": fee, "previous_fee": config.submission_fee},
        )
        return Ok(None)

    # ------------------------------------------------------------------
    # Queries: pure, never fail on malformed input
    # ------------------------------------------------------------------

    async def get_audit(self, audit_id: int) -> Optional[AuditRecord]:
        if not isinstance(audit_id, int) or audit_id < 0:
            return None
        return await self._store.get_audit(audit_id)

    async def get_audit_update(self, audit_id: int) -> Optional[AuditUpdateRecord]:
        if not isinstance(audit_id, int) or audit_id < 0:
            return None
        return await self._store.get_audit_update(audit_id)

    async def get_audit_count(self) -> int:
        return await self._store.audit_count()

    async def check_audit_existence(self, data_hash: bytes) -> bool:
        if not isinstance(data_hash, (bytes, bytearray)) or len(data_hash) != HASH_LENGTH:
            return False
        return await self._store.hash_exists(bytes(data_hash))

    async def get_registry_config(self) -> RegistryConfig:
        return await self._store.get_config()

    async def list_fee_transfers(self) -> List[TransferReceipt]:
        return await self._store.list_transfers()
