"""Collaborator interfaces consumed by the registry service."""

from typing import Any, Dict, Protocol


class RegistryOracle(Protocol):
    """Answers whether an identity is a verified registry. No side effects."""

    async def is_verified(self, identity: str) -> bool:
        ...


class ValueTransfer(Protocol):
    """
    Two-phase value movement between principals.
    reserve() holds the amount and returns a reservation id, or raises TransferError having
    moved nothing. settle() completes a held transfer; release() cancels it.
    """

    async def reserve(self, amount: int, sender: str, recipient: str) -> str:
        ...

    async def settle(self, reservation_id: str) -> None:
        ...

    async def release(self, reservation_id: str) -> None:
        ...


class LogicalClock(Protocol):
    """Monotonic non-decreasing logical time supplied by the environment."""

    def now(self) -> int:
        ...


class AuditEventPublisher(Protocol):
    """Publishes committed registry changes. Implementations may be async."""

    async def publish_audit_event(self, routing_key: str, payload: Dict[str, Any]) -> None:
        ...
