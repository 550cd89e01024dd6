"""In-memory value ledger. Implements ValueTransfer for single-process deployments and tests."""

import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from audit_registry.application.exceptions import TransferError


@dataclass(frozen=True)
class LedgerTransfer:
    amount: int
    sender: str
    recipient: str


class InMemoryLedger:
    """
    Balances per principal plus the ordered log of settled transfers.
    default_balance=None means unfunded principals can always pay (no balance tracking for them).

    Transfers are two-phase. reserve() debits the sender into a hold, settle() credits the
    recipient and logs the transfer, release() returns the hold to the sender.
    """

    def __init__(
        self,
        balances: Optional[Dict[str, int]] = None,
        default_balance: Optional[int] = None,
    ) -> None:
        self._balances: Dict[str, int] = dict(balances or {})
        self._default_balance = default_balance
        self._transfers: List[LedgerTransfer] = []
        self._holds: Dict[str, LedgerTransfer] = {}

    def balance_of(self, principal: str) -> Optional[int]:
        if principal in self._balances:
            return self._balances[principal]
        return self._default_balance

    def fund(self, principal: str, amount: int) -> None:
        current = self.balance_of(principal) or 0
        self._balances[principal] = current + amount

    @property
    def transfers(self) -> List[LedgerTransfer]:
        return list(self._transfers)

    @property
    def pending(self) -> List[LedgerTransfer]:
        return list(self._holds.values())

    async def reserve(self, amount: int, sender: str, recipient: str) -> str:
        if amount < 0:
            raise TransferError(f"negative transfer amount {amount}")
        if sender == recipient:
            raise TransferError("sender and recipient are the same principal")
        available = self.balance_of(sender)
        if available is not None and available < amount:
            raise TransferError(
                f"insufficient balance for {sender}: {available} < {amount}"
            )
        if available is not None:
            self._balances[sender] = available - amount
        reservation_id = uuid.uuid4().hex
        self._holds[reservation_id] = LedgerTransfer(amount=amount, sender=sender, recipient=recipient)
        return reservation_id

    def _take_hold(self, reservation_id: str) -> LedgerTransfer:
        hold = self._holds.pop(reservation_id, None)
        if hold is None:
            raise TransferError(f"unknown reservation {reservation_id}")
        return hold

    async def settle(self, reservation_id: str) -> None:
        hold = self._take_hold(reservation_id)
        received = self.balance_of(hold.recipient)
        if received is not None:
            self._balances[hold.recipient] = received + hold.amount
        self._transfers.append(hold)

    async def release(self, reservation_id: str) -> None:
        hold = self._take_hold(reservation_id)
        if hold.sender in self._balances:
            self._balances[hold.sender] += hold.amount

    async def transfer(self, amount: int, sender: str, recipient: str) -> None:
        """Reserve and settle in one step."""
        await self.settle(await self.reserve(amount, sender, recipient))
