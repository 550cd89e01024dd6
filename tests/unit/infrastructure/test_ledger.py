"""InMemoryLedger: both legs or nothing, with a reserve/settle/release cycle."""

import pytest

from audit_registry.application.exceptions import TransferError
from audit_registry.infrastructure.memory.ledger import InMemoryLedger


async def test_unbounded_principals_always_pay():
    ledger = InMemoryLedger()
    await ledger.transfer(500, "ST1", "ST2")
    assert ledger.balance_of("ST1") is None
    assert [(t.amount, t.sender, t.recipient) for t in ledger.transfers] == [(500, "ST1", "ST2")]


async def test_balances_move_between_tracked_principals():
    ledger = InMemoryLedger(balances={"ST1": 1000, "ST2": 0})
    await ledger.transfer(400, "ST1", "ST2")
    assert ledger.balance_of("ST1") == 600
    assert ledger.balance_of("ST2") == 400


async def test_insufficient_balance_changes_nothing():
    ledger = InMemoryLedger(balances={"ST1": 100, "ST2": 0})
    with pytest.raises(TransferError):
        await ledger.transfer(500, "ST1", "ST2")
    assert ledger.balance_of("ST1") == 100
    assert ledger.balance_of("ST2") == 0
    assert ledger.transfers == []


async def test_default_balance_applies_to_unknown_principals():
    ledger = InMemoryLedger(default_balance=300)
    with pytest.raises(TransferError):
        await ledger.transfer(500, "ST1", "ST2")
    await ledger.transfer(300, "ST1", "ST2")
    assert ledger.balance_of("ST1") == 0
    assert ledger.balance_of("ST2") == 600


async def test_zero_amount_is_recorded():
    ledger = InMemoryLedger()
    await ledger.transfer(0, "ST1", "ST2")
    assert len(ledger.transfers) == 1


@pytest.mark.parametrize("amount, sender, recipient", [(-1, "ST1", "ST2"), (10, "ST1", "ST1")])
async def test_rejected_transfers(amount, sender, recipient):
    ledger = InMemoryLedger()
    with pytest.raises(TransferError):
        await ledger.transfer(amount, sender, recipient)
    assert ledger.transfers == []


async def test_reserve_holds_until_settled():
    ledger = InMemoryLedger(balances={"ST1": 1000, "ST2": 0})
    reservation = await ledger.reserve(400, "ST1", "ST2")
    assert ledger.balance_of("ST1") == 600
    assert ledger.balance_of("ST2") == 0
    assert ledger.transfers == []
    assert len(ledger.pending) == 1

    await ledger.settle(reservation)
    assert ledger.balance_of("ST2") == 400
    assert ledger.pending == []
    assert [(t.amount, t.sender, t.recipient) for t in ledger.transfers] == [(400, "ST1", "ST2")]


async def test_release_returns_the_hold():
    ledger = InMemoryLedger(balances={"ST1": 1000, "ST2": 0})
    reservation = await ledger.reserve(400, "ST1", "ST2")
    await ledger.release(reservation)
    assert ledger.balance_of("ST1") == 1000
    assert ledger.balance_of("ST2") == 0
    assert ledger.transfers == []
    assert ledger.pending == []


async def test_reservation_can_only_be_finished_once():
    ledger = InMemoryLedger()
    reservation = await ledger.reserve(10, "ST1", "ST2")
    await ledger.settle(reservation)
    with pytest.raises(TransferError):
        await ledger.settle(reservation)
    with pytest.raises(TransferError):
        await ledger.release(reservation)
