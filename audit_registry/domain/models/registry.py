"""Registry configuration and fee transfer receipts."""

from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_MAX_AUDITS = 10000
DEFAULT_SUBMISSION_FEE = 500
# Burn address; can never receive fees.
BURN_PRINCIPAL = "SP000000000000000000002Q6VF78"


@dataclass(frozen=True)
class RegistryConfig:
    """
    Registry-wide configuration owned by the store.
    registry_principal is a one-time latch; submission_fee may change once it is set.
    """

    registry_principal: Optional[str] = None
    submission_fee: int = DEFAULT_SUBMISSION_FEE
    max_audits: int = DEFAULT_MAX_AUDITS

    @property
    def is_ready(self) -> bool:
        """Submissions are accepted only after the principal is latched."""
        return self.registry_principal is not None

    def with_principal(self, principal: str) -> "RegistryConfig":
        return replace(self, registry_principal=principal)

    def with_fee(self, fee: int) -> "RegistryConfig":
        return replace(self, submission_fee=fee)


@dataclass(frozen=True)
class TransferReceipt:
    """One completed submission fee transfer, tied to the audit it paid for."""

    audit_id: int
    amount: int
    sender: str
    recipient: str
    timestamp: int
