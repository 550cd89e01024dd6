"""Static registry oracle: a fixed set of verified identities, typically from settings."""

from typing import Iterable


class StaticRegistryOracle:
    """Implements RegistryOracle over an in-process set. Membership may change at runtime."""

    def __init__(self, verified: Iterable[str] = ()) -> None:
        self._verified = set(verified)

    def verify(self, identity: str) -> None:
        self._verified.add(identity)

    def revoke(self, identity: str) -> None:
        self._verified.discard(identity)

    async def is_verified(self, identity: str) -> bool:
        return identity in self._verified
