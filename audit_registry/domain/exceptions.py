"""Domain-specific exceptions. Reserved for programming faults, not expected rejections."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvariantViolationError(DomainError):
    """Raised when a store would break a registry invariant (e.g. reused id or hash)."""
