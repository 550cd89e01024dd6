"""Application-layer exceptions. Infrastructure faults only; expected rejections are results."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PersistenceError(ApplicationError):
    """Raised when the registry store cannot read or commit. No partial state is left behind."""


class TransferError(ApplicationError):
    """Raised by a value-transfer collaborator when the fee could not be moved. Nothing was debited."""
