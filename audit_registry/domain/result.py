"""Tagged success/failure values returned by every fallible registry operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from audit_registry.domain.errors import RegistryError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: RegistryError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
