"""Explicit result types for controller operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Why an operation did not succeed."""

    VALIDATION = "validation"
    BACKEND_REJECTED = "backend_rejected"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful operation carrying its payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed operation with a user-facing message."""

    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Success[T] | Failure
