"""Explicit success/failure values returned by builders, factories and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from omh_runtime.application.errors import ERROR_TYPES, ErrorCode, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    code: ErrorCode
    message: str
    field: Optional[str] = None
    cause: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        """Raise the typed exception for this failure, chained to its cause."""
        raise ERROR_TYPES[self.kind](self) from self.cause


Result = Union[Success[T], Failure]


def malformed(message: str) -> Failure:
    return Failure(ErrorKind.MALFORMED_PAYLOAD_ID, ErrorCode.OMH_INVALID_PAYLOAD_ID, message)


def missing(field: str, code: ErrorCode, message: str) -> Failure:
    return Failure(ErrorKind.MISSING_REQUIRED_FIELD, code, message, field=field)
