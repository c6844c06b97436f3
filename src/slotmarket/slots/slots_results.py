"""Tagged results returned across the slot service boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

from ..exceptions import (
    AppError,
    InvalidInputError,
    NotFoundError,
    OperationCancelledError,
    PreconditionFailedError,
    RepositoryError,
    UpstreamResolutionError,
)

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Failure taxonomy exposed to callers."""

    INVALID_INPUT = "invalid_input"
    PRECONDITION_FAILED = "precondition_failed"
    NOT_FOUND = "not_found"
    UPSTREAM_RESOLUTION_FAILED = "upstream_resolution_failed"
    STORAGE_FAILURE = "storage_failure"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        """Whether retrying with backoff (without caller intervention) is sensible."""
        return self in (ErrorKind.STORAGE_FAILURE, ErrorKind.CANCELLED)


_KIND_BY_ERROR: tuple[tuple[type[AppError], ErrorKind], ...] = (
    (InvalidInputError, ErrorKind.INVALID_INPUT),
    (PreconditionFailedError, ErrorKind.PRECONDITION_FAILED),
    (NotFoundError, ErrorKind.NOT_FOUND),
    (UpstreamResolutionError, ErrorKind.UPSTREAM_RESOLUTION_FAILED),
    (OperationCancelledError, ErrorKind.CANCELLED),
    (RepositoryError, ErrorKind.STORAGE_FAILURE),
)


def error_kind_for(exc: AppError) -> ErrorKind:
    for error_type, kind in _KIND_BY_ERROR:
        if isinstance(exc, error_type):
            return kind
    return ErrorKind.UNKNOWN


@dataclass(frozen=True, slots=True)
class OperationError:
    kind: ErrorKind
    detail: str


@dataclass(frozen=True, slots=True)
class OperationResult(Generic[T]):
    value: T | None = None
    error: OperationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str) -> "OperationResult[T]":
        return cls(error=OperationError(kind=kind, detail=detail))


@dataclass(frozen=True, slots=True)
class BatchItemError:
    slot_id: int
    error: OperationError


@dataclass(slots=True)
class BatchResult:
    results: list[OperationResult] = field(default_factory=list)
    errors: list[BatchItemError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def overall_success(self) -> bool:
        return bool(self.results) and self.failure_count == 0


__all__ = [
    "BatchItemError",
    "BatchResult",
    "ErrorKind",
    "OperationError",
    "OperationResult",
    "error_kind_for",
]
