"""Outcome kinds surfaced by the query layer."""

from __future__ import annotations


class DexStoreError(Exception):
    """Base class for errors raised by dexstore helpers."""


class InvalidArgument(DexStoreError, ValueError):
    """Raised when a caller-supplied value cannot be interpreted."""


class NotFound(DexStoreError, LookupError):
    """Raised when a single-record lookup matches nothing."""


class StoreFailure(DexStoreError):
    """Raised when the underlying store call errors or times out.

    Args:
        operation: Store operation that failed (e.g., "find", "aggregate").
        detail: Driver error text, kept for logs only.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Store operation '{operation}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
