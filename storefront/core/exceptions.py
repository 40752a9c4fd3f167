"""Custom exceptions for the storefront data layer."""
from __future__ import annotations


class StorefrontException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class DatabaseException(StorefrontException):
    """Database-related errors."""

    pass


class LocalStoreUnavailable(DatabaseException):
    """Local store could not complete an operation.

    There is no further fallback behind the local store, so this error is
    always surfaced to the caller.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Local store operation '{operation}' failed: {reason}")
        self.operation = operation
        self.reason = reason


class ConfigurationException(StorefrontException):
    """Configuration errors."""

    pass
