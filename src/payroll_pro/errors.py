"""Error types raised by PayrollPro services.

Validation problems are raised before anything is written. Backend failures
carry the underlying driver message and are never retried.
"""

from __future__ import annotations


class PayrollProError(Exception):
    """Base class for all service-level errors."""


class ValidationError(PayrollProError):
    """Raised when input fails shape or range checks."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(PayrollProError):
    """Raised when a referenced row does not exist."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class BackendError(PayrollProError):
    """Raised when the data store or auth provider fails."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class RateLimitError(PayrollProError):
    """Raised when an auth attempt repeats inside the throttle window."""

    def __init__(self, key: str, retry_after: int):
        self.key = key
        self.retry_after = retry_after
        super().__init__(f"Please wait {retry_after} seconds before trying again.")


class AuthenticationError(PayrollProError):
    """Raised when the auth provider rejects credentials or a sign-up."""
