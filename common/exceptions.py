"""
Taco Cloud - Custom Exceptions
================================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from typing import Dict, Optional


class TacoCloudError(Exception):
    """Base exception for all business logic errors."""
    status_code = 400

    def __init__(self, message: str = "Something went wrong."):
        self.message = message
        super().__init__(self.message)


class ValidationFailed(TacoCloudError):
    """Raised when submitted order/taco input is malformed. Carries per-field errors."""

    def __init__(self, errors: Optional[Dict[str, str]] = None, message: str = "Please correct the highlighted fields."):
        self.errors = errors or {}
        super().__init__(message)


class InvalidOrderState(TacoCloudError):
    """Raised when an order references a taco that was never persisted."""
    status_code = 500


class StorageUnavailable(TacoCloudError):
    """Raised when the database cannot be reached."""
    status_code = 503

    def __init__(self, message: str = "Our kitchen is temporarily closed. Please try again shortly."):
        super().__init__(message)


class PersistenceRejected(TacoCloudError):
    """Raised when the database refuses a write (constraint or data error)."""
    status_code = 422

    def __init__(self, message: str = "We could not save that. Please check it and try again."):
        super().__init__(message)


class AuthenticationError(TacoCloudError):
    """Raised when login credentials do not match."""
    status_code = 401

