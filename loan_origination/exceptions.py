"""Custom exception hierarchy for loan-origination."""

from decimal import Decimal


class LoanOriginationError(Exception):
    """Base exception for all loan-origination errors."""


class ValidationError(LoanOriginationError):
    """Raised when caller input is rejected before any state changes."""


class LimitExceededError(LoanOriginationError):
    """Raised when a request would exceed a client's daily or monthly ceiling.

    Parameters
    ----------
    message : str
        Human-readable reason, including the remaining amount.
    remaining : Decimal
        Amount the client can still borrow for the period.
    period : str
        ``"daily"`` or ``"monthly"``.
    """

    def __init__(self, message: str, remaining: Decimal, period: str) -> None:
        super().__init__(message)
        self.remaining = remaining
        self.period = period


class LookupNotFoundError(LoanOriginationError):
    """Raised when the identity registry has no record for a document."""


class NotificationError(LoanOriginationError):
    """Raised when a notification cannot be rendered or delivered."""


class AuthenticationError(LoanOriginationError):
    """Raised when login credentials are rejected."""


class PermissionDeniedError(LoanOriginationError):
    """Raised when the acting session lacks a required permission."""


class EntityNotFoundError(LoanOriginationError):
    """Raised when a referenced entity does not exist."""


class DuplicateEntityError(LoanOriginationError):
    """Raised when an entity with the same unique key already exists."""


class StoreError(LoanOriginationError):
    """Raised when a store operation fails."""


class CorruptRecordError(StoreError):
    """Raised when a persisted record cannot be decoded."""


class ConfigurationError(LoanOriginationError):
    """Raised when configuration is invalid or missing."""
