from __future__ import annotations

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a command is malformed or carries invalid data."""


class InvalidAmountError(ValidationError):
    """Raised when an amount is not a positive whole currency amount."""


class PolicyRejection(DomainError):
    """Raised when a well-formed command is refused by a business rule."""

    def __init__(self, reason: RejectReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason.value)


class DuplicateEntryError(PolicyRejection):
    """Raised when an attendance entry already exists for the day."""

    def __init__(self, message: str | None = None):
        super().__init__(RejectReason.ALREADY_RECORDED, message)


class AuthorizationError(PolicyRejection):
    """Raised when a person lacks permission for an action."""

    def __init__(self, message: str | None = None):
        super().__init__(RejectReason.NOT_AUTHORIZED, message)


class NotFoundError(DomainError):
    """Raised when an admin action targets an unknown person."""


class ExternalIOError(Exception):
    """Raised when the durable store or the push channel cannot be reached."""


class ConfigurationError(Exception):
    """Raised at startup when a setting cannot be parsed."""
