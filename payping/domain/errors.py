"""Error taxonomy shared by use cases and the HTTP layer.

None of these are transient: each one ends the triggering request and is
reported to the caller.
"""
from __future__ import annotations


class DomainError(Exception):
    """Base class for every error raised by the core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or missing input; the caller can correct and resend."""


class AuthorizationError(DomainError):
    """The actor lacks the required role or does not own the entity."""


class NotFoundError(DomainError):
    """A referenced entity does not exist (or no longer exists)."""


class ConflictError(DomainError):
    """A state-transition precondition does not hold."""


class TransactionError(ConflictError):
    """A multi-row write failed part way and was rolled back as a whole."""
