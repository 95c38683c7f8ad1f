"""
Custom exceptions for the application.
"""
from typing import Optional


class CoachException(Exception):
    """Base exception for all coach application exceptions."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(CoachException):
    """Raised when validation fails."""
    pass


class NotFoundError(CoachException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(CoachException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class AuthenticationError(CoachException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(CoachException):
    """Raised when authorization fails."""
    pass


class ExternalServiceError(CoachException):
    """Raised when the hosted completion service fails or answers garbage."""
    pass
