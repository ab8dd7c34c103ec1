"""Domain error types shared by repositories and services."""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for data-access failures surfaced to callers."""


class NotFoundError(RepositoryError, LookupError):
    """Raised when an update targets an id missing from its collection."""


class ConflictError(RepositoryError, ValueError):
    """Raised when a unique value (household phone) is already taken."""


class AuthenticationError(Exception):
    """Raised when credentials or a one-time code are rejected."""


class DeliveryError(Exception):
    """Raised by an SMS gateway when one recipient cannot be reached."""
