"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories,
infrastructure adapters and application services.

The translation to HTTP responses (RFC 7807) is handled by
``vidhub/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError message mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - A bare ``ServiceError`` is treated as a bad request by the API layer.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class BadRequestError(ServiceError):
    """Raised for missing or invalid input (empty fields, missing files)."""


class AuthenticationError(ServiceError):
    """
    Raised when a credential is missing, invalid, expired, superseded, or a
    password does not verify.

    The message is shown to clients; keep it generic.
    """

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    """
    Raised for failures that should not happen given valid preconditions.

    The message is always generic; the underlying cause is chained with
    ``raise ... from`` and logged, never returned.
    """

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    :param message: Optional client-facing message overriding the default.
    :type message: str | None
    """

    entity: str
    key: str | int
    message: str | None = None

    def __str__(self) -> str:
        return self.message or f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation, shown to clients.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail
