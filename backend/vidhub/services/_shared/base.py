from __future__ import annotations

from dataclasses import dataclass

from vidhub.core import errors as api_errors
from vidhub.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
)
from vidhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids).

    :param actor_id: Authenticated user identifier, if any.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session; always use a Unit of Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :type isolation: str | None
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :type enforce_db_readonly: bool
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception, or ``exc`` untouched when it is not a
            :class:`ServiceError`.
        :rtype: Exception
        """
        if isinstance(exc, AuthenticationError):
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, InternalError):
            # Generic by construction; the cause stays in the logs
            return api_errors.InternalServerError(str(exc))

        if isinstance(exc, BadRequestError | ServiceError):
            return api_errors.BadRequest(str(exc) or "Bad request")

        return exc
