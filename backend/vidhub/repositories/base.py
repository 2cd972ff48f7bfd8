"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Primary-key lookup and staging of new entities.
- Safe update helpers with per-repository updatable-field whitelists.
- No business logic, no commit/rollback; services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; services define the Unit of Work.
* Updates MUST NOT allow mass-assignment: each repo exposes an explicit
  ``_updatable_fields`` whitelist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session

from vidhub.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    Subclasses MAY override:

    * ``_updatable_fields`` to whitelist keys allowed for updates.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``vidhub.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update.

        :returns: Set of allowed public keys for update operations.
        :rtype: set[str]
        """
        return set()

    # ------------------------------ Internals --------------------------------

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``fields`` after checking every key against the whitelist.

        :param fields: Raw update mapping (public keys).
        :type fields: Mapping[str, Any]
        :returns: Copy of the mapping.
        :rtype: dict[str, Any]
        :raises ValueError: If any key is not updatable.
        """
        allowed = self._updatable_fields()
        if not allowed and fields:
            raise ValueError("No updatable fields configured for this repository.")

        unknown = [k for k in fields if k not in allowed]
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: Entity or ``None``.
        :rtype: E | None
        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted keys to ``instance`` and flush.

        The assignment uses ``setattr`` so ``@validates`` hooks on the mapped
        class run.

        :raises ValueError: On a non-updatable key or a failed validator.
        """
        for k, v in self._sanitize_update_fields(fields).items():
            setattr(instance, k, v)
        self.flush()
        return instance
