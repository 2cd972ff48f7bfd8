"""Factory Boy helpers bound to the transactional test session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Hold the session installed by the ``session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered SQLAlchemy session.

        Raises
        ------
        RuntimeError
            If a factory runs outside a test that requested the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you pass the 'session' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting objects with a flush, never a commit."""

    class Meta:
        abstract = True
        # Resolved lazily so every test sees its own scoped session
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
