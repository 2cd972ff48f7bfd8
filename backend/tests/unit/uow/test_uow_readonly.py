"""Guards of the read-only unit of work.

SQLite ignores ``SET TRANSACTION`` directives, so these tests exercise the
ORM and cursor-level guards only.
"""

import pytest
from sqlalchemy import text
from vidhub.models.user import User
from vidhub.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from vidhub.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)

from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("DELETE FROM users WHERE email = :email"), {"email": "x@example.com"}
            )

    def test_blocks_refresh_slot_writes(self, session):
        user = UserFactory()
        session.commit()

        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.users.set_refresh_token(user.id, "rt-sneaky")

        with RWuow() as uow:
            assert uow.users.get_refresh_token(user.id) is None

    def test_allows_reads(self, session):
        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        with ROuow() as uow:
            assert uow.session.query(User).count() >= 1

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()
