"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from vidhub.models import User
from vidhub.uow import SQLAlchemyUnitOfWork

from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added through the repository and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial

    def test_repositories_share_the_uow_session(self, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.session is uow.session
            assert uow.subscriptions.session is uow.session
            assert uow.watch_history.session is uow.session

    def test_refresh_slot_update_is_committed(self, session):
        user = UserFactory()
        session.commit()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.set_refresh_token(user.id, "rt-1")

        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.get_refresh_token(user.id) == "rt-1"
