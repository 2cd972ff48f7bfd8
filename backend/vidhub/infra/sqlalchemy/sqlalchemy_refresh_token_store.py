"""Refresh-token slot stored on the ``users`` row."""

from __future__ import annotations

from collections.abc import Callable

from vidhub.services._shared.ports import RefreshTokenStore
from vidhub.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Keep the single live refresh token in ``users.refresh_token``.

    Every call runs in its own read-write unit of work and commits before
    returning, so a rotation is durable as soon as the caller hears about it.
    ``compare_and_swap`` is one conditional ``UPDATE``; row-level write
    locking in the database makes it atomic per user.

    :param uow_factory: Builds the unit of work for each call.
    """

    def __init__(
        self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork
    ) -> None:
        self._uow_factory = uow_factory

    def get(self, user_id: int) -> str | None:
        with self._uow_factory() as uow:
            return uow.users.get_refresh_token(user_id)

    def put(self, user_id: int, token: str) -> None:
        with self._uow_factory() as uow:
            uow.users.set_refresh_token(user_id, token)

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> bool:
        with self._uow_factory() as uow:
            return uow.users.swap_refresh_token(user_id, expected, new)

    def clear(self, user_id: int) -> None:
        with self._uow_factory() as uow:
            uow.users.set_refresh_token(user_id, None)
