"""User repository for lookups and the refresh-token slot."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from vidhub.models.user import User
from vidhub.repositories.base import BaseRepository


def _normalize(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().lower()
    return v or None


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Username and email are stored normalized, so every lookup normalizes its
    input the same way and compares exactly. The ``refresh_token`` column is
    only written through the slot helpers below.
    """

    model = User

    # ---------------------------- Whitelist ----------------------------

    def _updatable_fields(self):
        """Publicly allowed updatable fields (password and token excluded)."""
        return {"email", "full_name", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive).

        :param username: Handle to normalise and search.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        key = _normalize(username)
        if key is None:
            return None
        result = self.session.execute(select(User).where(User.username == key))
        return cast(User | None, result.scalars().first())

    def find_by_identifier(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Resolve a user by username OR email, whichever are supplied.

        :param username: Optional handle.
        :type username: str | None
        :param email: Optional email.
        :type email: str | None
        :returns: First matching user or ``None``. ``None`` as well when
            neither identifier carries a value.
        :rtype: User | None
        """
        clauses = []
        if (u := _normalize(username)) is not None:
            clauses.append(User.username == u)
        if (e := _normalize(email)) is not None:
            clauses.append(User.email == e)
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id.asc()).limit(1)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, username: str | None, email: str | None) -> bool:
        return self.find_by_identifier(username=username, email=email) is not None

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another user already owns ``email``."""
        key = _normalize(email)
        if key is None:
            return False
        stmt = select(User.id).where(User.email == key)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return bool(self.session.execute(stmt.limit(1)).first())

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user: User, new_password: str) -> None:
        """Replace the password hash of ``user`` and flush.

        :param user: Loaded user entity.
        :type user: User
        :param new_password: Raw password to assign; model handles hashing.
        :type new_password: str
        """
        user.password = new_password  # invokes setter → hash
        self.flush()

    # ---------------------------- Refresh-token slot ----------------------------

    def get_refresh_token(self, user_id: int) -> str | None:
        stmt = select(User.refresh_token).where(User.id == user_id)
        return cast(str | None, self.session.execute(stmt).scalar_one_or_none())

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        """Unconditionally overwrite (or clear with ``None``) the stored token."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)

    def swap_refresh_token(self, user_id: int, expected: str, new: str) -> bool:
        """Replace the stored token only if it still equals ``expected``.

        Runs as a single conditional ``UPDATE``; the database serializes
        concurrent writers on the row so at most one swap from the same
        ``expected`` value can match.

        :returns: ``True`` when exactly one row was updated.
        :rtype: bool
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
