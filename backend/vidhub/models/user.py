"""User (channel) model definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from vidhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .video import Video


def normalize_email(value: Any) -> str:
    """
    Return the stored form of an email address.

    :raises ValueError: If the value is missing or malformed.
    """
    if not value or not isinstance(value, str):
        raise ValueError("Email is required.")
    v = value.strip().lower()
    # Minimal sanity check; full validation happens at API layer.
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Email format looks invalid.")
    return v


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity. Every user is also a channel others can subscribe to.

    Fields
    ------
    username : str
        Public handle. Stored normalized (lowercase, trimmed). Unique.
    email : str
        Login email. Stored normalized (lowercase, trimmed). Unique.
    full_name : str
        Display name.
    avatar : str
        Public URL of the avatar image on the media host.
    cover_image : str | None
        Public URL of the channel cover image.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    refresh_token : str | None
        The single currently valid refresh token. ``None`` when logged out.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str] = mapped_column(String(500), nullable=False)
    cover_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_email", "email"),
        Index("ix_users_username", "username"),
    )

    videos: Mapped[list[Video]] = relationship(
        "Video", back_populates="owner", passive_deletes=True, lazy="noload"
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValueError: If ``raw`` is empty.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash or not raw:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        return normalize_email(value)

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Normalize usernames to their lookup form.

        :returns: Trimmed, lowercased username.
        :rtype: str
        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str):
            raise ValueError("Username is required.")
        v = value.strip().lower()
        if not v:
            raise ValueError("Username is required.")
        return v

    @validates("full_name")
    def _normalize_full_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Full name is required.")
        return value.strip()
