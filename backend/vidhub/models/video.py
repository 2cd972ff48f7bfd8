"""Video model. Read-only to the accounts core; owned by a user (channel)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Video(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Uploaded video published on a channel.

    Only the fields the watch-history projection needs are modelled here.
    """

    __tablename__ = "videos"

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    video_file: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(500), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("ix_videos_owner_id", "owner_id"),)

    owner: Mapped[User] = relationship(
        "User", back_populates="videos", passive_deletes=True, lazy="noload"
    )
