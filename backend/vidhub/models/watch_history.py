"""Ordered watch-history entries per user."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class WatchHistoryEntry(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One slot of a user's watch history.

    ``position`` orders the list; ``0`` is the most recently watched video.
    ``video_id`` is a soft reference: deleting a video leaves the entry
    dangling and readers skip it.
    """

    __tablename__ = "watch_history"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    video_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "position", name="uq_watch_history_user_position"),
        CheckConstraint("position >= 0", name="position_non_negative"),
    )
