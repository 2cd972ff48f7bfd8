"""Subscription edge between a subscriber and a channel."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Subscription(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Directed edge ``subscriber -> channel``. Both ends are users.

    Each side is indexed so subscriber and subscription counts are index scans.
    """

    __tablename__ = "subscriptions"

    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
        Index("ix_subscriptions_channel_id", "channel_id"),
        Index("ix_subscriptions_subscriber_id", "subscriber_id"),
    )
