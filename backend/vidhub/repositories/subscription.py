"""Subscription edge repository: counts and membership probes only."""

from __future__ import annotations

from sqlalchemy import exists, func, select

from vidhub.models.subscription import Subscription
from vidhub.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Read helpers over ``subscriptions`` that never materialize edge sets."""

    model = Subscription

    def count_subscribers(self, channel_id: int) -> int:
        """Count inbound edges (``* -> channel``)."""
        stmt = select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
        return int(self.session.execute(stmt).scalar_one())

    def count_subscriptions(self, subscriber_id: int) -> int:
        """Count outbound edges (``subscriber -> *``)."""
        stmt = select(func.count(Subscription.id)).where(
            Subscription.subscriber_id == subscriber_id
        )
        return int(self.session.execute(stmt).scalar_one())

    def is_subscribed(self, subscriber_id: int, channel_id: int) -> bool:
        """``EXISTS`` probe for the edge ``subscriber -> channel``."""
        stmt = select(
            exists().where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            )
        )
        return bool(self.session.execute(stmt).scalar())
