"""Factory Boy definition for :class:`vidhub.models.subscription.Subscription`."""

from __future__ import annotations

import factory
from vidhub.models.subscription import Subscription

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class SubscriptionFactory(BaseFactory):
    """Edge ``subscriber -> channel``. Pass existing users to wire a graph."""

    class Meta:
        model = Subscription

    id = None
    subscriber_id = factory.LazyFunction(lambda: UserFactory().id)
    channel_id = factory.LazyFunction(lambda: UserFactory().id)
