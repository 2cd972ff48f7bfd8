"""Factory Boy definition for :class:`vidhub.models.watch_history.WatchHistoryEntry`."""

from __future__ import annotations

import factory
from vidhub.models.watch_history import WatchHistoryEntry

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from tests.factories.video import VideoFactory


class WatchHistoryEntryFactory(BaseFactory):
    """One history slot; ``position=0`` is the most recently watched video."""

    class Meta:
        model = WatchHistoryEntry

    id = None
    user_id = factory.LazyFunction(lambda: UserFactory().id)
    video_id = factory.LazyFunction(lambda: VideoFactory().id)
    position = factory.Sequence(lambda n: n)
