from vidhub.models.subscription import Subscription
from vidhub.models.user import User
from vidhub.models.video import Video
from vidhub.models.watch_history import WatchHistoryEntry

__all__ = [
    "Subscription",
    "User",
    "Video",
    "WatchHistoryEntry",
]
