"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from vidhub.repositories.base import BaseRepository
from vidhub.repositories.subscription import SubscriptionRepository
from vidhub.repositories.user import UserRepository
from vidhub.repositories.watch_history import WatchHistoryRepository

__all__ = [
    "BaseRepository",
    "SubscriptionRepository",
    "UserRepository",
    "WatchHistoryRepository",
]
