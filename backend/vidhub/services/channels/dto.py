"""
DTOs for ChannelService.

Read-only projections assembled from users, subscriptions, videos and
watch-history rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public channel profile as seen by a (possibly anonymous) viewer.

    :param id: Channel (user) identifier.
    :type id: int
    :param full_name: Display name.
    :type full_name: str
    :param username: Handle.
    :type username: str
    :param subscribers_count: Exact number of users subscribed to the channel.
    :type subscribers_count: int
    :param channels_subscribed_to_count: Exact number of channels it follows.
    :type channels_subscribed_to_count: int
    :param is_subscribed: Whether the viewer follows the channel; always
        ``False`` for anonymous viewers.
    :type is_subscribed: bool
    :param avatar: Avatar URL.
    :type avatar: str
    :param cover_image: Cover image URL.
    :type cover_image: str | None
    :param email: Channel email.
    :type email: str
    """

    id: int
    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    avatar: str
    cover_image: str | None
    email: str


@dataclass(frozen=True, slots=True)
class VideoOwnerOut:
    """Owner projection embedded in each history item. Exactly three fields."""

    full_name: str
    username: str
    avatar: str


@dataclass(frozen=True, slots=True)
class WatchHistoryVideoOut:
    """A watched video with its owner denormalized."""

    id: int
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: int
    views: int
    is_published: bool
    created_at: datetime | None
    owner: VideoOwnerOut
