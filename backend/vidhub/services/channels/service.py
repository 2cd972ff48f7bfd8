"""
ChannelService
==============

Read-side aggregation over the subscription graph and watch history.

Nothing here writes: both queries run in read-only units of work, and the
counts are computed by the database (``count(*)`` / ``EXISTS``) instead of
loading relation sets into memory.
"""

from __future__ import annotations

from vidhub.services._shared.base import BaseService
from vidhub.services._shared.errors import BadRequestError, NotFoundError
from vidhub.services.channels.dto import ChannelProfileOut, VideoOwnerOut, WatchHistoryVideoOut


class ChannelService(BaseService):
    """Channel profile and watch-history projections."""

    def get_channel_profile(
        self, username: str | None, viewer_id: int | None = None
    ) -> ChannelProfileOut:
        """
        Build the public profile of the channel ``username``.

        :param username: Channel handle; matched case-insensitively.
        :type username: str | None
        :param viewer_id: Authenticated viewer, or ``None`` when anonymous.
        :type viewer_id: int | None
        :returns: Profile with exact subscriber counts and the viewer flag.
        :rtype: ChannelProfileOut
        :raises BadRequestError: When ``username`` is blank.
        :raises NotFoundError: When no channel matches.
        """
        handle = (username or "").strip()
        if not handle:
            raise BadRequestError("Username is missing")

        with self.ro_uow() as uow:
            channel = uow.users.get_by_username(handle)
            if channel is None:
                raise NotFoundError("Channel", handle, message="Channel does not exist")

            subscribers = uow.subscriptions.count_subscribers(channel.id)
            subscribed_to = uow.subscriptions.count_subscriptions(channel.id)
            is_subscribed = viewer_id is not None and uow.subscriptions.is_subscribed(
                viewer_id, channel.id
            )

            return ChannelProfileOut(
                id=channel.id,
                full_name=channel.full_name,
                username=channel.username,
                subscribers_count=subscribers,
                channels_subscribed_to_count=subscribed_to,
                is_subscribed=is_subscribed,
                avatar=channel.avatar,
                cover_image=channel.cover_image,
                email=channel.email,
            )

    def get_watch_history(self, user_id: int) -> list[WatchHistoryVideoOut]:
        """
        Return the caller's watch history, most recent first.

        Each video carries its owner's ``full_name``, ``username`` and
        ``avatar`` only. Entries pointing at deleted videos are skipped; an
        empty history yields an empty list.

        :param user_id: Authenticated user.
        :type user_id: int
        :rtype: list[WatchHistoryVideoOut]
        """
        items: list[WatchHistoryVideoOut] = []
        with self.ro_uow() as uow:
            for row in uow.watch_history.iter_with_videos(user_id):
                video = row.Video
                items.append(
                    WatchHistoryVideoOut(
                        id=video.id,
                        title=video.title,
                        description=video.description,
                        video_file=video.video_file,
                        thumbnail=video.thumbnail,
                        duration=video.duration,
                        views=video.views,
                        is_published=video.is_published,
                        created_at=video.created_at,
                        owner=VideoOwnerOut(
                            full_name=row.owner_full_name,
                            username=row.owner_username,
                            avatar=row.owner_avatar,
                        ),
                    )
                )
        return items
