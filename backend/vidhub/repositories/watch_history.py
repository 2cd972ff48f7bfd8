"""Watch-history repository with the video/owner join."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from sqlalchemy import Row, select
from sqlalchemy.orm import aliased

from vidhub.models.user import User
from vidhub.models.video import Video
from vidhub.models.watch_history import WatchHistoryEntry
from vidhub.repositories.base import BaseRepository


class WatchHistoryRepository(BaseRepository[WatchHistoryEntry]):
    """Persistence helpers for :class:`WatchHistoryEntry`."""

    model = WatchHistoryEntry

    def iter_with_videos(self, user_id: int, *, chunk_size: int = 100) -> Iterator[Row[Any]]:
        """Stream ``(entry, video, owner)`` rows for ``user_id`` by position.

        Inner joins drop entries whose video (or its owner) no longer exists.
        Rows are fetched from the cursor in chunks of ``chunk_size``.

        :param user_id: Owner of the history list.
        :type user_id: int
        :param chunk_size: Rows buffered per fetch.
        :type chunk_size: int
        :returns: Iterator of rows with ``position``, ``Video`` and the owner
            projection ``owner_full_name``, ``owner_username``, ``owner_avatar``.
        :rtype: Iterator[Row]
        """
        owner = aliased(User, name="owner")
        stmt = (
            select(
                WatchHistoryEntry.position,
                Video,
                owner.full_name.label("owner_full_name"),
                owner.username.label("owner_username"),
                owner.avatar.label("owner_avatar"),
            )
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .join(owner, owner.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(WatchHistoryEntry.position.asc())
            .execution_options(yield_per=chunk_size)
        )
        yield from self.session.execute(stmt)
