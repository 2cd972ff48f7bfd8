"""Redis-backed single-slot refresh-token store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]

from vidhub.services._shared.ports import RefreshTokenStore


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    One key per user, ``rt:u:{user_id}``, holding the live refresh token.

    Keys expire together with the refresh token, so an abandoned session does
    not linger. ``compare_and_swap`` uses ``WATCH``/``MULTI``/``EXEC``: if
    another client touches the key between the read and the write, ``EXEC``
    aborts and the swap is reported as failed. It is never retried; the loser
    of a race must not win on a second attempt.

    :param r: A Redis client (already connected).
    :param ttl: Lifetime applied on every write; the refresh token lifetime.
    """

    r: redis.Redis
    ttl: timedelta

    @staticmethod
    def _k(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _s(value: bytes | str | None) -> str | None:
        if isinstance(value, bytes | bytearray):
            return value.decode()
        return value

    def _ttl_seconds(self) -> int:
        return max(1, int(self.ttl.total_seconds()))

    def get(self, user_id: int) -> str | None:
        return self._s(self.r.get(self._k(user_id)))

    def put(self, user_id: int, token: str) -> None:
        self.r.set(self._k(user_id), token, ex=self._ttl_seconds())

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> bool:
        key = self._k(user_id)
        with self.r.pipeline() as p:
            try:
                p.watch(key)
                if self._s(p.get(key)) != expected:
                    p.unwatch()
                    return False
                p.multi()
                p.set(key, new, ex=self._ttl_seconds())
                p.execute()
            except redis.WatchError:
                return False
        return True

    def clear(self, user_id: int) -> None:
        self.r.delete(self._k(user_id))
