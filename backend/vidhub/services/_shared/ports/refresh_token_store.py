from __future__ import annotations

import threading
from typing import Protocol


class RefreshTokenStore(Protocol):
    """
    Single-slot store holding the one currently valid refresh token per user.

    The stored value is the source of truth for refresh validity: a token that
    verifies cryptographically but differs from the stored value has been
    superseded (or logged out) and must be rejected.

    ``compare_and_swap`` MUST be atomic per user.
    """

    def get(self, user_id: int) -> str | None:
        """Return the stored token, or ``None`` when the slot is empty."""
        ...

    def put(self, user_id: int, token: str) -> None:
        """Unconditionally overwrite the slot (login)."""
        ...

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> bool:
        """
        Replace the slot with ``new`` only if it currently equals ``expected``.

        :returns: ``True`` if the swap happened, ``False`` otherwise. Two
            concurrent calls with the same ``expected`` value never both return
            ``True``.
        """
        ...

    def clear(self, user_id: int) -> None:
        """Empty the slot. Clearing an empty slot is a no-op."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Dict-backed store for unit tests and local runs.

    .. note::
       A single lock makes each operation atomic within one process.
    """

    def __init__(self) -> None:
        self._slots: dict[int, str] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> str | None:
        with self._lock:
            return self._slots.get(user_id)

    def put(self, user_id: int, token: str) -> None:
        with self._lock:
            self._slots[user_id] = token

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> bool:
        with self._lock:
            if self._slots.get(user_id) != expected:
                return False
            self._slots[user_id] = new
            return True

    def clear(self, user_id: int) -> None:
        with self._lock:
            self._slots.pop(user_id, None)
