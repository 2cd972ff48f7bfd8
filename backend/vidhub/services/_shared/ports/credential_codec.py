"""
Port for signing and verifying the two session credentials.

The access and refresh tokens share one claim layout and differ only in their
``type`` tag, signing secret and lifetime. Verification decodes the tag and
rejects it when it does not match the slot the token was presented in.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class TokenType(str, Enum):
    """Tag carried in the ``type`` claim of every issued token."""

    ACCESS = "access"
    REFRESH = "refresh"


class CredentialError(Exception):
    """Base class for token verification failures."""


class InvalidTokenError(CredentialError):
    """Malformed token, bad signature, or missing/invalid claims."""


class TokenExpiredError(CredentialError):
    """Signature is valid but ``exp`` has passed."""


class TokenTypeMismatchError(CredentialError):
    """The token is of the other kind (access presented as refresh or vice versa)."""

    def __init__(self, expected: TokenType, actual: str) -> None:
        super().__init__(f"expected {expected.value} token, got {actual!r}")
        self.expected = expected
        self.actual = actual


class CredentialCodec(Protocol):
    """Issue and verify signed, expiring tokens for a subject id."""

    def issue_access_token(self, subject_id: int) -> str:
        """Sign a short-lived ``type="access"`` token."""
        ...

    def issue_refresh_token(self, subject_id: int) -> str:
        """Sign a long-lived ``type="refresh"`` token."""
        ...

    def verify(self, token: str, expected_type: TokenType) -> int:
        """
        Return the subject id carried by ``token``.

        :raises InvalidTokenError: bad signature, malformed token or claims.
        :raises TokenExpiredError: expiry has passed.
        :raises TokenTypeMismatchError: token type differs from ``expected_type``.
        """
        ...
