from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from vidhub.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. At least one identifier must be supplied.

    :param password: Raw password (to be verified).
    :type password: str | None
    :param username: Handle, matched case-insensitively.
    :type username: str | None
    :param email: Email, matched case-insensitively.
    :type email: str | None
    """

    password: str | None
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh token, ``None`` when the client sent none.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    """
    Input DTO for a password change by the authenticated user.

    :param user_id: Authenticated user id.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    user_id: int
    old_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access token.
    :type access_token: str
    :param refresh_token: Encoded refresh token.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for login: the token pair plus the sanitized user view.

    :param access_token: Encoded access token.
    :type access_token: str
    :param refresh_token: Encoded refresh token.
    :type refresh_token: str
    :param user: Public user view (no password hash, no refresh token).
    :type user: UserPublicOut
    """

    access_token: str
    refresh_token: str
    user: UserPublicOut


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_secret: HMAC key for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC key for refresh tokens. Must differ from
        ``access_secret``.
    :type refresh_secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime. Must be longer than
        ``access_expires``.
    :type refresh_expires: timedelta
    :param algorithm: JWS algorithm for both kinds.
    :type algorithm: str
    :raises ValueError: If the invariants above do not hold.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=10)
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Token secrets must be non-empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")
        if self.access_expires <= timedelta(0):
            raise ValueError("Access token lifetime must be positive.")
        if self.access_expires >= self.refresh_expires:
            raise ValueError("Access token lifetime must be shorter than refresh lifetime.")
