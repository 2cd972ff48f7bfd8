from __future__ import annotations

import logging

from vidhub.repositories.user import UserRepository
from vidhub.services._shared.base import BaseService, ServiceContext
from vidhub.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    InternalError,
    NotFoundError,
)
from vidhub.services._shared.ports import (
    CredentialCodec,
    CredentialError,
    RefreshTokenStore,
    TokenType,
)
from vidhub.services.auth.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)
from vidhub.services.identity.service import to_public_out

log = logging.getLogger(__name__)

TOKEN_GENERATION_FAILED = "Something went wrong while generating tokens"


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout / change password).

    Tokens are signed and verified by a :class:`CredentialCodec`; the single
    live refresh token per user is held by a :class:`RefreshTokenStore`.

    State per user
    --------------
    * **Anonymous**: never logged in, slot empty.
    * **Authenticated**: slot holds the one refresh token that may be exchanged.
    * **LoggedOut**: slot cleared; every earlier refresh token is dead.

    Refresh tokens are single-use: each successful refresh swaps the slot from
    the presented token to a new one in one compare-and-swap, so a replayed or
    raced token can never be exchanged twice.
    """

    def __init__(
        self,
        *,
        codec: CredentialCodec,
        refresh_store: RefreshTokenStore,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param codec: Signs/verifies access and refresh tokens. Carries the
            secrets and lifetimes (:class:`~vidhub.services.auth.dto.AuthTokenConfig`).
        :param refresh_store: Single-slot refresh-token store.
        :param ctx: Optional request context.
        """
        super().__init__(ctx=ctx)
        self.codec = codec
        self.refresh_store = refresh_store

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Logging in overwrites the refresh slot, which silently ends any session
        opened elsewhere (its access token lives on until it expires).

        :param dto: Login input.
        :returns: Token pair and sanitized user view.
        :raises BadRequestError: Neither username nor email supplied, or no password.
        :raises NotFoundError: No user matches.
        :raises AuthenticationError: Wrong password.
        :raises InternalError: Token signing failed.
        """
        username = (dto.username or "").strip()
        email = (dto.email or "").strip()
        if not username and not email:
            raise BadRequestError("Username or email is required")
        if not dto.password:
            raise BadRequestError("Password is required")

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.find_by_identifier(username=username or None, email=email or None)
            if user is None:
                raise NotFoundError("User", username or email, message="User does not exist")
            if not user.verify_password(dto.password):
                raise AuthenticationError("Invalid user credentials")
            user_id = user.id
            user_out = to_public_out(user)

        pair = self._issue_pair(user_id)
        self.refresh_store.put(user_id, pair.refresh_token)
        log.info("user logged in", extra={"user_id": user_id})

        return LoginOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            user=user_out,
        )

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair, consuming the old token.

        Security
        --------
        - The token must verify as a *refresh* token and be unexpired.
        - It must still be the stored token; a superseded, logged-out or
          concurrently consumed token fails the compare-and-swap.
        - Every failure is reported as :class:`AuthenticationError` with a
          generic message; the cause is logged only.
        """
        presented = (dto.refresh_token or "").strip()
        if not presented:
            raise AuthenticationError("Unauthorized request")

        try:
            user_id = self.codec.verify(presented, TokenType.REFRESH)
        except CredentialError as exc:
            log.info("refresh token rejected: %s", type(exc).__name__)
            raise AuthenticationError("Invalid refresh token") from exc

        pair = self._issue_pair(user_id)
        if not self.refresh_store.compare_and_swap(user_id, presented, pair.refresh_token):
            log.warning("stale refresh token presented", extra={"user_id": user_id})
            raise AuthenticationError("Refresh token is expired or used")

        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """
        Clear the refresh slot. Idempotent.

        The caller is already authenticated by an access token; no token is
        inspected here.
        """
        self.refresh_store.clear(user_id)
        log.info("user logged out", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Password
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the password hash after verifying the current password.

        The refresh slot is left untouched, so existing sessions stay valid.

        :raises BadRequestError: Empty new password.
        :raises NotFoundError: User vanished.
        :raises AuthenticationError: Old password does not verify.
        """
        if not dto.new_password or not dto.new_password.strip():
            raise BadRequestError("New password is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not user.verify_password(dto.old_password or ""):
                raise AuthenticationError("Invalid old password")
            repo.update_password(user, dto.new_password)

        log.info("password changed", extra={"user_id": dto.user_id})

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user_id: int) -> TokenPairOut:
        """Sign a new access/refresh pair; signing failures become :class:`InternalError`."""
        try:
            access = self.codec.issue_access_token(user_id)
            refresh = self.codec.issue_refresh_token(user_id)
        except Exception as exc:
            log.error("token generation failed", exc_info=exc)
            raise InternalError(TOKEN_GENERATION_FAILED) from exc
        return TokenPairOut(access_token=access, refresh_token=refresh)
