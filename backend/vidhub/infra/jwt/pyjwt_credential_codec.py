"""PyJWT-backed credential codec (HS256 by default)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt

from vidhub.services._shared.ports import (
    CredentialCodec,
    InvalidTokenError,
    TokenExpiredError,
    TokenType,
    TokenTypeMismatchError,
)
from vidhub.services.auth.dto import AuthTokenConfig

REQUIRED_CLAIMS = ("sub", "type", "iat", "exp", "jti")


def utc_now() -> datetime:
    return datetime.now(UTC)


def _other(token_type: TokenType) -> TokenType:
    return TokenType.REFRESH if token_type is TokenType.ACCESS else TokenType.ACCESS


class PyJWTCredentialCodec(CredentialCodec):
    """
    Sign and verify access/refresh tokens with PyJWT.

    Claims: ``sub`` (user id as string), ``type`` (``access``/``refresh``),
    ``iat``, ``exp`` and a random ``jti`` so two tokens minted in the same
    second for the same user still differ.

    Expiry is evaluated against the injected ``clock`` rather than PyJWT's
    wall clock, so verification depends only on the keys and the clock.

    :param config: Secrets, lifetimes and algorithm.
    :param clock: Returns the current aware UTC datetime.
    """

    def __init__(self, config: AuthTokenConfig, *, clock: Callable[[], datetime] = utc_now) -> None:
        self.config = config
        self.clock = clock

    # ------------------------------ issue ------------------------------

    def issue_access_token(self, subject_id: int) -> str:
        return self._encode(subject_id, TokenType.ACCESS)

    def issue_refresh_token(self, subject_id: int) -> str:
        return self._encode(subject_id, TokenType.REFRESH)

    def _encode(self, subject_id: int, token_type: TokenType) -> str:
        now = self.clock()
        payload = {
            "sub": str(subject_id),
            "type": token_type.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl(token_type)).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret(token_type), algorithm=self.config.algorithm)

    # ------------------------------ verify ------------------------------

    def verify(self, token: str, expected_type: TokenType) -> int:
        """
        Return the subject id of a valid token of ``expected_type``.

        The signature is checked with the secret of the expected type before
        any claim is read. A token that fails it is reported as a mismatch
        only when it verifies under the other type's secret and carries that
        type's tag; anything else is invalid.

        :raises InvalidTokenError: Malformed token, bad signature, bad claims.
        :raises TokenTypeMismatchError: Genuine token of the other type.
        :raises TokenExpiredError: ``exp`` is not after the clock's now.
        """
        try:
            payload = self._decode(token, expected_type)
        except jwt.InvalidSignatureError as exc:
            other = _other(expected_type)
            if self._is_genuine(token, other):
                raise TokenTypeMismatchError(expected_type, other.value) from exc
            raise InvalidTokenError(str(exc)) from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if payload["type"] != expected_type.value:
            raise InvalidTokenError("type claim does not match the signing key")

        exp = payload["exp"]
        if not isinstance(exp, int):
            raise InvalidTokenError("exp claim must be an integer")
        if int(self.clock().timestamp()) >= exp:
            raise TokenExpiredError("token has expired")

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("sub claim is not a user id") from exc

    # ------------------------------ helpers ------------------------------

    def _decode(self, token: str, token_type: TokenType) -> dict[str, Any]:
        return jwt.decode(
            token,
            self._secret(token_type),
            algorithms=[self.config.algorithm],
            options={
                "require": list(REQUIRED_CLAIMS),
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )

    def _is_genuine(self, token: str, token_type: TokenType) -> bool:
        """True when ``token`` verifies as one of ours of ``token_type``."""
        try:
            payload = self._decode(token, token_type)
        except jwt.PyJWTError:
            return False
        return payload["type"] == token_type.value

    def _secret(self, token_type: TokenType) -> str:
        if token_type is TokenType.ACCESS:
            return self.config.access_secret
        return self.config.refresh_secret

    def _ttl(self, token_type: TokenType):
        if token_type is TokenType.ACCESS:
            return self.config.access_expires
        return self.config.refresh_expires
