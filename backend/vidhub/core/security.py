"""Wire the credential codec, refresh-token store and media client into the app.

Secrets and lifetimes are read from config exactly once, here, and handed to
the codec as an :class:`~vidhub.services.auth.dto.AuthTokenConfig`. Request
handlers reach the wired objects through the accessors below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from vidhub.core.extensions import get_redis
from vidhub.infra.jwt.pyjwt_credential_codec import PyJWTCredentialCodec
from vidhub.infra.media.http_media_uploader import HttpMediaUploader
from vidhub.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from vidhub.infra.sqlalchemy.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from vidhub.services._shared.ports import CredentialCodec, MediaUploader, RefreshTokenStore
from vidhub.services.auth.dto import AuthTokenConfig

log = logging.getLogger(__name__)

EXTENSION_KEY = "vidhub.security"
STORE_BACKENDS = ("database", "redis")


@dataclass(slots=True)
class SecurityComponents:
    """Objects shared by every request of one application."""

    token_config: AuthTokenConfig
    codec: CredentialCodec
    refresh_store: RefreshTokenStore
    media: MediaUploader


def token_config_from(config) -> AuthTokenConfig:
    """Build the token configuration from a Flask config mapping.

    :raises ValueError: Equal secrets or an access TTL not below the refresh TTL.
    """
    return AuthTokenConfig(
        access_secret=config["ACCESS_TOKEN_SECRET"],
        refresh_secret=config["REFRESH_TOKEN_SECRET"],
        access_expires=timedelta(seconds=int(config["ACCESS_TOKEN_EXPIRES_SECONDS"])),
        refresh_expires=timedelta(seconds=int(config["REFRESH_TOKEN_EXPIRES_SECONDS"])),
        algorithm=config.get("JWT_ALGORITHM", "HS256"),
    )


def _build_refresh_store(app: Flask, token_config: AuthTokenConfig) -> RefreshTokenStore:
    backend = str(app.config.get("REFRESH_STORE_BACKEND", "database")).strip().lower()
    if backend not in STORE_BACKENDS:
        raise RuntimeError(
            f"Unknown REFRESH_STORE_BACKEND {backend!r}; expected one of {STORE_BACKENDS}"
        )
    if backend == "redis":
        return RedisRefreshTokenStore(r=get_redis(), ttl=token_config.refresh_expires)
    return SQLAlchemyRefreshTokenStore()


def init_app(app: Flask) -> None:
    """Create the security components and register them on ``app.extensions``."""
    token_config = token_config_from(app.config)
    components = SecurityComponents(
        token_config=token_config,
        codec=PyJWTCredentialCodec(token_config),
        refresh_store=_build_refresh_store(app, token_config),
        media=HttpMediaUploader(
            app.config["MEDIA_UPLOAD_URL"],
            api_key=app.config.get("MEDIA_UPLOAD_API_KEY"),
            timeout=float(app.config.get("MEDIA_UPLOAD_TIMEOUT", 10)),
        ),
    )
    app.extensions[EXTENSION_KEY] = components
    log.debug(
        "security wired: store=%s access_ttl=%s refresh_ttl=%s",
        type(components.refresh_store).__name__,
        token_config.access_expires,
        token_config.refresh_expires,
    )


def components() -> SecurityComponents:
    return current_app.extensions[EXTENSION_KEY]


def get_codec() -> CredentialCodec:
    return components().codec


def get_refresh_store() -> RefreshTokenStore:
    return components().refresh_store


def get_media_uploader() -> MediaUploader:
    return components().media
