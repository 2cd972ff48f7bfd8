"""
vidhub.services._shared.ports
=============================

Collection of *ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`credential_codec`:
    :class:`~.CredentialCodec` signs and verifies access/refresh tokens;
    :class:`~.TokenType` is the tag each token carries.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, the single-slot refresh-token store with
    compare-and-swap, plus :class:`~.InMemoryRefreshTokenStore`.

- :mod:`media_uploader`:
    :class:`~.MediaUploader`, which pushes local files to the media host.

Concrete adapters (PyJWT, SQLAlchemy, Redis, HTTP) live under ``vidhub.infra``.
"""

from __future__ import annotations

from .credential_codec import (
    CredentialCodec,
    CredentialError,
    InvalidTokenError,
    TokenExpiredError,
    TokenType,
    TokenTypeMismatchError,
)
from .media_uploader import MediaUploader, MediaUploadError, UploadedMedia
from .refresh_token_store import InMemoryRefreshTokenStore, RefreshTokenStore

__all__ = [
    "CredentialCodec",
    "CredentialError",
    "InvalidTokenError",
    "TokenExpiredError",
    "TokenType",
    "TokenTypeMismatchError",
    "InMemoryRefreshTokenStore",
    "RefreshTokenStore",
    "MediaUploader",
    "MediaUploadError",
    "UploadedMedia",
]
