"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`vidhub.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``vidhub.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Identity service (from ``vidhub.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`UserUpdateIn`, :class:`UserPublicOut`

- Auth service (from ``vidhub.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`LoginOut`, :class:`RefreshIn`,
      :class:`ChangePasswordIn`, :class:`TokenPairOut`, :class:`AuthTokenConfig`

- Channel service (from ``vidhub.services.channels``)
    * :class:`ChannelService`
    * DTOs: :class:`ChannelProfileOut`, :class:`WatchHistoryVideoOut`,
      :class:`VideoOwnerOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.dto import (
    AuthTokenConfig,
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)
from .auth.service import AuthService
from .channels.dto import ChannelProfileOut, VideoOwnerOut, WatchHistoryVideoOut
from .channels.service import ChannelService
from .identity.dto import UserPublicOut, UserRegisterIn, UserUpdateIn
from .identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserUpdateIn",
    "UserPublicOut",
    # Auth
    "AuthService",
    "AuthTokenConfig",
    "ChangePasswordIn",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenPairOut",
    # Channels
    "ChannelService",
    "ChannelProfileOut",
    "VideoOwnerOut",
    "WatchHistoryVideoOut",
]
