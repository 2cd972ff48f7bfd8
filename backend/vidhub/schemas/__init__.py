"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    TokenPairSchema,
)
from .channel import ChannelProfileSchema, VideoOwnerSchema, WatchHistoryVideoSchema
from .user import RegisterSchema, UpdateAccountSchema, UserSchema

__all__ = [
    "LoginSchema",
    "RefreshTokenSchema",
    "ChangePasswordSchema",
    "TokenPairSchema",
    "LoginResponseSchema",
    "RegisterSchema",
    "UpdateAccountSchema",
    "UserSchema",
    "ChannelProfileSchema",
    "VideoOwnerSchema",
    "WatchHistoryVideoSchema",
]
