"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param username: Public handle (normalized to lowercase).
    :type username: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param avatar_path: Local path of the staged avatar file, if any.
    :type avatar_path: str | None
    :param cover_image_path: Local path of the staged cover image, if any.
    :type cover_image_path: str | None
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar_path: str | None = None
    cover_image_path: str | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for account detail updates. Both fields are required.

    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    full_name: str
    email: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO representing public-safe user data.

    Never carries the password hash or the stored refresh token.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
