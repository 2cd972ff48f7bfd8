"""
IdentityService
===============

Aggregate service responsible for managing the `User` aggregate:
- Registration (with avatar/cover upload)
- Current-user lookup
- Account details and profile image updates
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from vidhub.models.user import User, normalize_email
from vidhub.repositories.user import UserRepository
from vidhub.services._shared.base import BaseService, ServiceContext
from vidhub.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    violates,
)
from vidhub.services._shared.ports import MediaUploader, MediaUploadError
from vidhub.services.identity.dto import UserPublicOut, UserRegisterIn, UserUpdateIn

log = logging.getLogger(__name__)

# PostgreSQL reports the constraint name, SQLite the column
_UNIQUE_MARKERS = ("uq_users_email", "uq_users_username", "users.email", "users.username")


def to_public_out(user: User) -> UserPublicOut:
    """Project a :class:`User` onto its client-safe view."""
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar=user.avatar,
        cover_image=user.cover_image,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring username/email uniqueness.
    - Retrieve and update account details safely.
    - Replace avatar and cover images through the media host.

    Every validation and upload happens before a row is written, so a failed
    step never leaves a partially populated user behind.
    """

    def __init__(self, *, media: MediaUploader, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.media = media

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises BadRequestError: Missing fields, malformed email, missing avatar, or upload
            failure.
        :raises ConflictError: Username or email already taken.
        """
        if any(_blank(v) for v in (dto.full_name, dto.email, dto.username, dto.password)):
            raise BadRequestError("All fields are required")
        try:
            normalize_email(dto.email)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from exc

        with self.ro_uow() as uow:
            if uow.users.exists_by_username_or_email(dto.username, dto.email):
                raise ConflictError("User", "Username or email already exists")

        if _blank(dto.avatar_path):
            raise BadRequestError("Avatar file is required")

        avatar_url = self._upload(dto.avatar_path, what="avatar")
        cover_url = None
        if not _blank(dto.cover_image_path):
            cover_url = self._upload(dto.cover_image_path, what="cover image")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            try:
                user = repo.model(
                    full_name=dto.full_name,
                    email=dto.email,
                    username=dto.username,
                    password=dto.password,  # model hashes via setter
                    avatar=avatar_url,
                    cover_image=cover_url,
                )
                repo.add(user)
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc
            except IntegrityError as exc:
                if any(violates(exc, marker) for marker in _UNIQUE_MARKERS):
                    raise ConflictError("User", "Username or email already exists") from exc
                raise

            out = to_public_out(user)

        log.info("user registered", extra={"user_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_current_user(self, user_id: int) -> UserPublicOut:
        """
        Return the user behind an authenticated request.

        :raises AuthenticationError: When the token subject no longer exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthenticationError("Invalid access token")
            return to_public_out(user)

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    def update_account_details(self, user_id: int, dto: UserUpdateIn) -> UserPublicOut:
        """
        Replace the display name and email.

        :param user_id: User identifier.
        :type user_id: int
        :param dto: New values; both are required.
        :type dto: UserUpdateIn
        :returns: Updated user DTO.
        :rtype: UserPublicOut
        :raises BadRequestError: When a field is blank or the email is malformed.
        :raises ConflictError: When another user already uses the email.
        :raises NotFoundError: When user not found.
        """
        if _blank(dto.full_name) or _blank(dto.email):
            raise BadRequestError("All fields are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if repo.exists_by_email(dto.email, exclude_id=user_id):
                raise ConflictError("User", "Email already in use")

            try:
                repo.update(user, full_name=dto.full_name, email=dto.email)
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc
            except IntegrityError as exc:
                raise ConflictError("User", "Email already in use") from exc

            return to_public_out(user)

    def update_avatar(self, user_id: int, local_path: str | None) -> UserPublicOut:
        """Upload a new avatar and point the user at it."""
        if _blank(local_path):
            raise BadRequestError("Avatar file is missing")
        url = self._upload(local_path, what="avatar")
        return self._set_image(user_id, avatar=url)

    def update_cover_image(self, user_id: int, local_path: str | None) -> UserPublicOut:
        """Upload a new cover image and point the user at it."""
        if _blank(local_path):
            raise BadRequestError("Cover image file is missing")
        url = self._upload(local_path, what="cover image")
        return self._set_image(user_id, cover_image=url)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _set_image(self, user_id: int, **fields: str) -> UserPublicOut:
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            repo.update(user, **fields)
            return to_public_out(user)

    def _upload(self, local_path: str | None, *, what: str) -> str:
        """
        Push ``local_path`` to the media host.

        :raises BadRequestError: When the upload fails.
        """
        try:
            uploaded = self.media.upload(str(local_path))
        except MediaUploadError as exc:
            log.warning("%s upload failed: %s", what, exc)
            raise BadRequestError(f"Error while uploading {what}") from exc
        return uploaded.url
