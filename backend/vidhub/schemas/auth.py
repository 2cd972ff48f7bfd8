"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from .user import UserSchema


class LoginSchema(Schema):
    """Input payload for authenticating a user by username or email."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None, validate=validate.Length(max=50))
    email = fields.String(load_default=None, validate=validate.Length(max=254))
    password = fields.String(load_default=None, validate=validate.Length(max=128))


class RefreshTokenSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class ChangePasswordSchema(Schema):
    """Input payload for changing the authenticated user's password."""

    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(data_key="oldPassword", required=True)
    new_password = fields.String(
        data_key="newPassword", required=True, validate=validate.Length(max=128)
    )


class TokenPairSchema(Schema):
    """Response payload containing both credentials."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class LoginResponseSchema(TokenPairSchema):
    """Response payload for a successful login."""

    user = fields.Nested(UserSchema, required=True)
