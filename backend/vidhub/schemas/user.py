"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class RegisterSchema(Schema):
    """Form fields of a multipart registration request.

    Presence is checked by the identity service so that a missing field is a
    ``400`` with a single message rather than a per-field ``422``.
    """

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(
        data_key="fullName", load_default=None, validate=validate.Length(max=100)
    )
    email = fields.String(load_default=None, validate=validate.Length(max=254))
    username = fields.String(load_default=None, validate=validate.Length(max=50))
    password = fields.String(load_default=None, validate=validate.Length(max=128))


class UpdateAccountSchema(Schema):
    """Payload for replacing the display name and email."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(
        data_key="fullName", load_default=None, validate=validate.Length(max=100)
    )
    email = fields.String(load_default=None, validate=validate.Length(max=254))


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(data_key="fullName", required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
