"""Channel profile and watch-history schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    """Channel as seen by a (possibly anonymous) viewer."""

    id = fields.Integer(data_key="_id", required=True)
    full_name = fields.String(data_key="fullName", required=True)
    username = fields.String(required=True)
    subscribers_count = fields.Integer(data_key="subscribersCount", required=True)
    channels_subscribed_to_count = fields.Integer(
        data_key="channelsSubscribedToCount", required=True
    )
    is_subscribed = fields.Boolean(data_key="isSubscribed", required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    email = fields.String(required=True)


class VideoOwnerSchema(Schema):
    full_name = fields.String(data_key="fullName", required=True)
    username = fields.String(required=True)
    avatar = fields.String(required=True)


class WatchHistoryVideoSchema(Schema):
    """One watched video with its owner embedded."""

    id = fields.Integer(data_key="_id", required=True)
    title = fields.String(required=True)
    description = fields.String(allow_none=True)
    video_file = fields.String(data_key="videoFile", required=True)
    thumbnail = fields.String(required=True)
    duration = fields.Integer(required=True)
    views = fields.Integer(required=True)
    is_published = fields.Boolean(data_key="isPublished", required=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    owner = fields.Nested(VideoOwnerSchema, required=True)
