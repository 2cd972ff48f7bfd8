"""User, session and channel endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import set_access_cookies, set_refresh_cookies, unset_jwt_cookies
from marshmallow import ValidationError

from vidhub.api.deps import (
    api_response,
    current_user_id,
    optional_auth,
    require_auth,
    service_context,
    staged_upload,
    timing,
)
from vidhub.core.security import get_codec, get_media_uploader, get_refresh_store
from vidhub.schemas import (
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    UserSchema,
    WatchHistoryVideoSchema,
)
from vidhub.services import (
    AuthService,
    ChangePasswordIn,
    ChannelService,
    IdentityService,
    LoginIn,
    RefreshIn,
    UserRegisterIn,
    UserUpdateIn,
)

bp = Blueprint("users", __name__, url_prefix="/users")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()
channel_schema = ChannelProfileSchema()
history_schema = WatchHistoryVideoSchema(many=True)


def _auth_service() -> AuthService:
    return AuthService(
        codec=get_codec(), refresh_store=get_refresh_store(), ctx=service_context()
    )


def _identity_service() -> IdentityService:
    return IdentityService(media=get_media_uploader(), ctx=service_context())


def _form_or_json() -> dict:
    if request.form:
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


# --------------------------------------------------------------------------- #
# Registration and session lifecycle
# --------------------------------------------------------------------------- #


@bp.post("/register")
@timing
def register():
    """Register a new user from multipart fields plus ``avatar``/``coverImage`` files."""

    data = register_schema.load(_form_or_json())
    with staged_upload("avatar") as avatar_path, staged_upload("coverImage") as cover_path:
        user = _identity_service().register_user(
            UserRegisterIn(
                full_name=data["full_name"],
                email=data["email"],
                username=data["username"],
                password=data["password"],
                avatar_path=avatar_path,
                cover_image_path=cover_path,
            )
        )
    return api_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and set both credential cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    out = _auth_service().login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    response = api_response(login_response_schema.dump(out), "User logged in successfully")
    set_access_cookies(response, out.access_token)
    set_refresh_cookies(response, out.refresh_token)
    return response


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Clear the refresh slot and both cookies."""

    _auth_service().logout(current_user_id())
    response = api_response({}, "User logged out")
    unset_jwt_cookies(response)
    return response


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token presented by cookie or JSON body."""

    cookie_name = current_app.config.get("JWT_REFRESH_COOKIE_NAME", "refreshToken")
    presented = request.cookies.get(cookie_name)
    if not presented:
        try:
            presented = refresh_schema.load(request.get_json(silent=True) or {})["refresh_token"]
        except ValidationError:
            # A malformed body is reported like a missing token
            presented = None
    pair = _auth_service().refresh(RefreshIn(refresh_token=presented))
    response = api_response(token_pair_schema.dump(pair), "Access token refreshed")
    set_access_cookies(response, pair.access_token)
    set_refresh_cookies(response, pair.refresh_token)
    return response


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(request.get_json(silent=True) or {})
    _auth_service().change_password(
        ChangePasswordIn(
            user_id=current_user_id(),
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return api_response({}, "Password changed successfully")


# --------------------------------------------------------------------------- #
# Account
# --------------------------------------------------------------------------- #


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    user = _identity_service().get_current_user(current_user_id())
    return api_response(user_schema.dump(user), "User fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    data = update_account_schema.load(request.get_json(silent=True) or {})
    user = _identity_service().update_account_details(
        current_user_id(), UserUpdateIn(full_name=data["full_name"], email=data["email"])
    )
    return api_response(user_schema.dump(user), "Account details updated successfully")


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    with staged_upload("avatar") as path:
        user = _identity_service().update_avatar(current_user_id(), path)
    return api_response(user_schema.dump(user), "Avatar image updated successfully")


@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    with staged_upload("coverImage") as path:
        user = _identity_service().update_cover_image(current_user_id(), path)
    return api_response(user_schema.dump(user), "Cover image updated successfully")


# --------------------------------------------------------------------------- #
# Channel views
# --------------------------------------------------------------------------- #


@bp.get("/c/<string:username>")
@optional_auth
@timing
def channel_profile(username: str):
    """Return a channel profile; ``isSubscribed`` is relative to the caller, if any."""

    ctx = service_context()
    profile = ChannelService(ctx=ctx).get_channel_profile(username, viewer_id=ctx.actor_id)
    return api_response(channel_schema.dump(profile), "User channel fetched successfully")


@bp.get("/history")
@require_auth
@timing
def watch_history():
    items = ChannelService(ctx=service_context()).get_watch_history(current_user_id())
    return api_response(history_schema.dump(items), "Watch history fetched successfully")
