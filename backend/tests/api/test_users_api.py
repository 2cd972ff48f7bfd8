"""End-to-end tests for ``/api/v1/users`` through the Flask test client."""

from __future__ import annotations

import io

import pytest
import responses

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from tests.factories.video import VideoFactory
from tests.factories.watch_history import WatchHistoryEntryFactory

BASE = "/api/v1/users"
MEDIA_URL = "https://media.test/upload"
PASSWORD = "s3cret-pass"


@pytest.fixture()
def upload_dir(app, tmp_path):
    original = app.config["UPLOAD_TMP_DIR"]
    app.config["UPLOAD_TMP_DIR"] = str(tmp_path)
    yield tmp_path
    app.config["UPLOAD_TMP_DIR"] = original


@pytest.fixture()
def media_host():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mocked:
        mocked.post(MEDIA_URL, json={"url": "https://cdn.test/file.png"})
        yield mocked


@pytest.fixture()
def alice(session):
    user = UserFactory(username="alice", email="alice@example.com", password=PASSWORD)
    session.commit()
    return user


def _login(client, **identifier):
    resp = client.post(f"{BASE}/login", json={"password": PASSWORD, **identifier})
    assert resp.status_code == 200, resp.get_json()
    return resp


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _cookie(client, name: str) -> str | None:
    cookie = client.get_cookie(name)
    return cookie.value if cookie is not None else None


# --------------------------------------------------------------------------- #
# Registration
# --------------------------------------------------------------------------- #
class TestRegister:
    def _form(self, **overrides):
        data = {
            "fullName": "Dana Scully",
            "email": "dana@example.com",
            "username": "Dana",
            "password": PASSWORD,
            "avatar": (io.BytesIO(b"png-bytes"), "dana.png"),
        }
        data.update(overrides)
        return {k: v for k, v in data.items() if v is not None}

    def test_register_uploads_and_creates(self, client, media_host, upload_dir):
        resp = client.post(
            f"{BASE}/register",
            data=self._form(coverImage=(io.BytesIO(b"cover"), "cover.png")),
            content_type="multipart/form-data",
        )

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        assert body["data"]["username"] == "dana"
        assert body["data"]["avatar"] == "https://cdn.test/file.png"
        assert body["data"]["coverImage"] == "https://cdn.test/file.png"
        assert "password" not in body["data"] and "refreshToken" not in body["data"]
        assert len(media_host.calls) == 2
        assert list(upload_dir.iterdir()) == []

    def test_missing_avatar(self, client, upload_dir):
        resp = client.post(
            f"{BASE}/register", data=self._form(avatar=None), content_type="multipart/form-data"
        )
        assert resp.status_code == 400
        assert resp.get_json()["detail"] == "Avatar file is required"

    def test_missing_field(self, client, upload_dir):
        resp = client.post(
            f"{BASE}/register", data=self._form(email=None), content_type="multipart/form-data"
        )
        assert resp.status_code == 400
        assert resp.get_json()["detail"] == "All fields are required"

    def test_duplicate_is_conflict(self, client, alice, media_host, upload_dir):
        resp = client.post(
            f"{BASE}/register",
            data=self._form(username="ALICE"),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 409
        assert resp.mimetype == "application/problem+json"
        assert resp.get_json()["code"] == "conflict"
        assert len(media_host.calls) == 0

    def test_media_host_failure_is_bad_request(self, client, upload_dir):
        with responses.RequestsMock() as mocked:
            mocked.post(MEDIA_URL, status=502)
            resp = client.post(
                f"{BASE}/register", data=self._form(), content_type="multipart/form-data"
            )
        assert resp.status_code == 400
        assert resp.get_json()["detail"] == "Error while uploading avatar"
        assert list(upload_dir.iterdir()) == []


# --------------------------------------------------------------------------- #
# Session lifecycle
# --------------------------------------------------------------------------- #
class TestSession:
    def test_login_sets_http_only_cookies(self, client, alice):
        resp = _login(client, username="alice")

        body = resp.get_json()
        assert body["data"]["user"]["username"] == "alice"
        assert body["data"]["accessToken"] and body["data"]["refreshToken"]
        set_cookies = resp.headers.getlist("Set-Cookie")
        for name in ("accessToken", "refreshToken"):
            header = next(h for h in set_cookies if h.startswith(f"{name}="))
            assert "HttpOnly" in header
        assert _cookie(client, "refreshToken") == body["data"]["refreshToken"]

    def test_login_by_email(self, client, alice):
        _login(client, email="ALICE@example.com")

    def test_wrong_password(self, client, alice):
        resp = client.post(f"{BASE}/login", json={"username": "alice", "password": "nope"})
        assert resp.status_code == 401
        problem = resp.get_json()
        assert problem["code"] == "unauthorized"
        assert problem["detail"] == "Invalid user credentials"
        assert problem["success"] is False
        assert problem["request_id"]

    def test_unknown_user(self, client):
        resp = client.post(f"{BASE}/login", json={"username": "ghost", "password": "x"})
        assert resp.status_code == 404

    def test_missing_identifier(self, client):
        resp = client.post(f"{BASE}/login", json={"password": "x"})
        assert resp.status_code == 400

    def test_missing_password_is_bad_request(self, client):
        resp = client.post(f"{BASE}/login", json={"username": "alice"})
        assert resp.status_code == 400
        assert resp.get_json()["detail"] == "Password is required"

    def test_refresh_from_cookie_rotates(self, client, alice):
        first = _login(client, username="alice").get_json()["data"]

        resp = client.post(f"{BASE}/refresh-token")
        assert resp.status_code == 200
        rotated = resp.get_json()["data"]
        assert rotated["refreshToken"] != first["refreshToken"]
        assert _cookie(client, "refreshToken") == rotated["refreshToken"]

    def test_refresh_from_body_and_reuse_rejected(self, client, alice):
        first = _login(client, username="alice").get_json()["data"]
        client.delete_cookie("refreshToken")

        ok = client.post(f"{BASE}/refresh-token", json={"refreshToken": first["refreshToken"]})
        assert ok.status_code == 200

        client.delete_cookie("refreshToken")
        reused = client.post(
            f"{BASE}/refresh-token", json={"refreshToken": first["refreshToken"]}
        )
        assert reused.status_code == 401
        assert reused.get_json()["detail"] == "Refresh token is expired or used"

    def test_refresh_without_token(self, client):
        resp = client.post(f"{BASE}/refresh-token", json={})
        assert resp.status_code == 401

    @pytest.mark.parametrize("body", [{"refreshToken": 123}, {"refreshToken": ["a"]}, ["x"]])
    def test_refresh_with_malformed_body_is_unauthorized(self, client, body):
        resp = client.post(f"{BASE}/refresh-token", json=body)
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "unauthorized"

    def test_logout_clears_cookies_and_slot(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]

        resp = client.post(f"{BASE}/logout", headers=_bearer(tokens["accessToken"]))
        assert resp.status_code == 200
        assert _cookie(client, "accessToken") is None
        assert _cookie(client, "refreshToken") is None

        again = client.post(f"{BASE}/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert again.status_code == 401

    def test_logout_requires_auth(self, client):
        assert client.post(f"{BASE}/logout").status_code == 401

    def test_change_password(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]

        resp = client.post(
            f"{BASE}/change-password",
            json={"oldPassword": PASSWORD, "newPassword": "an0ther-pass"},
            headers=_bearer(tokens["accessToken"]),
        )
        assert resp.status_code == 200

        relog = client.post(f"{BASE}/login", json={"username": "alice", "password": PASSWORD})
        assert relog.status_code == 401

    def test_change_password_wrong_old(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]
        resp = client.post(
            f"{BASE}/change-password",
            json={"oldPassword": "nope", "newPassword": "an0ther-pass"},
            headers=_bearer(tokens["accessToken"]),
        )
        assert resp.status_code == 401
        assert resp.get_json()["detail"] == "Invalid old password"


# --------------------------------------------------------------------------- #
# Account
# --------------------------------------------------------------------------- #
class TestAccount:
    def test_current_user_via_cookie(self, client, alice):
        _login(client, username="alice")
        resp = client.get(f"{BASE}/current-user")
        assert resp.status_code == 200
        assert resp.get_json()["data"]["email"] == "alice@example.com"

    def test_current_user_via_bearer(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]
        client.delete_cookie("accessToken")
        resp = client.get(f"{BASE}/current-user", headers=_bearer(tokens["accessToken"]))
        assert resp.status_code == 200

    def test_refresh_token_is_not_an_access_token(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]
        client.delete_cookie("accessToken")
        resp = client.get(f"{BASE}/current-user", headers=_bearer(tokens["refreshToken"]))
        assert resp.status_code == 401
        assert resp.get_json()["detail"] == "Invalid access token"

    def test_current_user_requires_token(self, client):
        resp = client.get(f"{BASE}/current-user")
        assert resp.status_code == 401
        assert resp.get_json()["detail"] == "Unauthorized request"

    def test_update_account(self, client, alice):
        tokens = _login(client, username="alice").get_json()["data"]
        resp = client.patch(
            f"{BASE}/update-account",
            json={"fullName": "Alice Liddell", "email": "liddell@example.com"},
            headers=_bearer(tokens["accessToken"]),
        )
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["fullName"] == "Alice Liddell"
        assert data["email"] == "liddell@example.com"

    def test_update_account_conflict(self, client, alice, session):
        UserFactory(email="taken@example.com")
        session.commit()
        tokens = _login(client, username="alice").get_json()["data"]
        resp = client.patch(
            f"{BASE}/update-account",
            json={"fullName": "A", "email": "taken@example.com"},
            headers=_bearer(tokens["accessToken"]),
        )
        assert resp.status_code == 409

    def test_update_avatar(self, client, alice, media_host, upload_dir):
        _login(client, username="alice")
        resp = client.patch(
            f"{BASE}/avatar",
            data={"avatar": (io.BytesIO(b"new"), "new.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["avatar"] == "https://cdn.test/file.png"

    def test_update_cover_requires_file(self, client, alice, upload_dir):
        _login(client, username="alice")
        resp = client.patch(f"{BASE}/cover-image", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json()["detail"] == "Cover image file is missing"


# --------------------------------------------------------------------------- #
# Channel views
# --------------------------------------------------------------------------- #
class TestChannel:
    @pytest.fixture()
    def bob(self, session, alice):
        bob = UserFactory(username="bob", password=PASSWORD)
        SubscriptionFactory(subscriber_id=bob.id, channel_id=alice.id)
        session.commit()
        return bob

    def test_profile_for_subscriber(self, client, alice, bob):
        _login(client, username="bob")
        resp = client.get(f"{BASE}/c/alice")
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["subscribersCount"] == 1
        assert data["channelsSubscribedToCount"] == 0
        assert data["isSubscribed"] is True
        assert "password" not in data and "refreshToken" not in data

    def test_profile_anonymous(self, client, alice, bob):
        data = client.get(f"{BASE}/c/alice").get_json()["data"]
        assert data["isSubscribed"] is False
        assert data["subscribersCount"] == 1

    def test_profile_with_bad_token(self, client, alice):
        resp = client.get(f"{BASE}/c/alice", headers=_bearer("not-a-token"))
        assert resp.status_code == 401

    def test_unknown_channel(self, client):
        resp = client.get(f"{BASE}/c/nobody")
        assert resp.status_code == 404
        assert resp.get_json()["detail"] == "Channel does not exist"

    def test_history(self, client, alice, session):
        owner = UserFactory(username="maker", full_name="Maker Person")
        video = VideoFactory(owner=owner, title="How to")
        WatchHistoryEntryFactory(user_id=alice.id, video_id=video.id, position=0)
        session.commit()

        _login(client, username="alice")
        resp = client.get(f"{BASE}/history")

        assert resp.status_code == 200
        items = resp.get_json()["data"]
        assert [i["title"] for i in items] == ["How to"]
        assert items[0]["owner"] == {
            "fullName": "Maker Person",
            "username": "maker",
            "avatar": owner.avatar,
        }

    def test_empty_history(self, client, alice):
        _login(client, username="alice")
        resp = client.get(f"{BASE}/history")
        assert resp.status_code == 200
        assert resp.get_json()["data"] == []
