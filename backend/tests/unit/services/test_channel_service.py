# tests/unit/services/test_channel_service.py
from __future__ import annotations

import dataclasses

import pytest
from vidhub.services._shared.errors import BadRequestError, NotFoundError
from vidhub.services.channels.service import ChannelService

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from tests.factories.video import VideoFactory
from tests.factories.watch_history import WatchHistoryEntryFactory


@pytest.fixture()
def service() -> ChannelService:
    return ChannelService()


@pytest.fixture()
def graph(session):
    """alice <- bob, alice <- carol, alice -> carol."""
    alice = UserFactory(username="alice")
    bob = UserFactory(username="bob")
    carol = UserFactory(username="carol")
    edges = {
        "bob->alice": SubscriptionFactory(subscriber_id=bob.id, channel_id=alice.id),
        "carol->alice": SubscriptionFactory(subscriber_id=carol.id, channel_id=alice.id),
        "alice->carol": SubscriptionFactory(subscriber_id=alice.id, channel_id=carol.id),
    }
    session.flush()
    return {"alice": alice, "bob": bob, "carol": carol, "edges": edges}


class TestChannelProfile:
    def test_counts_and_viewer_flag(self, service, graph):
        profile = service.get_channel_profile("alice", viewer_id=graph["bob"].id)

        assert profile.username == "alice"
        assert profile.subscribers_count == 2
        assert profile.channels_subscribed_to_count == 1
        assert profile.is_subscribed is True

    def test_flag_follows_edge_removal(self, service, graph, session):
        session.delete(graph["edges"]["bob->alice"])
        session.flush()

        profile = service.get_channel_profile("alice", viewer_id=graph["bob"].id)
        assert profile.is_subscribed is False
        assert profile.subscribers_count == 1

    def test_flag_is_directional(self, service, graph):
        profile = service.get_channel_profile("carol", viewer_id=graph["alice"].id)
        assert profile.is_subscribed is True
        profile = service.get_channel_profile("carol", viewer_id=graph["bob"].id)
        assert profile.is_subscribed is False

    def test_anonymous_viewer(self, service, graph):
        profile = service.get_channel_profile("alice")
        assert profile.is_subscribed is False
        assert profile.subscribers_count == 2

    def test_lookup_is_case_insensitive(self, service, graph):
        assert service.get_channel_profile("  ALICE ").id == graph["alice"].id

    def test_projection_fields(self, service, graph):
        profile = service.get_channel_profile("alice")
        assert {f.name for f in dataclasses.fields(profile)} == {
            "id",
            "full_name",
            "username",
            "subscribers_count",
            "channels_subscribed_to_count",
            "is_subscribed",
            "avatar",
            "cover_image",
            "email",
        }

    @pytest.mark.parametrize("username", [None, "", "   "])
    def test_blank_username(self, service, username):
        with pytest.raises(BadRequestError, match="Username is missing"):
            service.get_channel_profile(username)

    def test_unknown_channel(self, service):
        with pytest.raises(NotFoundError, match="Channel does not exist"):
            service.get_channel_profile("nobody")


class TestWatchHistory:
    def test_empty_history_is_empty_list(self, service, session):
        user = UserFactory()
        session.flush()
        assert service.get_watch_history(user.id) == []

    def test_items_follow_stored_order_with_owner_projection(self, service, session):
        viewer = UserFactory()
        owner = UserFactory(full_name="Olive Owner", username="olive")
        newest = VideoFactory(owner=owner, title="newest")
        older = VideoFactory(owner=owner, title="older")
        WatchHistoryEntryFactory(user_id=viewer.id, video_id=newest.id, position=0)
        WatchHistoryEntryFactory(user_id=viewer.id, video_id=older.id, position=1)
        session.flush()

        items = service.get_watch_history(viewer.id)

        assert [i.title for i in items] == ["newest", "older"]
        owner_view = items[0].owner
        assert {f.name for f in dataclasses.fields(owner_view)} == {
            "full_name",
            "username",
            "avatar",
        }
        assert owner_view.full_name == "Olive Owner"
        assert owner_view.username == "olive"
        assert owner_view.avatar == owner.avatar

    def test_dangling_entries_are_skipped(self, service, session):
        viewer = UserFactory()
        video = VideoFactory()
        WatchHistoryEntryFactory(user_id=viewer.id, video_id=video.id, position=0)
        WatchHistoryEntryFactory(user_id=viewer.id, video_id=424_242, position=1)
        session.flush()

        items = service.get_watch_history(viewer.id)
        assert [i.id for i in items] == [video.id]

    def test_other_users_history_is_not_mixed_in(self, service, session):
        viewer, other = UserFactory(), UserFactory()
        WatchHistoryEntryFactory(user_id=other.id, position=0)
        session.flush()
        assert service.get_watch_history(viewer.id) == []
