from __future__ import annotations

import pytest
from vidhub.repositories.user import UserRepository

from tests.factories.user import UserFactory


@pytest.fixture()
def repo(session) -> UserRepository:
    return UserRepository(session=session)


@pytest.fixture()
def alice(session):
    user = UserFactory(username="alice", email="alice@example.com")
    session.flush()
    return user


class TestLookups:
    def test_get_by_username_ignores_case_and_padding(self, repo, alice):
        assert repo.get_by_username("  ALICE ") is alice

    def test_get_by_blank_username(self, repo):
        assert repo.get_by_username("   ") is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"username": "Alice"},
            {"email": "ALICE@example.com"},
            {"username": "nobody", "email": "alice@example.com"},
            {"username": "alice", "email": "nobody@example.com"},
        ],
    )
    def test_find_by_identifier_is_an_or(self, repo, alice, kwargs):
        assert repo.find_by_identifier(**kwargs) is alice

    def test_find_by_identifier_without_values(self, repo, alice):
        assert repo.find_by_identifier(username=None, email="  ") is None

    def test_exists_by_email_excludes_self(self, repo, alice):
        assert repo.exists_by_email("alice@example.com") is True
        assert repo.exists_by_email("alice@example.com", exclude_id=alice.id) is False


class TestRefreshSlot:
    def test_set_get_and_clear(self, repo, alice):
        repo.set_refresh_token(alice.id, "rt-1")
        assert repo.get_refresh_token(alice.id) == "rt-1"
        repo.set_refresh_token(alice.id, None)
        assert repo.get_refresh_token(alice.id) is None

    def test_swap_is_conditional(self, repo, alice):
        repo.set_refresh_token(alice.id, "rt-1")

        assert repo.swap_refresh_token(alice.id, "rt-1", "rt-2") is True
        assert repo.swap_refresh_token(alice.id, "rt-1", "rt-3") is False
        assert repo.get_refresh_token(alice.id) == "rt-2"

    def test_swap_on_empty_slot(self, repo, alice):
        assert repo.swap_refresh_token(alice.id, "rt-1", "rt-2") is False


class TestUpdates:
    def test_update_password(self, repo, alice):
        repo.update_password(alice, "brand-new")
        assert alice.verify_password("brand-new")

    def test_update_whitelisted_fields(self, repo, alice):
        repo.update(alice, full_name="Alice A.", cover_image="https://media.test/c.png")
        assert alice.full_name == "Alice A."
        assert alice.cover_image == "https://media.test/c.png"

    @pytest.mark.parametrize("field", ["password_hash", "refresh_token", "username"])
    def test_update_rejects_protected_fields(self, repo, alice, field):
        with pytest.raises(ValueError, match="non-updatable"):
            repo.update(alice, **{field: "x"})
