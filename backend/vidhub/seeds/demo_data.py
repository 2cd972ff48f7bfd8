"""Idempotent demo data for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from vidhub.models import Subscription, User, Video, WatchHistoryEntry

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

MEDIA_BASE = "https://media.example.com/demo"

USER_FIXTURES: list[dict[str, str]] = [
    {
        "username": "alice",
        "email": "alice@example.com",
        "full_name": "Alice Moreno",
        "password": "devPass123!",
    },
    {
        "username": "bob",
        "email": "bob@example.com",
        "full_name": "Bob Tran",
        "password": "devPass123!",
    },
    {
        "username": "carol",
        "email": "carol@example.com",
        "full_name": "Carol Ng",
        "password": "devPass123!",
    },
]

VIDEO_FIXTURES: list[dict[str, Any]] = [
    {"owner": "alice", "title": "Sourdough in 10 minutes", "duration": 612, "views": 1520},
    {"owner": "alice", "title": "Knife skills for beginners", "duration": 845, "views": 980},
    {"owner": "carol", "title": "Night sky timelapse", "duration": 240, "views": 4310},
    {"owner": "carol", "title": "Editing timelapses", "duration": 1290, "views": 212},
]

# (subscriber, channel)
SUBSCRIPTION_FIXTURES: list[tuple[str, str]] = [
    ("bob", "alice"),
    ("carol", "alice"),
    ("alice", "carol"),
]

# Most recent first
HISTORY_FIXTURES: dict[str, list[str]] = {
    "bob": ["Night sky timelapse", "Sourdough in 10 minutes"],
    "alice": ["Editing timelapses"],
}


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    session.flush()
    return instance, True


def _slug(title: str) -> str:
    return "-".join(title.lower().split())


def seed_users(database: SQLAlchemy, summary: dict[str, dict[str, int]]) -> dict[str, User]:
    """Create demo channels; existing ones are left as they are."""
    session = _session(database)
    users: dict[str, User] = {}
    for fixture in USER_FIXTURES:
        username = fixture["username"]
        user, created = _get_or_create(
            session,
            User,
            username=username,
            defaults={
                "email": fixture["email"],
                "full_name": fixture["full_name"],
                "password": fixture["password"],
                "avatar": f"{MEDIA_BASE}/avatars/{username}.png",
                "cover_image": f"{MEDIA_BASE}/covers/{username}.png",
            },
        )
        users[username] = user
        _touch(summary, "users", created)
    return users


def seed_videos(
    database: SQLAlchemy, users: dict[str, User], summary: dict[str, dict[str, int]]
) -> dict[str, Video]:
    session = _session(database)
    videos: dict[str, Video] = {}
    for fixture in VIDEO_FIXTURES:
        slug = _slug(fixture["title"])
        video, created = _get_or_create(
            session,
            Video,
            owner_id=users[fixture["owner"]].id,
            title=fixture["title"],
            defaults={
                "description": f"Demo upload: {fixture['title']}",
                "video_file": f"{MEDIA_BASE}/videos/{slug}.mp4",
                "thumbnail": f"{MEDIA_BASE}/thumbs/{slug}.jpg",
                "duration": fixture["duration"],
                "views": fixture["views"],
                "is_published": True,
            },
        )
        videos[video.title] = video
        _touch(summary, "videos", created)
    return videos


def seed_relations(
    database: SQLAlchemy,
    users: dict[str, User],
    videos: dict[str, Video],
    summary: dict[str, dict[str, int]],
) -> None:
    """Create subscription edges and watch-history lists."""
    session = _session(database)
    for subscriber, channel in SUBSCRIPTION_FIXTURES:
        _, created = _get_or_create(
            session,
            Subscription,
            subscriber_id=users[subscriber].id,
            channel_id=users[channel].id,
        )
        _touch(summary, "subscriptions", created)

    for username, titles in HISTORY_FIXTURES.items():
        for position, title in enumerate(titles):
            _, created = _get_or_create(
                session,
                WatchHistoryEntry,
                user_id=users[username].id,
                position=position,
                defaults={"video_id": videos[title].id},
            )
            _touch(summary, "watch_history", created)


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order. The caller commits."""
    if verbose:
        LOGGER.info("Seeding demo channels...")
    summary: dict[str, dict[str, int]] = {}
    users = seed_users(database, summary)
    videos = seed_videos(database, users, summary)
    seed_relations(database, users, videos, summary)
    return summary


__all__ = ["seed_users", "seed_videos", "seed_relations", "run_all"]
