"""Factory Boy definition for :class:`vidhub.models.user.User`."""

from __future__ import annotations

import factory
from vidhub.models.user import User

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`vidhub.models.user.User` instances.

    Notes
    -----
    - The password is set through the model setter so the stored value is
      always a hash. Pass ``password="..."`` to override the default.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.Faker("name")
    avatar = factory.LazyAttribute(lambda o: f"https://media.test/avatars/{o.username}.png")
    cover_image = None
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD
