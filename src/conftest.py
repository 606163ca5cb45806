"""Project-wide fixtures: users, JWT clients and a clean channel layer per test."""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import HuddleUser


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits so throttling never interferes with tests."""
    monkeypatch.setattr("common.throttling.AuthThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.AnonDefaultThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.UserDefaultThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.WriteThrottle.rate", "1000/min")


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Clear the cache before each test; throttle history lives there."""
    cache.clear()


@pytest.fixture(autouse=True)
def flush_channel_layer() -> None:
    """Drop every group and pending message from the in-memory channel layer."""
    layer = get_channel_layer()
    if layer is not None and hasattr(layer, "flush"):
        async_to_sync(layer.flush)()


class HuddleUserFactory:
    """Factory for creating HuddleUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> HuddleUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(10)))
        email = kwargs.pop("email", f"{username}@user.test")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return HuddleUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> HuddleUser:
        return self.create_user(**kwargs)


@pytest.fixture
def huddle_user_factory() -> HuddleUserFactory:
    return HuddleUserFactory()


@pytest.fixture
def user(huddle_user_factory: HuddleUserFactory) -> HuddleUser:
    """A standard, non-privileged user."""
    return huddle_user_factory(username="testuser", password="strong-password-123!", first_name="Test", last_name="User")


@pytest.fixture
def other_user(huddle_user_factory: HuddleUserFactory) -> HuddleUser:
    return huddle_user_factory(username="otheruser")


@pytest.fixture
def third_user(huddle_user_factory: HuddleUserFactory) -> HuddleUser:
    return huddle_user_factory(username="thirduser")


@pytest.fixture
def superuser(huddle_user_factory: HuddleUserFactory) -> HuddleUser:
    """A superuser."""
    return huddle_user_factory(is_superuser=True, is_staff=True)


def make_client(user: HuddleUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: HuddleUser) -> Client:
    return make_client(user)


@pytest.fixture
def other_user_client(other_user: HuddleUser) -> Client:
    return make_client(other_user)


@pytest.fixture
def third_user_client(third_user: HuddleUser) -> Client:
    return make_client(third_user)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )
