"""Pytest fixtures for schedlock tests."""
import os
from datetime import datetime, timezone

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tests.settings")

import pytest  # noqa: E402
from django.contrib.auth import get_user_model  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

from schedlock import assertion  # noqa: E402
from schedlock.clock import ManualClock  # noqa: E402
from schedlock.memory import InMemoryStorageAccessor  # noqa: E402
from schedlock.provider import StorageBasedLockProvider  # noqa: E402

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def storage():
    return InMemoryStorageAccessor()


@pytest.fixture
def provider(storage, clock):
    return StorageBasedLockProvider(storage, clock=clock, locked_by="node-a")


@pytest.fixture(autouse=True)
def clean_lock_stack():
    yield
    while getattr(assertion._local, "active_locks", None):
        assertion.end_lock()


@pytest.fixture
def reset_lock_provider():
    from schedlock.adapters.django.conf import reset_lock_provider as reset

    reset()
    yield
    reset()


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client
