"""
API tests for lock record endpoints: list, retrieve, active.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from schedlock.adapters.django.models import LockRecord

pytestmark = [pytest.mark.api]


BASE_URL = "/api/v1/schedlock/locks"


def _items(data):
    return data["results"] if "results" in data else data


@pytest.fixture
def held_lock(db):
    now = timezone.now()
    return LockRecord.objects.create(
        name="reports.daily",
        locked_at=now,
        lock_until=now + timedelta(minutes=5),
        locked_by="node-a",
    )


@pytest.fixture
def free_lock(db):
    now = timezone.now()
    return LockRecord.objects.create(
        name="billing.collect",
        locked_at=now - timedelta(minutes=10),
        lock_until=now - timedelta(minutes=5),
        locked_by="node-b",
    )


class TestListLocks:
    def test_list_requires_auth(self, api_client):
        response = api_client.get(BASE_URL + "/")
        assert response.status_code == 403

    def test_list_returns_all(self, authenticated_client, held_lock, free_lock):
        response = authenticated_client.get(BASE_URL + "/")
        assert response.status_code == 200
        names = [item["name"] for item in _items(response.json())]
        assert names == ["billing.collect", "reports.daily"]

    def test_list_active_filter(
        self, authenticated_client, held_lock, free_lock
    ):
        response = authenticated_client.get(BASE_URL + "/", {"active": "true"})
        assert response.status_code == 200
        items = _items(response.json())
        assert [item["name"] for item in items] == ["reports.daily"]
        assert items[0]["is_locked"] is True


class TestRetrieveLock:
    def test_retrieve_by_name(self, authenticated_client, held_lock):
        response = authenticated_client.get(BASE_URL + "/reports.daily/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "reports.daily"
        assert data["locked_by"] == "node-a"
        assert data["is_locked"] is True

    def test_retrieve_free_lock(self, authenticated_client, free_lock):
        response = authenticated_client.get(BASE_URL + "/billing.collect/")
        assert response.status_code == 200
        assert response.json()["is_locked"] is False

    def test_retrieve_missing(self, authenticated_client):
        response = authenticated_client.get(BASE_URL + "/missing/")
        assert response.status_code == 404


class TestActiveLocks:
    def test_active_action(self, authenticated_client, held_lock, free_lock):
        response = authenticated_client.get(BASE_URL + "/active/")
        assert response.status_code == 200
        names = [item["name"] for item in response.json()]
        assert names == ["reports.daily"]

    def test_active_requires_auth(self, api_client):
        response = api_client.get(BASE_URL + "/active/")
        assert response.status_code == 403
