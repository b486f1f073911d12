"""
Unit tests for KeepAliveLockProvider and TrackingLockProviderWrapper.
"""
import time
from datetime import timedelta

import pytest

from schedlock.configuration import LockConfiguration
from schedlock.exceptions import InvalidLockConfigurationError
from schedlock.keepalive import KeepAliveLock, KeepAliveLockProvider
from schedlock.lock import SimpleLock
from schedlock.memory import InMemoryStorageAccessor
from schedlock.provider import LockProvider, StorageBasedLockProvider
from schedlock.tracking import TrackingLockProviderWrapper

pytestmark = [pytest.mark.unit]


def _config(clock=None, name="job", at_most=60.0, at_least=0.0):
    return LockConfiguration.from_durations(
        name,
        timedelta(seconds=at_most),
        timedelta(seconds=at_least),
        clock=clock,
    )


class RecordingLock(SimpleLock):
    def __init__(self, lock_configuration, extend_result=True):
        self.lock_configuration = lock_configuration
        self.extend_result = extend_result
        self.unlocks = 0
        self.extensions = []

    def unlock(self):
        self.unlocks += 1

    def extend(self, lock_at_most_for, lock_at_least_for=timedelta(0)):
        self.extensions.append((lock_at_most_for, lock_at_least_for))
        return self.extend_result


class RecordingProvider(LockProvider):
    def __init__(self):
        self.issued = []

    def lock(self, lock_configuration):
        lock = RecordingLock(lock_configuration)
        self.issued.append(lock)
        return lock


class TestKeepAliveProvider:
    def test_requires_extensible_provider(self):
        with pytest.raises(TypeError):
            KeepAliveLockProvider(RecordingProvider())

    def test_rejects_short_lock_at_most_for(self, provider, clock):
        keep_alive = KeepAliveLockProvider(
            provider, minimal_lock_at_most_for=timedelta(seconds=30)
        )
        with pytest.raises(InvalidLockConfigurationError):
            keep_alive.lock(_config(clock, at_most=10))

    def test_returns_none_when_held(self, provider, clock):
        keep_alive = KeepAliveLockProvider(provider, clock=clock)
        first = keep_alive.lock(_config(clock))
        assert keep_alive.lock(_config(clock)) is None
        first.unlock()

    def test_keeps_lock_alive_past_lock_at_most_for(self):
        # refresh every 100ms, lockAtMostFor=200ms, task runs 500ms
        storage = InMemoryStorageAccessor()
        keep_alive = KeepAliveLockProvider(
            StorageBasedLockProvider(storage, locked_by="node-a"),
            minimal_lock_at_most_for=timedelta(milliseconds=100),
        )
        competitor = StorageBasedLockProvider(storage, locked_by="node-b")
        lock = keep_alive.lock(_config(at_most=0.2))
        assert lock is not None
        try:
            time.sleep(0.3)
            assert competitor.lock(_config(at_most=0.2)) is None
            time.sleep(0.2)
        finally:
            lock.unlock()
        assert not lock.active
        assert competitor.lock(_config(at_most=0.2)) is not None

    def test_accepts_configuration_built_from_instants(self, provider, clock):
        now = clock.now()
        cfg = LockConfiguration(
            "job",
            now + timedelta(seconds=60),
            now + timedelta(seconds=40),
            now,
        )
        keep_alive = KeepAliveLockProvider(
            provider,
            minimal_lock_at_most_for=timedelta(seconds=30),
            clock=clock,
        )
        lock = keep_alive.lock(cfg)
        assert lock is not None
        assert lock._extension_period == timedelta(seconds=30)
        assert lock._remaining_lock_at_least_for == timedelta(seconds=40)
        lock.unlock()

    def test_stops_when_extension_fails(self, clock):
        inner = RecordingLock(_config(clock), extend_result=False)
        lock = KeepAliveLock(_config(clock), inner, clock)
        clock.advance(timedelta(seconds=30))
        lock._extend_for_next_period()
        assert not lock.active
        assert len(inner.extensions) == 1
        lock._extend_for_next_period()
        assert len(inner.extensions) == 1
        lock.unlock()
        assert inner.unlocks == 1

    def test_stops_when_extension_raises(self, clock):
        inner = RecordingLock(_config(clock))

        def explode(*args, **kwargs):
            raise ConnectionError("database unavailable")

        inner.extend = explode
        lock = KeepAliveLock(_config(clock), inner, clock)
        lock._extend_for_next_period()
        assert not lock.active
        lock.unlock()

    def test_stops_when_lease_already_expired(self, clock):
        inner = RecordingLock(_config(clock))
        lock = KeepAliveLock(_config(clock), inner, clock)
        clock.advance(timedelta(seconds=61))
        lock._extend_for_next_period()
        assert not lock.active
        assert inner.extensions == []
        lock.unlock()

    def test_consumes_lock_at_least_for_per_period(self, clock):
        inner = RecordingLock(_config(clock, at_least=45))
        lock = KeepAliveLock(_config(clock, at_least=45), inner, clock)
        clock.advance(timedelta(seconds=30))
        lock._extend_for_next_period()
        clock.advance(timedelta(seconds=30))
        lock._extend_for_next_period()
        assert inner.extensions == [
            (timedelta(seconds=60), timedelta(seconds=15)),
            (timedelta(seconds=60), timedelta(0)),
        ]
        assert lock.active
        lock.unlock()

    def test_manual_extend_not_supported(self, clock):
        lock = KeepAliveLock(_config(clock), RecordingLock(_config(clock)))
        with pytest.raises(NotImplementedError):
            lock.extend(timedelta(seconds=60))
        lock.unlock()


class TestTrackingWrapper:
    def test_tracks_until_unlocked(self, clock):
        tracking = TrackingLockProviderWrapper(RecordingProvider())
        lock = tracking.lock(_config(clock))
        assert tracking.get_active_locks() == [lock]
        lock.unlock()
        assert tracking.get_active_locks() == []

    def test_wrapped_unlocked_once(self, clock):
        inner_provider = RecordingProvider()
        tracking = TrackingLockProviderWrapper(inner_provider)
        lock = tracking.lock(_config(clock))
        lock.unlock()
        lock.unlock()
        assert inner_provider.issued[0].unlocks == 1

    def test_not_acquired_is_not_tracked(self, provider, clock):
        tracking = TrackingLockProviderWrapper(provider)
        held = provider.lock(_config(clock))
        assert tracking.lock(_config(clock)) is None
        assert tracking.get_active_locks() == []
        held.unlock()

    def test_unlock_all(self, provider, storage, clock):
        tracking = TrackingLockProviderWrapper(provider)
        tracking.lock(_config(clock, name="a"))
        tracking.lock(_config(clock, name="b"))
        clock.advance(timedelta(seconds=1))
        assert tracking.unlock_all() == 2
        assert tracking.get_active_locks() == []
        for record in storage.get_records():
            assert not record.is_locked(clock.now())
        assert tracking.unlock_all() == 0

    def test_extend_updates_configuration(self, provider, clock):
        tracking = TrackingLockProviderWrapper(provider)
        lock = tracking.lock(_config(clock))
        assert lock.extend(timedelta(seconds=120)) is True
        assert lock.lock_configuration.lock_at_most_for == timedelta(
            seconds=120
        )
        lock.unlock()
