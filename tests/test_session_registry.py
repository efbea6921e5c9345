"""Unit tests for the in-memory session registry (LRU cap and idle expiry)."""
from __future__ import annotations

import pytest

from snalab.api.services.session_registry import SessionRegistry
from snalab.errors import SessionNotFoundError


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.unit
def test_create_and_get(fast_settings, clock):
    registry = SessionRegistry(fast_settings, clock=clock)
    session = registry.create()
    assert registry.get(session.session_id) is session
    assert len(registry) == 1


@pytest.mark.unit
def test_oldest_session_evicted_past_cap(fast_settings, clock):
    registry = SessionRegistry(fast_settings, max_sessions=2, clock=clock)
    first = registry.create()
    second = registry.create()
    third = registry.create()

    assert len(registry) == 2
    with pytest.raises(SessionNotFoundError):
        registry.get(first.session_id)
    with pytest.raises(SessionNotFoundError):
        first.reset()
    assert registry.get(second.session_id) is second
    assert registry.get(third.session_id) is third
    assert registry.stats()["evictions"] == 1


@pytest.mark.unit
def test_get_refreshes_recency(fast_settings, clock):
    registry = SessionRegistry(fast_settings, max_sessions=2, clock=clock)
    first = registry.create()
    second = registry.create()
    registry.get(first.session_id)
    registry.create()

    assert registry.get(first.session_id) is first
    with pytest.raises(SessionNotFoundError):
        registry.get(second.session_id)


@pytest.mark.unit
def test_idle_session_expires(fast_settings, clock):
    registry = SessionRegistry(fast_settings, idle_ttl_seconds=60, clock=clock)
    idle = registry.create()
    clock.now += 30
    busy = registry.create()
    clock.now += 45

    assert registry.get(busy.session_id) is busy
    with pytest.raises(SessionNotFoundError):
        registry.get(idle.session_id)
    with pytest.raises(SessionNotFoundError):
        idle.reset()
    assert registry.stats()["expirations"] == 1


@pytest.mark.unit
def test_access_keeps_session_alive(fast_settings, clock):
    registry = SessionRegistry(fast_settings, idle_ttl_seconds=60, clock=clock)
    session = registry.create()
    for _ in range(5):
        clock.now += 50
        assert registry.get(session.session_id) is session


@pytest.mark.unit
def test_zero_ttl_never_expires(fast_settings, clock):
    registry = SessionRegistry(fast_settings, idle_ttl_seconds=0, clock=clock)
    session = registry.create()
    clock.now += 10 ** 9
    assert registry.get(session.session_id) is session


@pytest.mark.unit
def test_dispose_unknown_session(fast_settings, clock):
    registry = SessionRegistry(fast_settings, clock=clock)
    session = registry.create()
    registry.dispose(session.session_id)
    assert len(registry) == 0
    with pytest.raises(SessionNotFoundError):
        registry.dispose(session.session_id)
