"""Tests for in-memory repositories."""

from datetime import timedelta

import pytest

from food_system.adapters.memory_profile_repository import (
    InMemoryConsumptionProfileRepository,
)
from food_system.adapters.memory_session_repository import (
    InMemoryCookingSessionRepository,
)
from food_system.domain.consumption import ConsumptionProfile
from food_system.domain.errors import CapacityExceededError
from tests.conftest import START, FixedClock, make_session


def test_capacity_refuses_when_all_sessions_active(clock: FixedClock) -> None:
    repository = InMemoryCookingSessionRepository(capacity=2, clock=clock)
    repository.add(make_session())
    repository.add(make_session())

    with pytest.raises(CapacityExceededError):
        repository.add(make_session())

    assert len(repository) == 2


def test_capacity_evicts_oldest_terminal_session(clock: FixedClock) -> None:
    repository = InMemoryCookingSessionRepository(capacity=2, clock=clock)
    older = make_session()
    older.start(START)
    older.abort("done", START)
    newer = make_session()
    newer.start(START)
    newer.abort("done", START + timedelta(minutes=1))
    repository.add(older)
    repository.add(newer)

    incoming = make_session()
    repository.add(incoming)

    assert repository.get(older.id) is None
    assert repository.get(newer.id) is newer
    assert repository.get(incoming.id) is incoming


def test_terminal_sessions_expire_after_ttl(clock: FixedClock) -> None:
    repository = InMemoryCookingSessionRepository(
        terminal_ttl_seconds=3600, clock=clock
    )
    finished = make_session()
    finished.start(START)
    finished.abort("done", START)
    active = make_session()
    active.start(START)
    repository.add(finished)
    repository.add(active)

    clock.advance(seconds=3601)

    assert repository.get(finished.id) is None
    assert repository.get(active.id) is active
    assert repository.list_sessions(10) == [active]


def test_profile_repository_roundtrip() -> None:
    repository = InMemoryConsumptionProfileRepository()
    profile = ConsumptionProfile(user_id="u1", created_at=START)

    repository.add(profile)
    profile.record_consumption("tomato", 100, 80, START)
    repository.save(profile)

    assert repository.get("u1") is profile
    assert repository.get("u2") is None
    assert repository.list_profiles(10) == [profile]
