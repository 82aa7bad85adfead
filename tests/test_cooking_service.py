"""Tests for the cooking session service."""

import asyncio
from uuid import uuid4

import pytest

from food_system.domain.cooking import (
    AutomationLevel,
    CompletionSummary,
    SessionStatus,
)
from food_system.domain.errors import (
    AutomationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from food_system.services.cooking import CookingService
from tests.conftest import FixedClock, RecordingAutomationHook


def test_start_session_snapshots_recipe(cooking_service: CookingService) -> None:
    session, step = asyncio.run(
        cooking_service.start_session("r1", servings=4, notes="extra salt")
    )

    assert session.status is SessionStatus.IN_PROGRESS
    assert session.servings == 4
    assert session.recipe_name == "Tomato soup"
    assert len(session.instructions) == 3
    assert step.current_step == 0
    assert cooking_service.get_session(session.id) is session


def test_start_session_defaults_to_recipe_servings(
    cooking_service: CookingService,
) -> None:
    session, _ = asyncio.run(cooking_service.start_session("r1"))

    assert session.servings == 2


def test_start_session_unknown_recipe(cooking_service: CookingService) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(cooking_service.start_session("missing"))


def test_start_session_rejects_zero_servings(cooking_service: CookingService) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(cooking_service.start_session("r1", servings=0))


def test_full_lifecycle_completes(
    cooking_service: CookingService, clock: FixedClock
) -> None:
    async def run() -> object:
        session, _ = await cooking_service.start_session("r1")
        clock.advance(minutes=5)
        await cooking_service.advance_step(session.id)
        await cooking_service.pause(session.id)
        clock.advance(minutes=2)
        await cooking_service.resume(session.id)
        await cooking_service.advance_step(session.id)
        await cooking_service.advance_step(session.id)
        return await cooking_service.advance_step(session.id)

    summary = asyncio.run(run())

    assert isinstance(summary, CompletionSummary)
    assert summary.paused_seconds == 120
    assert len(summary.step_timings) == 3


def test_abort_uses_default_reason(cooking_service: CookingService) -> None:
    async def run() -> None:
        session, _ = await cooking_service.start_session("r1")
        aborted = await cooking_service.abort(session.id)
        assert aborted.status is SessionStatus.ABORTED
        assert aborted.errors[-1].message == "User cancelled"
        with pytest.raises(InvalidTransitionError):
            await cooking_service.abort(session.id, "again")

    asyncio.run(run())


def test_operations_on_unknown_session(cooking_service: CookingService) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(cooking_service.advance_step(uuid4()))


def test_concurrent_advances_are_serialized(cooking_service: CookingService) -> None:
    async def run() -> list[object]:
        session, _ = await cooking_service.start_session("r1")
        return await asyncio.gather(
            *(cooking_service.advance_step(session.id) for _ in range(5)),
            return_exceptions=True,
        )

    results = asyncio.run(run())

    completions = [item for item in results if isinstance(item, CompletionSummary)]
    failures = [item for item in results if isinstance(item, InvalidTransitionError)]
    assert len(completions) == 1
    assert len(failures) == 1


def test_manual_session_skips_automation(
    cooking_service: CookingService, automation_hook: RecordingAutomationHook
) -> None:
    async def run() -> None:
        session, _ = await cooking_service.start_session("r1")
        await cooking_service.record_sensor_reading(session.id, "temperature", 80.0)

    asyncio.run(run())

    assert automation_hook.readings == []


def test_automated_session_invokes_hook(
    cooking_service: CookingService, automation_hook: RecordingAutomationHook
) -> None:
    async def run() -> None:
        session, _ = await cooking_service.start_session(
            "r1", automation_level=AutomationLevel.ASSISTED
        )
        await cooking_service.record_sensor_reading(session.id, "temperature", 80.0)

    asyncio.run(run())

    assert [reading.value for reading in automation_hook.readings] == [80.0]


def test_automation_failure_keeps_reading_and_warns(
    cooking_service: CookingService, automation_hook: RecordingAutomationHook
) -> None:
    automation_hook.fail = True

    async def run() -> None:
        session, _ = await cooking_service.start_session(
            "r1", automation_level=AutomationLevel.FULLY_AUTOMATED
        )
        with pytest.raises(AutomationError):
            await cooking_service.record_sensor_reading(
                session.id, "temperature", 300.0
            )
        stored = cooking_service.get_session(session.id)
        assert len(stored.sensor_readings) == 1
        assert stored.warnings[-1].type == "automation_failed"

    asyncio.run(run())


def test_record_quality_metric_requires_name(cooking_service: CookingService) -> None:
    async def run() -> None:
        session, _ = await cooking_service.start_session("r1")
        metric = await cooking_service.record_quality_metric(
            session.id, "texture", "crisp"
        )
        assert metric.value == "crisp"
        with pytest.raises(ValidationError):
            await cooking_service.record_quality_metric(session.id, " ", 1.0)

    asyncio.run(run())


def test_list_sessions_returns_summaries(
    cooking_service: CookingService, clock: FixedClock
) -> None:
    async def run() -> None:
        await cooking_service.start_session("r1")
        clock.advance(seconds=1)
        await cooking_service.start_session("r1", servings=6)

    asyncio.run(run())
    summaries = cooking_service.list_sessions()

    assert len(summaries) == 2
    assert summaries[0].created_at > summaries[1].created_at
    assert summaries[0].recipe_name == "Tomato soup"
