"""Cooking session application service."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from food_system.domain.cooking import (
    AutomationLevel,
    CompletionSummary,
    CookingSession,
    QualityMetric,
    SensorReading,
    SessionSummary,
    StepInfo,
)
from food_system.domain.errors import AutomationError, NotFoundError, ValidationError
from food_system.services.automation import AutomationHook, LoggingAutomationHook
from food_system.services.locks import KeyedLocks
from food_system.services.recipes import RecipeService

_logger = logging.getLogger(__name__)

DEFAULT_ABORT_REASON = "User cancelled"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class CookingSessionRepository(Protocol):
    """Persistence interface for cooking sessions."""

    def add(self, session: CookingSession) -> None:
        """Store a new session."""

    def get(self, session_id: UUID) -> CookingSession | None:
        """Return a session by id, if present."""

    def save(self, session: CookingSession) -> None:
        """Persist changes to an existing session."""

    def list_sessions(self, limit: int) -> list[CookingSession]:
        """Return sessions, newest first."""


@dataclass
class CookingService:
    """Drives cooking sessions through their lifecycle."""

    repository: CookingSessionRepository
    recipe_service: RecipeService
    automation_hook: AutomationHook = field(default_factory=LoggingAutomationHook)
    clock: Callable[[], datetime] = _utcnow
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    async def start_session(  # noqa: PLR0913
        self,
        recipe_id: str,
        servings: int | None = None,
        modifications: dict[str, object] | None = None,
        automation_level: AutomationLevel = AutomationLevel.MANUAL,
        notes: str = "",
    ) -> tuple[CookingSession, StepInfo]:
        """Snapshot the recipe, create a session and start it."""
        recipe = self.recipe_service.get_recipe(recipe_id)
        if servings is not None and servings < 1:
            raise ValidationError("servings must be at least 1")
        now = self.clock()
        session = CookingSession(
            recipe_id=recipe.id,
            recipe_name=recipe.name,
            instructions=recipe.instructions,
            servings=servings or recipe.servings,
            created_at=now,
            modifications=dict(modifications or {}),
            automation_level=automation_level,
            notes=notes,
            updated_at=now,
        )
        step = session.start(now)
        self.repository.add(session)
        _log_event(
            "session_started",
            session,
            servings=session.servings,
            automation_level=session.automation_level.value,
        )
        return session, step

    def get_session(self, session_id: UUID) -> CookingSession:
        session = self.repository.get(session_id)
        if session is None:
            raise NotFoundError("Cooking session", session_id)
        return session

    def list_sessions(self, limit: int = 50) -> list[SessionSummary]:
        sessions = self.repository.list_sessions(limit)
        return [session.summary() for session in sessions]

    async def advance_step(self, session_id: UUID) -> StepInfo | CompletionSummary:
        """Begin the next step; completes the session once the last step closes."""
        async with self._editing(session_id) as session:
            result = session.advance_step(self.clock())
        if isinstance(result, CompletionSummary):
            _log_event(
                "session_completed",
                session,
                total_duration_seconds=result.total_duration_seconds,
                steps_completed=session.current_step,
                quality_metrics=sorted(result.quality_metrics),
            )
        else:
            _log_event(
                "step_started",
                session,
                step_index=session.current_step - 1,
                total_steps=session.total_steps,
            )
        return result

    async def pause(self, session_id: UUID) -> CookingSession:
        async with self._editing(session_id) as session:
            session.pause(self.clock())
        _log_event("session_paused", session, current_step=session.current_step)
        return session

    async def resume(self, session_id: UUID) -> StepInfo:
        async with self._editing(session_id) as session:
            step = session.resume(self.clock())
        _log_event("session_resumed", session, current_step=session.current_step)
        return step

    async def abort(
        self, session_id: UUID, reason: str | None = None
    ) -> CookingSession:
        resolved_reason = reason or DEFAULT_ABORT_REASON
        async with self._editing(session_id) as session:
            session.abort(resolved_reason, self.clock())
        _log_event(
            "session_aborted",
            session,
            reason=resolved_reason,
            steps_completed=session.current_step,
            total_steps=session.total_steps,
        )
        return session

    async def record_sensor_reading(
        self,
        session_id: UUID,
        sensor_type: str,
        value: float,
        recorded_at: datetime | None = None,
    ) -> SensorReading:
        """Log a reading and hand it to the automation hook when automated."""
        async with self.locks.hold(session_id):
            session = self.get_session(session_id)
            reading = session.record_sensor_reading(
                sensor_type, value, recorded_at or self.clock()
            )
            try:
                if session.automation_level is not AutomationLevel.MANUAL:
                    await self.automation_hook.on_sensor_reading(session, reading)
            except AutomationError as exc:
                session.add_warning("automation_failed", exc.message, self.clock())
                raise
            finally:
                self.repository.save(session)
        return reading

    async def record_quality_metric(
        self, session_id: UUID, name: str, value: float | bool | str
    ) -> QualityMetric:
        if not name.strip():
            raise ValidationError("Quality metric name is required")
        async with self._editing(session_id) as session:
            metric = session.record_quality_metric(name, value, self.clock())
        return metric

    @asynccontextmanager
    async def _editing(self, session_id: UUID) -> AsyncIterator[CookingSession]:
        async with self.locks.hold(session_id):
            session = self.get_session(session_id)
            yield session
            self.repository.save(session)


def _log_event(event: str, session: CookingSession, **data: object) -> None:
    _logger.info(
        "Cooking event: %s",
        event,
        extra={
            "event": event,
            "session_id": str(session.id),
            "recipe_id": session.recipe_id,
            "data": data,
        },
    )
