"""Cooking session endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from food_system.api.dependencies import enforce_cooking_rate_limit, get_container
from food_system.api.schemas import (
    AbortRequest,
    CompletionSummaryOut,
    QualityMetricOut,
    QualityMetricRequest,
    SensorReadingOut,
    SensorReadingRequest,
    SessionDetailOut,
    SessionListOut,
    SessionStartedOut,
    SessionStateOut,
    StartSessionRequest,
    StepInfoOut,
)
from food_system.domain.cooking import CompletionSummary, CookingSession

router = APIRouter(prefix="/cooking/sessions", tags=["cooking"])

RECENT_SENSOR_READINGS = 10


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_cooking_rate_limit)],
)
async def start_session(
    payload: StartSessionRequest, request: Request
) -> SessionStartedOut:
    """Start cooking a recipe."""
    session, step = await get_container(request).cooking_service.start_session(
        recipe_id=payload.recipe_id,
        servings=payload.servings,
        modifications=payload.modifications,
        automation_level=payload.automation_level,
        notes=payload.notes,
    )
    return SessionStartedOut(
        session_id=session.id,
        status=session.status,
        current_step=StepInfoOut.model_validate(step),
    )


@router.get("")
async def list_sessions(request: Request, limit: int = 50) -> SessionListOut:
    """Return recent sessions, newest first."""
    summaries = get_container(request).cooking_service.list_sessions(limit)
    return SessionListOut(sessions=summaries)


@router.get("/{session_id}")
async def get_session(session_id: UUID, request: Request) -> SessionDetailOut:
    """Return a session with its latest sensor readings."""
    session = get_container(request).cooking_service.get_session(session_id)
    return SessionDetailOut(
        session_id=session.id,
        recipe_id=session.recipe_id,
        recipe_name=session.recipe_name,
        status=session.status,
        servings=session.servings,
        automation_level=session.automation_level,
        notes=session.notes,
        modifications=session.modifications,
        current_step=session.step_info(),
        started_at=session.started_at,
        ended_at=session.ended_at,
        paused_seconds=session.paused_seconds,
        step_timings=session.step_timings,
        quality_metrics=session.quality_metrics,
        sensor_readings=session.sensor_readings[-RECENT_SENSOR_READINGS:],
        errors=session.errors,
        warnings=session.warnings,
    )


@router.post("/{session_id}/advance")
async def advance_step(session_id: UUID, request: Request) -> SessionStateOut:
    """Close the step in hand and begin the next one."""
    cooking_service = get_container(request).cooking_service
    result = await cooking_service.advance_step(session_id)
    session = cooking_service.get_session(session_id)
    if isinstance(result, CompletionSummary):
        return _state(
            session,
            completion=CompletionSummaryOut.model_validate(result),
            message="All steps completed!",
        )
    return _state(session)


@router.post("/{session_id}/pause")
async def pause_session(session_id: UUID, request: Request) -> SessionStateOut:
    session = await get_container(request).cooking_service.pause(session_id)
    return _state(session, message="Cooking session paused")


@router.post("/{session_id}/resume")
async def resume_session(session_id: UUID, request: Request) -> SessionStateOut:
    cooking_service = get_container(request).cooking_service
    await cooking_service.resume(session_id)
    return _state(
        cooking_service.get_session(session_id), message="Cooking session resumed"
    )


@router.post("/{session_id}/abort")
async def abort_session(
    session_id: UUID, request: Request, payload: AbortRequest | None = None
) -> SessionStateOut:
    reason = payload.reason if payload else None
    session = await get_container(request).cooking_service.abort(session_id, reason)
    return _state(session, message="Cooking session aborted")


@router.post("/{session_id}/sensor", status_code=status.HTTP_201_CREATED)
async def record_sensor_reading(
    session_id: UUID, payload: SensorReadingRequest, request: Request
) -> SensorReadingOut:
    """Attach a sensor value to the session."""
    reading = await get_container(request).cooking_service.record_sensor_reading(
        session_id, payload.sensor_type, payload.value, payload.timestamp
    )
    return SensorReadingOut.model_validate(reading)


@router.post("/{session_id}/quality", status_code=status.HTTP_201_CREATED)
async def record_quality_metric(
    session_id: UUID, payload: QualityMetricRequest, request: Request
) -> QualityMetricOut:
    metric = await get_container(request).cooking_service.record_quality_metric(
        session_id, payload.name, payload.value
    )
    return QualityMetricOut.model_validate(metric)


def _state(
    session: CookingSession,
    completion: CompletionSummaryOut | None = None,
    message: str | None = None,
) -> SessionStateOut:
    return SessionStateOut(
        session_id=session.id,
        status=session.status,
        current_step=StepInfoOut.model_validate(session.step_info()),
        completion=completion,
        message=message,
    )
