"""Hardware module polling and actuator endpoints."""

from uuid import UUID

from fastapi import APIRouter, Request

from food_system.api.dependencies import get_container
from food_system.api.schemas import (
    ActuatorCommandOut,
    ActuatorRequest,
    PollingOut,
    PollingRequest,
    ReadingsOut,
)
from food_system.containers import AppContainer
from food_system.domain.hardware import SensorSample
from food_system.services.hardware import SampleCallback

router = APIRouter(prefix="/hardware/modules", tags=["hardware"])


@router.post("/{module_id}/polling")
async def start_polling(
    module_id: str, payload: PollingRequest, request: Request
) -> PollingOut:
    """Start polling a module, optionally feeding a cooking session."""
    container = get_container(request)
    on_samples = None
    if payload.session_id is not None:
        container.cooking_service.get_session(payload.session_id)
        on_samples = _forward_to_session(container, payload.session_id)
    samples = await container.hardware_service.start_polling(
        module_id, payload.sensor_types, on_samples
    )
    return PollingOut(module_id=module_id, polling=True, samples=samples)


@router.delete("/{module_id}/polling")
async def stop_polling(module_id: str, request: Request) -> PollingOut:
    await get_container(request).hardware_service.stop_polling(module_id)
    return PollingOut(module_id=module_id, polling=False)


@router.get("/{module_id}/readings")
async def latest_readings(module_id: str, request: Request) -> ReadingsOut:
    hardware_service = get_container(request).hardware_service
    return ReadingsOut(
        module_id=module_id,
        polling=module_id in hardware_service.polling_modules(),
        readings=hardware_service.latest_readings(module_id),
    )


@router.post("/{module_id}/actuators/{actuator_id}")
async def send_command(
    module_id: str, actuator_id: str, payload: ActuatorRequest, request: Request
) -> ActuatorCommandOut:
    command = await get_container(request).hardware_service.send_command(
        module_id, actuator_id, payload.command, payload.params
    )
    return ActuatorCommandOut.model_validate(command)


def _forward_to_session(container: AppContainer, session_id: UUID) -> SampleCallback:
    async def forward(samples: list[SensorSample]) -> None:
        for sample in samples:
            await container.cooking_service.record_sensor_reading(
                session_id, sample.sensor_type, sample.value, sample.recorded_at
            )

    return forward
