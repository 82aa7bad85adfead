"""Sensor polling and actuator control for hardware modules."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from food_system.domain.errors import NotFoundError, ValidationError
from food_system.domain.hardware import ActuatorCommand, SensorSample
from food_system.services.scheduling import PeriodicTask

_logger = logging.getLogger(__name__)

SampleCallback = Callable[[list[SensorSample]], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class SensorSource(Protocol):
    """Interface for reading module sensors."""

    async def read(self, module_id: str, sensor_type: str) -> float:
        """Return the current value of a sensor."""


class ActuatorSink(Protocol):
    """Interface for driving module actuators."""

    async def send(self, command: ActuatorCommand) -> None:
        """Deliver a command to an actuator."""


@dataclass
class HardwareService:
    """Runs one polling task per module and forwards actuator commands."""

    sensor_source: SensorSource
    actuator_sink: ActuatorSink
    polling_interval_seconds: float = 1.0
    clock: Callable[[], datetime] = _utcnow
    _pollers: dict[str, PeriodicTask] = field(default_factory=dict, init=False)
    _latest: dict[str, dict[str, SensorSample]] = field(
        default_factory=dict, init=False
    )

    async def poll_module(
        self,
        module_id: str,
        sensor_types: list[str],
        on_samples: SampleCallback | None = None,
    ) -> list[SensorSample]:
        """Read every sensor of a module once."""
        samples = []
        for sensor_type in sensor_types:
            value = await self.sensor_source.read(module_id, sensor_type)
            samples.append(
                SensorSample(
                    module_id=module_id,
                    sensor_type=sensor_type,
                    value=value,
                    recorded_at=self.clock(),
                )
            )
        latest = self._latest.setdefault(module_id, {})
        for sample in samples:
            latest[sample.sensor_type] = sample
        if on_samples is not None:
            await on_samples(samples)
        return samples

    async def start_polling(
        self,
        module_id: str,
        sensor_types: list[str],
        on_samples: SampleCallback | None = None,
    ) -> list[SensorSample]:
        """Poll once, then keep polling at the configured interval.

        An existing poller for the module is replaced.
        """
        if not sensor_types:
            raise ValidationError("At least one sensor type is required")
        await self.stop_polling(module_id)
        samples = await self.poll_module(module_id, sensor_types, on_samples)

        async def tick() -> None:
            await self.poll_module(module_id, sensor_types, on_samples)

        poller = PeriodicTask(
            name=f"sensor-polling:{module_id}",
            interval_seconds=self.polling_interval_seconds,
            callback=tick,
        )
        poller.start()
        self._pollers[module_id] = poller
        _logger.info(
            "Started sensor polling",
            extra={"module_id": module_id, "sensor_types": sensor_types},
        )
        return samples

    async def stop_polling(self, module_id: str) -> bool:
        """Stop polling a module; return whether a poller was running."""
        poller = self._pollers.pop(module_id, None)
        if poller is None:
            return False
        await poller.stop()
        _logger.info("Stopped sensor polling", extra={"module_id": module_id})
        return True

    async def stop_all(self) -> None:
        for module_id in list(self._pollers):
            await self.stop_polling(module_id)

    def polling_modules(self) -> list[str]:
        return sorted(self._pollers)

    def latest_readings(self, module_id: str) -> list[SensorSample]:
        latest = self._latest.get(module_id)
        if latest is None:
            raise NotFoundError("Hardware module", module_id)
        return list(latest.values())

    async def send_command(
        self,
        module_id: str,
        actuator_id: str,
        command: str,
        params: dict[str, object] | None = None,
    ) -> ActuatorCommand:
        if not command.strip():
            raise ValidationError("command is required")
        actuator_command = ActuatorCommand(
            module_id=module_id,
            actuator_id=actuator_id,
            command=command,
            issued_at=self.clock(),
            params=dict(params or {}),
        )
        await self.actuator_sink.send(actuator_command)
        _logger.info(
            "Actuator command sent",
            extra={
                "module_id": module_id,
                "actuator_id": actuator_id,
                "command": command,
            },
        )
        return actuator_command
