"""Simulated sensors and actuators for development deployments."""

import logging
import random
from dataclasses import dataclass, field

from food_system.domain.hardware import ActuatorCommand
from food_system.services.hardware import ActuatorSink, SensorSource

_logger = logging.getLogger(__name__)

SENSOR_RANGES = {
    "temperature": (20.0, 30.0),
    "humidity": (60.0, 80.0),
    "ph": (5.5, 6.5),
    "ec": (1.5, 2.5),
    "light": (200.0, 300.0),
    "co2": (400.0, 1000.0),
}
DEFAULT_RANGE = (0.0, 100.0)


@dataclass
class SimulatedSensorSource(SensorSource):
    """Returns uniformly random values within plausible sensor ranges."""

    rng: random.Random = field(default_factory=random.Random)

    async def read(self, module_id: str, sensor_type: str) -> float:
        low, high = SENSOR_RANGES.get(sensor_type.lower(), DEFAULT_RANGE)
        return self.rng.uniform(low, high)


@dataclass
class SimulatedActuatorSink(ActuatorSink):
    """Accepts every command and keeps it for inspection."""

    sent: list[ActuatorCommand] = field(default_factory=list)

    async def send(self, command: ActuatorCommand) -> None:
        self.sent.append(command)
        _logger.info(
            "Simulated actuator command",
            extra={
                "module_id": command.module_id,
                "actuator_id": command.actuator_id,
                "command": command.command,
            },
        )
