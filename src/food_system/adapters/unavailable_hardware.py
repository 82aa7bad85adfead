"""Hardware adapter for deployments without sensors or a gateway."""

from dataclasses import dataclass

from food_system.domain.errors import HardwareNotImplementedError
from food_system.domain.hardware import ActuatorCommand
from food_system.services.hardware import ActuatorSink, SensorSource


@dataclass
class UnavailableHardware(SensorSource, ActuatorSink):
    """Rejects every hardware call."""

    async def read(self, module_id: str, sensor_type: str) -> float:
        raise HardwareNotImplementedError(
            "Real sensor reading is not implemented",
            details={"module_id": module_id, "sensor_type": sensor_type},
        )

    async def send(self, command: ActuatorCommand) -> None:
        raise HardwareNotImplementedError(
            "Real actuator control is not implemented",
            details={
                "module_id": command.module_id,
                "actuator_id": command.actuator_id,
            },
        )
