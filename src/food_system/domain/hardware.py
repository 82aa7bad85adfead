"""Domain models for sensors and actuators."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SensorSample:
    """Value read from a module sensor."""

    module_id: str
    sensor_type: str
    value: float
    recorded_at: datetime


@dataclass(frozen=True)
class ActuatorCommand:
    """Command sent to a module actuator."""

    module_id: str
    actuator_id: str
    command: str
    issued_at: datetime
    params: dict[str, object] = field(default_factory=dict)
