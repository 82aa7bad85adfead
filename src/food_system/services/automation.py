"""Automation hooks invoked for sensor readings of automated sessions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from food_system.domain.cooking import CookingSession, SensorReading

_logger = logging.getLogger(__name__)


class AutomationHook(Protocol):
    """Extension point for reacting to sensor readings."""

    async def on_sensor_reading(
        self, session: CookingSession, reading: SensorReading
    ) -> list[str]:
        """Process a reading and return the names of actions taken."""


@dataclass
class LoggingAutomationHook(AutomationHook):
    """Default hook: logs the reading and takes no action."""

    async def on_sensor_reading(
        self, session: CookingSession, reading: SensorReading
    ) -> list[str]:
        _logger.info(
            "Automation event: sensor_reading",
            extra={
                "session_id": str(session.id),
                "recipe_id": session.recipe_id,
                "automation_level": session.automation_level.value,
                "sensor_type": reading.sensor_type,
                "value": reading.value,
            },
        )
        return []
