"""HTTP client for a remote hardware gateway."""

from dataclasses import dataclass

import httpx

from food_system.domain.errors import HardwareError
from food_system.domain.hardware import ActuatorCommand
from food_system.services.hardware import ActuatorSink, SensorSource


@dataclass
class HttpxHardwareGateway(SensorSource, ActuatorSink):
    """HTTPX-backed gateway reading sensors and driving actuators."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 5.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 5.0) -> "HttpxHardwareGateway":
        """Create a gateway client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def read(self, module_id: str, sensor_type: str) -> float:
        """Fetch the current value of one sensor."""
        url = f"{self.base_url}/modules/{module_id}/sensors/{sensor_type}"
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            return float(payload["value"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            raise HardwareError(
                f"Failed to read {sensor_type} from module {module_id}",
                details={"module_id": module_id, "sensor_type": sensor_type},
            ) from exc

    async def send(self, command: ActuatorCommand) -> None:
        """Deliver an actuator command."""
        url = (
            f"{self.base_url}/modules/{command.module_id}"
            f"/actuators/{command.actuator_id}"
        )
        try:
            response = await self.http_client.post(
                url,
                json={
                    "command": command.command,
                    "params": command.params,
                    "issuedAt": command.issued_at.isoformat(),
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise HardwareError(
                f"Failed to send {command.command} to {command.actuator_id}",
                details={
                    "module_id": command.module_id,
                    "actuator_id": command.actuator_id,
                },
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
