"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from food_system.adapters.memory_profile_repository import (
    InMemoryConsumptionProfileRepository,
)
from food_system.adapters.memory_recipe_repository import InMemoryRecipeRepository
from food_system.adapters.memory_session_repository import (
    InMemoryCookingSessionRepository,
)
from food_system.config import Settings
from food_system.containers import AppContainer
from food_system.domain.cooking import CookingSession, SensorReading
from food_system.domain.errors import AutomationError
from food_system.domain.hardware import ActuatorCommand
from food_system.domain.recipes import Instruction, Recipe
from food_system.services.automation import AutomationHook
from food_system.services.consumption import ConsumptionService
from food_system.services.cooking import CookingService
from food_system.services.hardware import ActuatorSink, HardwareService, SensorSource
from food_system.services.rate_limit import RateLimiter
from food_system.services.recipes import RecipeService

START = datetime(2024, 6, 3, 12, 0, tzinfo=UTC)


@dataclass
class FixedClock:
    """Manually advanced clock."""

    now: datetime = START

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@dataclass
class FakeSensorSource(SensorSource):
    """Sensor source returning fixed values per sensor type."""

    values: dict[str, float] = field(default_factory=lambda: {"temperature": 21.5})
    reads: list[tuple[str, str]] = field(default_factory=list)

    async def read(self, module_id: str, sensor_type: str) -> float:
        self.reads.append((module_id, sensor_type))
        return self.values.get(sensor_type, 0.0)


@dataclass
class RecordingActuatorSink(ActuatorSink):
    """Actuator sink that records commands."""

    commands: list[ActuatorCommand] = field(default_factory=list)

    async def send(self, command: ActuatorCommand) -> None:
        self.commands.append(command)


@dataclass
class RecordingAutomationHook(AutomationHook):
    """Automation hook that records readings and can be told to fail."""

    readings: list[SensorReading] = field(default_factory=list)
    fail: bool = False

    async def on_sensor_reading(
        self, session: CookingSession, reading: SensorReading
    ) -> list[str]:
        self.readings.append(reading)
        if self.fail:
            raise AutomationError("Heater did not respond")
        return ["adjust_heat"]


def make_recipe(
    steps: int = 3, timings: list[float | None] | None = None, recipe_id: str = "r1"
) -> Recipe:
    resolved_timings = timings or [5.0] * steps
    return Recipe(
        id=recipe_id,
        name="Tomato soup",
        servings=2,
        instructions=tuple(
            Instruction(step=f"Step {index + 1}", timing=timing)
            for index, timing in enumerate(resolved_timings)
        ),
        created_at=START,
    )


def make_session(
    steps: int = 3, timings: list[float | None] | None = None
) -> CookingSession:
    recipe = make_recipe(steps, timings)
    return CookingSession(
        recipe_id=recipe.id,
        recipe_name=recipe.name,
        instructions=recipe.instructions,
        servings=recipe.servings,
        created_at=START,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        storage_backend="memory",
        sensor_simulation=True,
        hardware_gateway_url=None,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    repository = InMemoryRecipeRepository()
    repository.add(make_recipe())
    return repository


@pytest.fixture
def recipe_service(
    recipe_repository: InMemoryRecipeRepository, clock: FixedClock
) -> RecipeService:
    return RecipeService(recipe_repository, clock=clock)


@pytest.fixture
def session_repository(clock: FixedClock) -> InMemoryCookingSessionRepository:
    return InMemoryCookingSessionRepository(clock=clock)


@pytest.fixture
def automation_hook() -> RecordingAutomationHook:
    return RecordingAutomationHook()


@pytest.fixture
def cooking_service(
    session_repository: InMemoryCookingSessionRepository,
    recipe_service: RecipeService,
    automation_hook: RecordingAutomationHook,
    clock: FixedClock,
) -> CookingService:
    return CookingService(
        repository=session_repository,
        recipe_service=recipe_service,
        automation_hook=automation_hook,
        clock=clock,
    )


@pytest.fixture
def consumption_service(clock: FixedClock) -> ConsumptionService:
    return ConsumptionService(
        repository=InMemoryConsumptionProfileRepository(), clock=clock
    )


@pytest.fixture
def sensor_source() -> FakeSensorSource:
    return FakeSensorSource()


@pytest.fixture
def actuator_sink() -> RecordingActuatorSink:
    return RecordingActuatorSink()


@pytest.fixture
def hardware_service(
    sensor_source: FakeSensorSource,
    actuator_sink: RecordingActuatorSink,
    clock: FixedClock,
) -> HardwareService:
    return HardwareService(
        sensor_source=sensor_source,
        actuator_sink=actuator_sink,
        polling_interval_seconds=60,
        clock=clock,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    recipe_service: RecipeService,
    cooking_service: CookingService,
    consumption_service: ConsumptionService,
    hardware_service: HardwareService,
    clock: FixedClock,
) -> AppContainer:
    async def close_resources() -> None:
        await hardware_service.stop_all()

    return AppContainer(
        settings=settings,
        recipe_service=recipe_service,
        cooking_service=cooking_service,
        consumption_service=consumption_service,
        hardware_service=hardware_service,
        api_rate_limiter=RateLimiter(
            name="api", max_requests=1000, window_seconds=900, clock=clock
        ),
        cooking_rate_limiter=RateLimiter(
            name="cooking", max_requests=3, window_seconds=300, clock=clock
        ),
        close_resources=close_resources,
    )
