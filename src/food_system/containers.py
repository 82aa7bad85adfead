"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_system.adapters.hardware_gateway_client import HttpxHardwareGateway
from food_system.adapters.memory_profile_repository import (
    InMemoryConsumptionProfileRepository,
)
from food_system.adapters.memory_recipe_repository import InMemoryRecipeRepository
from food_system.adapters.memory_session_repository import (
    InMemoryCookingSessionRepository,
)
from food_system.adapters.simulated_hardware import (
    SimulatedActuatorSink,
    SimulatedSensorSource,
)
from food_system.adapters.supabase_profile_repository import (
    SupabaseConsumptionProfileRepository,
)
from food_system.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from food_system.adapters.supabase_session_repository import (
    SupabaseCookingSessionRepository,
)
from food_system.adapters.unavailable_hardware import UnavailableHardware
from food_system.config import Settings, parse_storage_backend
from food_system.domain.consumption import AdjustmentSettings
from food_system.services.consumption import (
    ConsumptionProfileRepository,
    ConsumptionService,
)
from food_system.services.cooking import CookingService, CookingSessionRepository
from food_system.services.hardware import ActuatorSink, HardwareService, SensorSource
from food_system.services.rate_limit import RateLimiter
from food_system.services.recipes import RecipeRepository, RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_service: RecipeService
    cooking_service: CookingService
    consumption_service: ConsumptionService
    hardware_service: HardwareService
    api_rate_limiter: RateLimiter
    cooking_rate_limiter: RateLimiter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    recipe_repository, session_repository, profile_repository = _build_repositories(
        resolved_settings
    )
    recipe_service = RecipeService(recipe_repository)
    cooking_service = CookingService(
        repository=session_repository, recipe_service=recipe_service
    )
    consumption_service = ConsumptionService(
        repository=profile_repository,
        default_settings=AdjustmentSettings(
            adjustment_threshold=resolved_settings.waste_adjustment_threshold,
            consultation_required=resolved_settings.consultation_required,
            max_adjustment_per_cycle=resolved_settings.max_adjustment_per_cycle,
            learning_rate=resolved_settings.learning_rate,
        ),
    )

    gateway: HttpxHardwareGateway | None = None
    sensor_source: SensorSource
    actuator_sink: ActuatorSink
    if resolved_settings.hardware_gateway_url:
        gateway = HttpxHardwareGateway.create(
            resolved_settings.hardware_gateway_url,
            timeout=resolved_settings.hardware_timeout_seconds,
        )
        sensor_source = actuator_sink = gateway
    elif resolved_settings.sensor_simulation:
        sensor_source = SimulatedSensorSource()
        actuator_sink = SimulatedActuatorSink()
    else:
        sensor_source = actuator_sink = UnavailableHardware()
    hardware_service = HardwareService(
        sensor_source=sensor_source,
        actuator_sink=actuator_sink,
        polling_interval_seconds=resolved_settings.sensor_polling_interval_ms / 1000,
    )

    api_rate_limiter = RateLimiter(
        name="api",
        max_requests=resolved_settings.rate_limit_max_requests,
        window_seconds=resolved_settings.rate_limit_window_seconds,
    )
    cooking_rate_limiter = RateLimiter(
        name="cooking",
        max_requests=resolved_settings.cooking_rate_limit_max_requests,
        window_seconds=resolved_settings.cooking_rate_limit_window_seconds,
        message="Too many cooking sessions started, please try again later",
    )

    async def close_resources() -> None:
        await hardware_service.stop_all()
        if gateway is not None:
            await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        recipe_service=recipe_service,
        cooking_service=cooking_service,
        consumption_service=consumption_service,
        hardware_service=hardware_service,
        api_rate_limiter=api_rate_limiter,
        cooking_rate_limiter=cooking_rate_limiter,
        close_resources=close_resources,
    )


def _build_repositories(
    settings: Settings,
) -> tuple[
    RecipeRepository, CookingSessionRepository, ConsumptionProfileRepository
]:
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return (
            SupabaseRecipeRepository(client),
            SupabaseCookingSessionRepository(client),
            SupabaseConsumptionProfileRepository(client),
        )
    return (
        InMemoryRecipeRepository(),
        InMemoryCookingSessionRepository(
            capacity=settings.session_capacity,
            terminal_ttl_seconds=settings.session_ttl_seconds,
        ),
        InMemoryConsumptionProfileRepository(),
    )
